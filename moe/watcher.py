from watchdog.observers import Observer
from watchdog.events import FileSystemEventHandler
import logging
import threading
from pathlib import Path
from typing import Dict, Iterable, Optional
from .compiler import MoeCompiler
from .config import WatchConfig

logger = logging.getLogger(__name__)


def write_preview(dst: Path, html: str) -> None:
    """Replaces the whole content of dst with html."""
    with open(dst, "w", encoding="utf-8") as f:
        f.write(html)


def trigger_recompile(write_pairs: Dict[Path, Path], compiler: MoeCompiler) -> int:
    """Compiles every source to its output file. Returns how many pairs were written."""
    written = 0
    for (src, dst) in write_pairs.items():
        try:
            source = src.read_text(encoding="utf-8")
            write_preview(dst, compiler.compile(source))
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Could not rebuild %s -> %s: %s", src, dst, e)
            continue
        logger.info("Compiled %s -> %s", src, dst)
        written += 1
    return written


class ChangeHandler(FileSystemEventHandler):
    """
    Recompiles after a watched file changes.

    Each modification restarts a timer, so a burst of saves produces a
    single rebuild once the files have been quiet for `debounce` seconds.
    """

    def __init__(self, files_to_watch: Iterable[Path], write_pairs: Dict[Path, Path],
                 compiler: MoeCompiler, debounce: float):
        self.files_to_watch = {x.resolve() for x in files_to_watch}  # absolute paths (sources + extra watches)
        self.write_pairs = write_pairs
        self.compiler = compiler
        self.debounce = debounce
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()
        self._build_lock = threading.Lock()
        logger.info("Handler initialized. Monitoring for changes...")

    def on_modified(self, event):
        if event.is_directory:
            return

        # Resolve path and check if it's one we care about
        src_path_abs = Path(event.src_path).resolve()
        if src_path_abs in self.files_to_watch:
            logger.info("Detected modification in: %s", src_path_abs)
            self.schedule()

    def schedule(self) -> None:
        """Restarts the debounce timer."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.debounce, self.rebuild)
            self._timer.daemon = True
            self._timer.start()

    def rebuild(self) -> None:
        with self._lock:
            self._timer = None
        # Output writes must not interleave
        with self._build_lock:
            trigger_recompile(self.write_pairs, self.compiler)

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None


def compile_once(config: WatchConfig) -> int:
    """Compiles every configured pair once."""
    compiler = MoeCompiler(lang=config.lang, direction=config.direction)
    return trigger_recompile(config.write_pairs, compiler)


def run_watcher(config: WatchConfig):
    """Sets up and runs the watchdog observer."""
    files_to_watch = set(config.write_pairs.keys()) | config.watch_paths
    dirs_to_watch = {p.resolve().parent for p in files_to_watch}

    logging.basicConfig(level=logging.INFO,
                        format='%(asctime)s - %(message)s',
                        datefmt='%Y-%m-%d %H:%M:%S')

    compiler = MoeCompiler(lang=config.lang, direction=config.direction)
    # Initial build, before any edit
    trigger_recompile(config.write_pairs, compiler)

    event_handler = ChangeHandler(files_to_watch, config.write_pairs, compiler, config.debounce)
    observer = Observer()

    scheduled_count = 0
    for dir_path in dirs_to_watch:
        if not dir_path.is_dir():
            logger.warning("Directory '%s' does not exist. Cannot watch.", dir_path)
            continue

        # recursive=False: only events directly within this directory
        observer.schedule(event_handler, str(dir_path), recursive=False)
        scheduled_count += 1
        logger.info("Scheduled watcher for directory: %s", dir_path)

    if scheduled_count == 0:
        logger.error("No watchers were successfully scheduled. Exiting.")
        return

    observer.start()
    logger.info("Watching for file changes in %d director%s. Press Ctrl+C to stop.",
                scheduled_count, 'y' if scheduled_count == 1 else 'ies')

    try:
        while observer.is_alive():
            observer.join(timeout=1)  # Wait for observer thread, check status periodically
    except KeyboardInterrupt:
        logger.info("Stopping watcher (Ctrl+C pressed)...")
    finally:
        event_handler.cancel()
        if observer.is_alive():
            observer.stop()
        # Wait for the observer thread to fully finish shutting down
        observer.join()
        logger.info("Watcher stopped completely.")
