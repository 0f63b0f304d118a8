from .config import load_config
from .watcher import compile_once, run_watcher
import argparse
import sys
from pathlib import Path
import time


def main(argv=None):
    parser = argparse.ArgumentParser(
                        prog='moe',
                        description='Compile Moe markup to HTML and rebuild it whenever the source changes',
                        epilog='The config file lists write: [{src, dst}] pairs and optional watch globs')
    parser.add_argument('config')
    parser.add_argument('--once', action='store_true', help='compile every source once and exit')
    args = parser.parse_args(argv)
    config_path = Path(args.config)

    if args.once:
        cfg = load_config(config_path)
        written = compile_once(cfg)
        return 0 if written == len(cfg.write_pairs) else 1

    while True:
        try:
            cfg = load_config(config_path)
            run_watcher(cfg)
            return 0
        except Exception as e:
            print(f"Error: {e}")
            print("Please check your configuration and try again, attempting to reload in 3 seconds...")
            time.sleep(3)
            continue


if __name__ == '__main__':
    sys.exit(main())
