from dataclasses import dataclass, field
from typing import Dict, List, Optional

ID_PREFIX = 'moe-ref'

# Pushed for blocks that open no element (e.g. `OnClick {`), closes silently
BLOCK_MARKER = ''


@dataclass(frozen=True)
class PendingEvent:
    event_type: str
    target_id: str


@dataclass
class CompileSession:
    """
    State of one compilation run.

    A new session is created for every MoeCompiler.compile() call, so
    nothing carries over between runs and concurrent calls never share
    state. The two pending registers are single-slot: setting one
    overwrites it, and the take_* accessors return the value and clear it.
    """
    scripts: List[str] = field(default_factory=list)
    block_stack: List[str] = field(default_factory=list)
    generated_ids: int = 0
    last_element_id: Optional[str] = None
    _pending_styles: Dict[str, str] = field(default_factory=dict)
    _pending_event: Optional[PendingEvent] = None

    def next_id(self) -> str:
        """Returns a fresh element id, numbered from 1 within this session."""
        self.generated_ids += 1
        return f"{ID_PREFIX}-{self.generated_ids}"

    # --- Pending styles ---

    def add_style(self, prop: str, value: str) -> None:
        self._pending_styles[prop] = value

    def take_styles(self) -> str:
        """Serializes pending styles to an inline style string and clears them."""
        style = ''.join(f"{prop}:{value};" for prop, value in self._pending_styles.items())
        self._pending_styles = {}
        return style

    # --- Pending event binding ---

    def bind_event(self, event_type: str) -> bool:
        """
        Records an event binding on the last emitted element.
        Returns False (and records nothing) if no element has been emitted yet.
        """
        if not self.last_element_id:
            return False
        self._pending_event = PendingEvent(event_type, self.last_element_id)
        return True

    def take_event(self) -> Optional[PendingEvent]:
        event = self._pending_event
        self._pending_event = None
        return event

    # --- Block stack ---

    def open_block(self, tag: str) -> None:
        self.block_stack.append(tag)

    def close_block(self) -> Optional[str]:
        """Pops the innermost block. Returns None if no block is open."""
        if not self.block_stack:
            return None
        return self.block_stack.pop()

    def drain_blocks(self) -> List[str]:
        """Pops every open block, innermost first."""
        drained = list(reversed(self.block_stack))
        self.block_stack = []
        return drained
