"""
Score Trace

Every score is built as an ordered list of (tag, value) contributions. The
entries stay structured all the way through scoring and adjustment; they are
turned into display strings only by render_trace(), which the audit logger and
UI boundary call.
"""

from typing import Iterable, List, NamedTuple, Optional, Tuple

from drone_ai.weights import INVALID_SCORE

INVALID_TAG = "Invalid"


class TraceEntry(NamedTuple):
    tag: str
    value: float = 0.0
    note: str = ""


class Evaluation:
    """Running score plus the trace that explains it"""

    __slots__ = ("score", "entries", "invalid")

    def __init__(self, score: float = 0.0, entries: Optional[Iterable[TraceEntry]] = None):
        self.score = score
        self.entries: List[TraceEntry] = list(entries or [])
        self.invalid = False

    def add(self, tag: str, value: float, note: str = "") -> 'Evaluation':
        """Append a scored contribution. Zero values are kept in the trace."""
        self.entries.append(TraceEntry(tag, value, note))
        self.score += value
        return self

    def info(self, tag: str, note: str = "") -> 'Evaluation':
        self.entries.append(TraceEntry(tag, 0.0, note))
        return self

    def invalidate(self, reason: str) -> 'Evaluation':
        """Mark as rule-violating: score becomes the sentinel, reason is kept"""
        self.entries.append(TraceEntry(INVALID_TAG, INVALID_SCORE, reason))
        self.score = INVALID_SCORE
        self.invalid = True
        return self

    def merge(self, other: 'Evaluation') -> 'Evaluation':
        self.entries.extend(other.entries)
        self.score += other.score
        self.invalid = self.invalid or other.invalid
        return self

    def scale(self, tag: str, factor: float, note: str = "") -> 'Evaluation':
        """Multiply the running score, recording the difference as one entry"""
        delta = self.score * factor - self.score
        return self.add(tag, delta, note or f"x{factor:g}")

    def has(self, tag: str) -> bool:
        return any(e.tag == tag for e in self.entries)

    def value_of(self, tag: str) -> float:
        """Sum of contributions recorded under `tag` (0 when absent)"""
        return sum(e.value for e in self.entries if e.tag == tag)

    def note_of(self, tag: str) -> Optional[str]:
        for entry in self.entries:
            if entry.tag == tag:
                return entry.note
        return None

    def pairs(self) -> List[Tuple[str, float]]:
        return [(e.tag, e.value) for e in self.entries]

    def __repr__(self):
        return f"Evaluation(score={self.score:.1f}, entries={len(self.entries)})"


def render_entry(entry: TraceEntry) -> str:
    text = f"{entry.tag}: {entry.note}" if entry.note else entry.tag
    if entry.value:
        return f"{text} ({entry.value:+.1f})"
    return text


def render_trace(entries: Iterable[TraceEntry]) -> List[str]:
    return [render_entry(entry) for entry in entries]
