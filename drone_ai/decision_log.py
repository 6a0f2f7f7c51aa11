"""
Decision Audit Logger

Renders a finished decision (every candidate, its score and its rendered
trace) into a single record on a dedicated logger. The logger does not
propagate to the root logger; hosts that want the records on disk call
attach_file_handler().
"""

import logging
from pathlib import Path
from typing import Optional, Union

audit_logger = logging.getLogger("drone_ai.audit")
audit_logger.setLevel(logging.INFO)
audit_logger.propagate = False  # Don't mix with the main log stream

_file_handler: Optional[logging.FileHandler] = None


def attach_file_handler(path: Union[str, Path]) -> logging.FileHandler:
    """Send audit records to `path`, replacing any handler attached earlier"""
    global _file_handler
    if _file_handler is not None:
        audit_logger.removeHandler(_file_handler)
        _file_handler.close()
    _file_handler = logging.FileHandler(str(path))
    _file_handler.setFormatter(logging.Formatter('%(message)s'))  # Raw format
    audit_logger.addHandler(_file_handler)
    return _file_handler


def detach_file_handler():
    global _file_handler
    if _file_handler is not None:
        audit_logger.removeHandler(_file_handler)
        _file_handler.close()
        _file_handler = None


def format_decision(kind: str, decision, turn: int = 0) -> str:
    """
    Render a decision as plain text.

    Works for action/deployment decisions and interception decisions; both
    carry a `summary` line and a `log_context` of entries with display_text,
    score, is_chosen and rendered_trace().
    """
    lines = [f"=== {kind.upper()} DECISION (turn {turn}) ===", decision.summary]
    ranked = sorted(decision.log_context, key=lambda c: c.score, reverse=True)
    for entry in ranked:
        marker = "*" if entry.is_chosen else " "
        lines.append(f"{marker} {entry.score:8.1f}  {entry.display_text}")
        for reason in entry.rendered_trace():
            lines.append(f"              - {reason}")
    lines.append("=" * 50)
    return '\n'.join(lines)


def log_decision(kind: str, decision, turn: int = 0):
    if not audit_logger.isEnabledFor(logging.INFO):
        return
    audit_logger.info(format_decision(kind, decision, turn))
