"""
replbook — notebook client for a remote REPL evaluator.

Type an expression, send it to the evaluator, and keep the results as an
append-only transcript of input/output cells.
"""

from replbook.client import Replbook, AsyncReplbook
from replbook.notebook import NotebookEngine
from replbook.sessions import SessionBinder, SessionState
from replbook.models.cell import Cell, CellStatus
from replbook.errors import ReplbookError, HttpError, SessionError, TransportError

__version__ = "0.1.0"
__all__ = [
    "Replbook",
    "AsyncReplbook",
    "NotebookEngine",
    "SessionBinder",
    "SessionState",
    "Cell",
    "CellStatus",
    "ReplbookError",
    "HttpError",
    "SessionError",
    "TransportError",
]
