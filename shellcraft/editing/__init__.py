"""Line-preserving editing: the line buffer and the mutation engine, plus edit history."""

from .line_buffer import LineBuffer, RawLine
from .modifications import (
    UpdateLine, InsertAfter, DeleteLine, AppendLine, Modification,
    apply_modifications, validate_modifications,
    ModificationError, ModificationConflictError, ModificationRangeError,
)
from .history import record_edit, read_history, read_edit_stats

__all__ = [
    "LineBuffer", "RawLine",
    "UpdateLine", "InsertAfter", "DeleteLine", "AppendLine", "Modification",
    "apply_modifications", "validate_modifications",
    "ModificationError", "ModificationConflictError", "ModificationRangeError",
    "record_edit", "read_history", "read_edit_stats",
]
