"""
Mutation engine — applies a batch of declarative line edits to a buffer.

Every index in a batch refers to the buffer *before* the batch is applied.
Index-bearing operations are applied bottom-up (highest index first) so an
insertion or deletion never shifts a line that a pending operation still
points at.  Appends run last, in the order given.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Union

logger = logging.getLogger(__name__)


class ModificationError(Exception):
    """Raised when a modification batch violates the engine's contract."""


class ModificationConflictError(ModificationError):
    """Two operations in one batch target the same line ambiguously."""


class ModificationRangeError(ModificationError):
    """An operation references a line index outside the buffer."""


@dataclass(frozen=True)
class UpdateLine:
    """Replace the text of one line without moving it."""
    index: int
    text: str


@dataclass(frozen=True)
class InsertAfter:
    """Insert ``lines`` immediately after ``index`` (``-1`` = top of file)."""
    index: int
    lines: tuple[str, ...]

    def __init__(self, index: int, lines: Union[str, Iterable[str]]) -> None:
        if isinstance(lines, str):
            lines = (lines,)
        object.__setattr__(self, "index", index)
        object.__setattr__(self, "lines", tuple(lines))


@dataclass(frozen=True)
class DeleteLine:
    """Remove exactly one line."""
    index: int


@dataclass(frozen=True)
class AppendLine:
    """Append a line at the end of the already-mutated buffer."""
    text: str


Modification = Union[UpdateLine, InsertAfter, DeleteLine, AppendLine]

# Pairs of operation kinds that may share an index in one batch.
_COMPATIBLE = {
    frozenset({UpdateLine, InsertAfter}),
}


def validate_modifications(
    modifications: Iterable[Modification],
    line_count: int,
) -> list[Modification]:
    """Check a batch against a buffer of ``line_count`` lines.

    Returns the batch as a list.  Raises :class:`ModificationRangeError` or
    :class:`ModificationConflictError` without touching any buffer.
    """
    batch = list(modifications)
    seen: dict[int, list[type]] = {}

    for mod in batch:
        if isinstance(mod, AppendLine):
            continue
        if isinstance(mod, InsertAfter):
            low = -1
        elif isinstance(mod, (UpdateLine, DeleteLine)):
            low = 0
        else:
            raise ModificationError(f"Unknown modification: {mod!r}")

        if not low <= mod.index < line_count:
            raise ModificationRangeError(
                f"{type(mod).__name__} index {mod.index} is outside "
                f"the buffer ({line_count} lines)"
            )

        kinds = seen.setdefault(mod.index, [])
        for other in kinds:
            if frozenset({type(mod), other}) not in _COMPATIBLE:
                raise ModificationConflictError(
                    f"{other.__name__} and {type(mod).__name__} both "
                    f"target line index {mod.index}"
                )
        kinds.append(type(mod))

    return batch


def apply_modifications(
    lines: list[str],
    modifications: Iterable[Modification],
) -> list[str]:
    """Apply a batch of modifications to ``lines`` in place.

    The whole batch is validated first, so a rejected batch leaves ``lines``
    unchanged.  Returns ``lines`` for convenience.
    """
    batch = validate_modifications(modifications, len(lines))
    if not batch:
        return lines

    indexed = [m for m in batch if not isinstance(m, AppendLine)]
    appends = [m for m in batch if isinstance(m, AppendLine)]

    # Stable sort: descending index, construction order kept for ties.
    for mod in sorted(indexed, key=lambda m: m.index, reverse=True):
        if isinstance(mod, UpdateLine):
            lines[mod.index] = mod.text
        elif isinstance(mod, InsertAfter):
            pos = mod.index + 1
            lines[pos:pos] = list(mod.lines)
        elif isinstance(mod, DeleteLine):
            del lines[mod.index]

    for mod in appends:
        lines.append(mod.text)

    logger.debug(
        "[ShellEdit] Applied %d indexed and %d append modifications",
        len(indexed), len(appends),
    )
    return lines
