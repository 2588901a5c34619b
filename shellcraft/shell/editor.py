"""
Shell config editor — turns entity-level edits into a modification batch and
commits it to disk in one atomic write.

Entity line references are a snapshot of the buffer at load time.  Every
staged modification refers to that snapshot; after :meth:`commit` the file
is re-parsed so the entities carry fresh line numbers.

Usage::

    editor = ShellConfigEditor("~/.zshrc")
    ll = editor.find_alias("ll")
    editor.update_alias(ll, expansion="ls -lah")
    editor.add_alias("gs", "git status")
    editor.commit()
"""

from __future__ import annotations

import logging
import os
from collections import Counter
from typing import Iterable, Optional

from ..editing.history import record_edit
from ..editing.line_buffer import LineBuffer
from ..editing.modifications import (
    AppendLine, DeleteLine, InsertAfter, Modification, UpdateLine,
    validate_modifications,
)
from ..fileio import read_text, write_text
from ..paths import expand_home
from .entities import (
    EnvironmentVariable, ParsedShellConfig, PathEntry, ShellAlias,
    ShellFunction, SourceDirective,
)
from .parser import parse_buffer
from .writer import (
    generate_alias_line, generate_export_line, generate_function_block,
    generate_keychain_export_line, generate_path_export_line,
)

logger = logging.getLogger(__name__)


class ShellConfigEditor:
    """Editing session for a single shell startup file.

    Parameters
    ----------
    path:
        File label as shown to the user, e.g. ``~/.zshrc``.  A missing file
        is treated as empty and created on commit.
    backup:
        Take a timestamped backup before each write.
    backup_root, backup_keep:
        Backup store location and retention.
    history_file:
        Edit history log; ``None`` uses the default location.
    record_history:
        Append an entry to the edit history on each commit.
    home:
        Home directory override.
    """

    def __init__(
        self,
        path: str,
        *,
        backup: bool = True,
        backup_root: Optional[str] = None,
        backup_keep: int = 20,
        history_file: Optional[str] = None,
        record_history: bool = True,
        home: Optional[str] = None,
    ) -> None:
        self.path = path
        self._backup = backup
        self._backup_root = backup_root
        self._backup_keep = backup_keep
        self._history_file = history_file
        self._record_history = record_history
        self._home = home
        self._pending: list[Modification] = []
        self.buffer = LineBuffer()
        self.config = ParsedShellConfig()
        self.reload()

    # ------------------------------------------------------------------
    # Loading and inspection
    # ------------------------------------------------------------------

    @property
    def real_path(self) -> str:
        return expand_home(self.path, self._home)

    def reload(self) -> None:
        """Re-read the file, re-parse it and drop any staged edits."""
        real = self.real_path
        text = read_text(real) if os.path.exists(real) else ""
        self.buffer = LineBuffer.from_text(text)
        self.config = parse_buffer(self.buffer, self.path, self._home)
        self.config.buffers[self.path] = self.buffer
        self._pending = []

    @property
    def aliases(self) -> list[ShellAlias]:
        return self.config.aliases

    @property
    def functions(self) -> list[ShellFunction]:
        return self.config.functions

    @property
    def variables(self) -> list[EnvironmentVariable]:
        return self.config.environment_variables

    @property
    def path_entries(self) -> list[PathEntry]:
        return self.config.path_entries

    @property
    def sources(self) -> list[SourceDirective]:
        return self.config.sources

    @property
    def pending(self) -> list[Modification]:
        return list(self._pending)

    def find_alias(self, name: str) -> Optional[ShellAlias]:
        return next((a for a in self.aliases if a.name == name), None)

    def find_function(self, name: str) -> Optional[ShellFunction]:
        return next((f for f in self.functions if f.name == name), None)

    def find_variable(self, key: str) -> Optional[EnvironmentVariable]:
        return next((v for v in self.variables if v.key == key), None)

    # ------------------------------------------------------------------
    # Staging
    # ------------------------------------------------------------------

    def stage(self, *modifications: Modification) -> None:
        """Add raw modifications to the batch.

        The combined batch is validated immediately, so a conflicting edit
        is rejected here rather than at commit time.
        """
        batch = self._pending + list(modifications)
        validate_modifications(batch, len(self.buffer))
        self._pending = batch

    def _line_ending(self, index: Optional[int] = None) -> str:
        """``"\\r"`` if the line at *index* (or, with no index, any line of
        the file) ends with a carriage return."""
        if index is not None and 0 <= index < len(self.buffer):
            return "\r" if self.buffer[index].endswith("\r") else ""
        return "\r" if any(line.endswith("\r") for line in self.buffer) else ""

    def _stage_lines(self, *modifications: Modification) -> None:
        """Stage generated lines, matching the file's CRLF line endings."""
        adjusted: list[Modification] = []
        for mod in modifications:
            if isinstance(mod, UpdateLine):
                mod = UpdateLine(mod.index, mod.text + self._line_ending(mod.index))
            elif isinstance(mod, InsertAfter):
                eol = self._line_ending(mod.index)
                mod = InsertAfter(mod.index, [line + eol for line in mod.lines])
            elif isinstance(mod, AppendLine):
                mod = AppendLine(mod.text + self._line_ending())
            adjusted.append(mod)
        self.stage(*adjusted)

    def _owned(self, entity) -> None:
        if entity.source_file != self.path:
            raise ValueError(
                f"{type(entity).__name__} comes from {entity.source_file!r}, "
                f"not {self.path!r}"
            )

    def update_alias(
        self,
        alias: ShellAlias,
        *,
        name: Optional[str] = None,
        expansion: Optional[str] = None,
        enabled: Optional[bool] = None,
    ) -> None:
        self._owned(alias)
        line = generate_alias_line(
            name if name is not None else alias.name,
            expansion if expansion is not None else alias.expansion,
            enabled if enabled is not None else alias.enabled,
        )
        self._stage_lines(UpdateLine(alias.source_line, line))

    def set_alias_enabled(self, alias: ShellAlias, enabled: bool) -> None:
        self.update_alias(alias, enabled=enabled)

    def delete_alias(self, alias: ShellAlias) -> None:
        self._owned(alias)
        self._stage_lines(DeleteLine(alias.source_line))

    def add_alias(self, name: str, expansion: str, enabled: bool = True) -> None:
        self._stage_lines(AppendLine(generate_alias_line(name, expansion, enabled)))

    def update_function(
        self,
        function: ShellFunction,
        *,
        name: Optional[str] = None,
        body: Optional[str] = None,
    ) -> None:
        """Replace a function's whole line range with a regenerated block."""
        self._owned(function)
        start, end = function.line_range
        block = generate_function_block(
            name if name is not None else function.name,
            body if body is not None else function.body,
        )
        mods: list[Modification] = [
            UpdateLine(start, block[0]),
            InsertAfter(start, block[1:]),
        ]
        mods.extend(DeleteLine(i) for i in range(start + 1, end + 1))
        self._stage_lines(*mods)

    def delete_function(self, function: ShellFunction) -> None:
        self._owned(function)
        start, end = function.line_range
        self._stage_lines(*(DeleteLine(i) for i in range(start, end + 1)))

    def add_function(self, name: str, body: str, description: str = "") -> None:
        mods: list[Modification] = [AppendLine("")]
        if description:
            mods.append(AppendLine(f"# {description}"))
        mods.extend(AppendLine(line) for line in generate_function_block(name, body))
        self._stage_lines(*mods)

    def update_variable(
        self,
        variable: EnvironmentVariable,
        *,
        key: Optional[str] = None,
        value: Optional[str] = None,
    ) -> None:
        """Rewrite an export line.

        Renaming a keychain-derived variable without a new value regenerates
        the lookup for the conventional ``env/KEY`` service.
        """
        self._owned(variable)
        new_key = key if key is not None else variable.key
        if variable.keychain_derived and value is None and new_key != variable.key:
            line = generate_keychain_export_line(new_key)
        else:
            line = generate_export_line(
                new_key, value if value is not None else variable.value
            )
        self._stage_lines(UpdateLine(variable.source_line, line))

    def delete_variable(self, variable: EnvironmentVariable) -> None:
        self._owned(variable)
        self._stage_lines(DeleteLine(variable.source_line))

    def add_variable(self, key: str, value: str = "", keychain: bool = False) -> None:
        if keychain:
            line = generate_keychain_export_line(key)
        else:
            line = generate_export_line(key, value)
        self._stage_lines(AppendLine(line))

    def set_path_entries(self, entries: Iterable[PathEntry]) -> None:
        """Replace every PATH assignment with one line built from *entries*.

        The new line takes the place of the first existing PATH line; the
        others are deleted.  With no existing PATH line it is appended.
        """
        entries = list(entries)
        path_lines = sorted({e.source_line for e in self.path_entries})
        mods: list[Modification] = []
        if path_lines:
            first, rest = path_lines[0], path_lines[1:]
            if entries:
                mods.append(UpdateLine(first, generate_path_export_line(entries)))
            else:
                mods.append(DeleteLine(first))
            mods.extend(DeleteLine(i) for i in rest)
        elif entries:
            mods.append(AppendLine(generate_path_export_line(entries)))
        if mods:
            self._stage_lines(*mods)

    # ------------------------------------------------------------------
    # Commit
    # ------------------------------------------------------------------

    def preview(self) -> str:
        """Return the text the staged batch would produce."""
        return self.buffer.copy().apply(self._pending).to_text()

    def discard(self) -> None:
        self._pending = []

    def commit(self) -> bool:
        """Apply the staged batch, write the file and re-parse.

        Returns False when nothing was staged.  A rejected batch or a failed
        write leaves the file untouched.
        """
        if not self._pending:
            return False

        updated = self.buffer.copy().apply(self._pending)
        write_text(
            self.real_path,
            updated.to_text(),
            backup=self._backup,
            backup_root=self._backup_root,
            backup_keep=self._backup_keep,
        )

        counts = Counter(type(m).__name__ for m in self._pending)
        logger.info(
            "[ShellEdit] Committed %d modifications to %s",
            len(self._pending), self.path,
        )
        if self._record_history:
            record_edit(
                {
                    "file": self.path,
                    "updated": counts.get("UpdateLine", 0),
                    "inserted": sum(
                        len(m.lines) for m in self._pending if isinstance(m, InsertAfter)
                    ),
                    "deleted": counts.get("DeleteLine", 0),
                    "appended": counts.get("AppendLine", 0),
                },
                history_file=self._history_file,
            )

        self.reload()
        return True
