"""
shellcraft — round-trip-safe editing of shell startup files and git config.

Public API for library usage::

    from shellcraft import ShellConfigEditor, parse_git_config

    editor = ShellConfigEditor("~/.zshrc")
    editor.add_alias("gs", "git status")
    editor.commit()
"""

from .editing import (
    LineBuffer, UpdateLine, InsertAfter, DeleteLine, AppendLine,
    apply_modifications, ModificationError, ModificationConflictError,
    ModificationRangeError,
)
from .fileio import FileIOError
from .gitconfig import GitConfig, parse_git_config, serialize_git_config
from .paths import expand_home, validate_path_entries
from .shell import ShellConfigEditor, ShellConfigParser, parse_text, recognize_line

__version__ = "0.1.0"

__all__ = [
    "LineBuffer", "UpdateLine", "InsertAfter", "DeleteLine", "AppendLine",
    "apply_modifications", "ModificationError", "ModificationConflictError",
    "ModificationRangeError",
    "FileIOError",
    "GitConfig", "parse_git_config", "serialize_git_config",
    "expand_home", "validate_path_entries",
    "ShellConfigEditor", "ShellConfigParser", "parse_text", "recognize_line",
]
