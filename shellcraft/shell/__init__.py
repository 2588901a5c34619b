"""Shell startup scripts: entity recognition, parsing and line-safe edits."""

from .entities import (
    AliasCategory, ShellAlias, ShellFunction, EnvironmentVariable,
    PathEntry, SourceDirective, ParsedShellConfig,
)
from .recognizer import LineMatch, recognize_line, scan_function, unquote, is_keychain_derived
from .parser import ShellConfigParser, parse_buffer, parse_text, parse_files
from .writer import (
    generate_alias_line, generate_export_line, generate_keychain_export_line,
    generate_function_block, generate_path_export_line,
)
from .editor import ShellConfigEditor

__all__ = [
    "AliasCategory", "ShellAlias", "ShellFunction", "EnvironmentVariable",
    "PathEntry", "SourceDirective", "ParsedShellConfig",
    "LineMatch", "recognize_line", "scan_function", "unquote", "is_keychain_derived",
    "ShellConfigParser", "parse_buffer", "parse_text", "parse_files",
    "generate_alias_line", "generate_export_line", "generate_keychain_export_line",
    "generate_function_block", "generate_path_export_line",
    "ShellConfigEditor",
]
