"""
Typed entities recognised in shell startup scripts.

Line references (``source_line``, ``line_range``) are zero-based and are a
snapshot: they are only valid until the next modification batch is applied
to the buffer they came from.  Re-parse after every write.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ..editing.line_buffer import LineBuffer


class AliasCategory(str, Enum):
    GIT = "Git"
    NAVIGATION = "Navigation"
    DOCKER = "Docker"
    SYSTEM = "System"
    NETWORK = "Network"
    GENERAL = "General"

    @classmethod
    def infer(cls, name: str, expansion: str) -> "AliasCategory":
        """Guess a category from keywords in the alias name and expansion."""
        combined = f"{name} {expansion}".lower()
        if any(k in combined for k in ("git", "gco", "gst")):
            return cls.GIT
        if any(k in combined for k in ("cd ", "ls", "..")):
            return cls.NAVIGATION
        if any(k in combined for k in ("docker", "dps", "dex")):
            return cls.DOCKER
        if any(k in combined for k in ("brew", "sudo", "kill")):
            return cls.SYSTEM
        if any(k in combined for k in ("curl", "ssh", "ping")):
            return cls.NETWORK
        return cls.GENERAL


@dataclass
class ShellAlias:
    name: str
    expansion: str
    source_file: str = ""
    source_line: int = 0
    category: AliasCategory = AliasCategory.GENERAL
    enabled: bool = True

    @property
    def line_number(self) -> int:
        return self.source_line + 1


@dataclass
class ShellFunction:
    name: str
    body: str
    source_file: str = ""
    line_range: tuple[int, int] = (0, 0)   # closed interval
    description: str = ""

    @property
    def line_count(self) -> int:
        return self.line_range[1] - self.line_range[0] + 1

    @property
    def full_text(self) -> str:
        """Full function text including declaration and braces."""
        return f"{self.name}() {{\n{self.body}\n}}"


@dataclass
class EnvironmentVariable:
    key: str
    value: str
    source_file: str = ""
    source_line: int = 0
    keychain_derived: bool = False

    @property
    def line_number(self) -> int:
        return self.source_line + 1


@dataclass
class PathEntry:
    path: str
    order: int = 0
    source_file: str = ""
    source_line: int = 0
    expanded_path: str = ""
    exists: bool = True


@dataclass
class SourceDirective:
    target: str
    resolved_path: str
    source_file: str = ""
    source_line: int = 0
    guarded: bool = False


@dataclass
class ParsedShellConfig:
    """Everything recognised across one or more shell files."""
    aliases: list[ShellAlias] = field(default_factory=list)
    functions: list[ShellFunction] = field(default_factory=list)
    path_entries: list[PathEntry] = field(default_factory=list)
    environment_variables: list[EnvironmentVariable] = field(default_factory=list)
    sources: list[SourceDirective] = field(default_factory=list)
    buffers: dict[str, LineBuffer] = field(default_factory=dict)

    def merge(self, other: "ParsedShellConfig") -> None:
        self.aliases.extend(other.aliases)
        self.functions.extend(other.functions)
        self.path_entries.extend(other.path_entries)
        self.environment_variables.extend(other.environment_variables)
        self.sources.extend(other.sources)
        self.buffers.update(other.buffers)
