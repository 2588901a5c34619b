"""
Git config model — sections of ordered key/value entries.

Several sections may share a (name, subsection) pair; they form one logical
section whose entries are read in order across all of them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class GitConfigEntry:
    key: str
    value: str = ""


@dataclass
class GitConfigSection:
    name: str
    subsection: Optional[str] = None
    entries: list[GitConfigEntry] = field(default_factory=list)

    @property
    def identity(self) -> tuple[str, Optional[str]]:
        return (self.name, self.subsection)

    @property
    def display_name(self) -> str:
        if self.subsection is not None:
            return f'[{self.name} "{self.subsection}"]'
        return f"[{self.name}]"


@dataclass
class GitConfig:
    sections: list[GitConfigSection] = field(default_factory=list)

    def _matching(self, section: str, subsection: Optional[str]) -> list[GitConfigSection]:
        return [s for s in self.sections if s.identity == (section, subsection)]

    def logical_sections(self) -> list[GitConfigSection]:
        """Return one section per (name, subsection), first-seen order,
        holding every entry recorded under that pair."""
        merged: dict[tuple[str, Optional[str]], GitConfigSection] = {}
        for section in self.sections:
            target = merged.get(section.identity)
            if target is None:
                target = GitConfigSection(section.name, section.subsection)
                merged[section.identity] = target
            target.entries.extend(
                GitConfigEntry(e.key, e.value) for e in section.entries
            )
        return list(merged.values())

    def section(self, name: str, subsection: Optional[str] = None) -> Optional[GitConfigSection]:
        """Merged, read-only copy of a logical section, or None.

        Changes to the returned entries are not written back; use
        :meth:`set_value` and :meth:`remove_value` to modify the config.
        """
        return next(
            (s for s in self.logical_sections() if s.identity == (name, subsection)),
            None,
        )

    def value(self, section: str, key: str, subsection: Optional[str] = None) -> Optional[str]:
        """First value of *key*, or None."""
        values = self.values(section, key, subsection)
        return values[0] if values else None

    def values(self, section: str, key: str, subsection: Optional[str] = None) -> list[str]:
        """Every value of a (possibly multi-valued) key, in file order."""
        return [
            e.value
            for s in self._matching(section, subsection)
            for e in s.entries
            if e.key == key
        ]

    def set_value(
        self,
        section: str,
        key: str,
        value: str,
        subsection: Optional[str] = None,
    ) -> None:
        """Update the first occurrence of *key*, or append it."""
        matching = self._matching(section, subsection)
        for s in matching:
            for entry in s.entries:
                if entry.key == key:
                    entry.value = value
                    return
        if matching:
            matching[0].entries.append(GitConfigEntry(key, value))
        else:
            self.sections.append(
                GitConfigSection(section, subsection, [GitConfigEntry(key, value)])
            )

    def remove_value(self, section: str, key: str, subsection: Optional[str] = None) -> int:
        """Remove every occurrence of *key*; returns the number removed."""
        removed = 0
        for s in self._matching(section, subsection):
            before = len(s.entries)
            s.entries = [e for e in s.entries if e.key != key]
            removed += before - len(s.entries)
        return removed

    def remove_section(self, section: str, subsection: Optional[str] = None) -> bool:
        before = len(self.sections)
        self.sections = [
            s for s in self.sections if s.identity != (section, subsection)
        ]
        return len(self.sections) != before
