"""
Line generators — canonical shell text for new or edited entities.
"""

from __future__ import annotations

from typing import Iterable

from .entities import PathEntry


def generate_alias_line(name: str, expansion: str, enabled: bool = True) -> str:
    """``alias name='expansion'``; double quotes when the expansion has ``'``."""
    prefix = "" if enabled else "# "
    if "'" in expansion:
        return f'{prefix}alias {name}="{expansion}"'
    return f"{prefix}alias {name}='{expansion}'"


def generate_export_line(key: str, value: str) -> str:
    """``export KEY="value"``; command substitutions are left unquoted."""
    if "$(" in value or "`" in value:
        return f"export {key}={value}"
    return f'export {key}="{value}"'


def keychain_service_name(key: str) -> str:
    return f"env/{key}"


def generate_keychain_export_line(key: str, service: str | None = None) -> str:
    """Export line that reads *key* from the login keychain at shell start."""
    service = service or keychain_service_name(key)
    return (
        f"export {key}=$(security find-generic-password "
        f"-s '{service}' -a \"$USER\" -w)"
    )


def generate_function_block(name: str, body: str) -> list[str]:
    """Function definition lines with a two-space indented body."""
    body_lines = [f"  {line}" if line else "" for line in body.split("\n")]
    return [f"{name}() {{", *body_lines, "}"]


def generate_path_export_line(entries: Iterable[PathEntry]) -> str:
    """``export PATH="/a:/b:$PATH"`` from entries sorted by ``order``."""
    dirs = [e.path for e in sorted(entries, key=lambda e: e.order)]
    return f'export PATH="{":".join(dirs)}:$PATH"'
