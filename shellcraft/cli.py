"""
`shellcraft` command-line interface.

Commands
--------
shellcraft aliases   [FILE]                 -- list aliases
shellcraft functions [FILE]                 -- list shell functions
shellcraft env       [FILE]                 -- list exported variables
shellcraft path      [FILE] [--check]       -- list PATH entries (optionally check they exist)
shellcraft sources   [FILE]                 -- list source directives

shellcraft alias add NAME EXPANSION [--file F] [--disabled]
shellcraft alias remove|enable|disable NAME [--file F]

shellcraft git show  [--file F]
shellcraft git get   SECTION KEY [--subsection S] [--file F]
shellcraft git set   SECTION KEY VALUE [--subsection S] [--file F]
shellcraft git unset SECTION KEY [--subsection S] [--file F]

shellcraft backups list    FILENAME
shellcraft backups restore FILENAME [--index N] [--to PATH]

shellcraft history [--last N]               -- edit history statistics
"""

from __future__ import annotations

import argparse
import logging
import os
from typing import Optional

from .backup import list_backups, restore_backup
from .cli_display import error, print_table, setup_logger
from .config import Config
from .editing.history import read_edit_stats
from .editing.modifications import ModificationError
from .fileio import FileIOError
from .gitconfig import GitConfig, read_git_config, write_git_config
from .paths import expand_home, validate_path_entries
from .shell.editor import ShellConfigEditor
from .shell.entities import ParsedShellConfig
from .shell.parser import ShellConfigParser

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _parse_shell(args: argparse.Namespace) -> ParsedShellConfig:
    files = [args.file] if getattr(args, "file", None) else args.cfg.SHELL_FILES
    return ShellConfigParser().parse(files)


def _location(source_file: str, line_index: int) -> str:
    return f"{source_file}:{line_index + 1}"


def _editor(args: argparse.Namespace) -> ShellConfigEditor:
    path = args.file or args.cfg.default_shell_file
    return ShellConfigEditor(path, **args.cfg.editor_kwargs())


def _git_path(args: argparse.Namespace) -> str:
    return args.file or args.cfg.GIT_CONFIG


# ---------------------------------------------------------------------------
# Listing commands
# ---------------------------------------------------------------------------

def _cmd_aliases(args: argparse.Namespace) -> int:
    config = _parse_shell(args)
    print_table(
        ["NAME", "EXPANSION", "ENABLED", "CATEGORY", "LOCATION"],
        [
            [a.name, a.expansion, "yes" if a.enabled else "no",
             a.category.value, _location(a.source_file, a.source_line)]
            for a in config.aliases
        ],
    )
    return 0


def _cmd_functions(args: argparse.Namespace) -> int:
    config = _parse_shell(args)
    print_table(
        ["NAME", "LINES", "DESCRIPTION", "FILE"],
        [
            [f.name, f"{f.line_range[0] + 1}-{f.line_range[1] + 1}",
             f.description, f.source_file]
            for f in config.functions
        ],
    )
    return 0


def _cmd_env(args: argparse.Namespace) -> int:
    config = _parse_shell(args)
    print_table(
        ["KEY", "VALUE", "LOCATION"],
        [
            [v.key, "<keychain>" if v.keychain_derived else v.value,
             _location(v.source_file, v.source_line)]
            for v in config.environment_variables
        ],
    )
    return 0


def _cmd_path(args: argparse.Namespace) -> int:
    config = _parse_shell(args)
    entries = config.path_entries
    if args.check:
        entries = validate_path_entries(entries, max_workers=args.cfg.VALIDATE_WORKERS)
    rows = []
    for e in entries:
        row = [str(e.order), e.path, _location(e.source_file, e.source_line)]
        if args.check:
            row.append("ok" if e.exists else "MISSING")
        rows.append(row)
    headers = ["ORDER", "PATH", "LOCATION"] + (["STATUS"] if args.check else [])
    print_table(headers, rows)
    return 0


def _cmd_sources(args: argparse.Namespace) -> int:
    config = _parse_shell(args)
    print_table(
        ["TARGET", "RESOLVED", "GUARDED", "LOCATION"],
        [
            [s.target, s.resolved_path, "yes" if s.guarded else "no",
             _location(s.source_file, s.source_line)]
            for s in config.sources
        ],
    )
    return 0


# ---------------------------------------------------------------------------
# Alias editing
# ---------------------------------------------------------------------------

def _cmd_alias(args: argparse.Namespace) -> int:
    editor = _editor(args)

    if args.alias_command == "add":
        if editor.find_alias(args.name) is not None:
            raise ValueError(f"Alias {args.name!r} already exists in {editor.path}")
        editor.add_alias(args.name, args.expansion, enabled=not args.disabled)
    else:
        alias = editor.find_alias(args.name)
        if alias is None:
            raise ValueError(f"No alias named {args.name!r} in {editor.path}")
        if args.alias_command == "remove":
            editor.delete_alias(alias)
        else:
            editor.set_alias_enabled(alias, args.alias_command == "enable")

    editor.commit()
    print(f"Updated {editor.path}")
    return 0


# ---------------------------------------------------------------------------
# Git config
# ---------------------------------------------------------------------------

def _cmd_git(args: argparse.Namespace) -> int:
    path = _git_path(args)
    cfg = args.cfg

    if args.git_command == "show":
        config = read_git_config(path)
        for section in config.logical_sections():
            print(section.display_name)
            for entry in section.entries:
                print(f"  {entry.key} = {entry.value}")
        return 0

    if args.git_command == "get":
        values = read_git_config(path).values(args.section, args.key, args.subsection)
        if not values:
            return 1
        for value in values:
            print(value)
        return 0

    config = read_git_config(path) if os.path.exists(expand_home(path)) else GitConfig()
    if args.git_command == "set":
        config.set_value(args.section, args.key, args.value, args.subsection)
    elif config.remove_value(args.section, args.key, args.subsection) == 0:
        raise ValueError(f"{args.section}.{args.key} is not set in {path}")

    write_git_config(
        config, path,
        backup=cfg.BACKUPS_ENABLED, backup_root=cfg.BACKUP_DIR, backup_keep=cfg.BACKUP_KEEP,
    )
    print(f"Updated {path}")
    return 0


# ---------------------------------------------------------------------------
# Backups and history
# ---------------------------------------------------------------------------

def _cmd_backups(args: argparse.Namespace) -> int:
    backups = list_backups(args.filename, backup_root=args.cfg.BACKUP_DIR)

    if args.backups_command == "list":
        print_table(
            ["#", "BACKUP", "DATE", "SIZE"],
            [
                [str(i), b.filename, b.timestamp.isoformat(timespec="seconds"), str(b.size)]
                for i, b in enumerate(backups)
            ],
        )
        return 0

    if not 0 <= args.index < len(backups):
        raise ValueError(f"No backup #{args.index} for {args.filename}")
    target = args.to or f"~/{args.filename}"
    try:
        restore_backup(
            backups[args.index], target,
            backup_root=args.cfg.BACKUP_DIR, keep=args.cfg.BACKUP_KEEP,
        )
    except OSError as exc:
        raise FileIOError(target, exc, "restore") from exc
    print(f"Restored {target} from {backups[args.index].filename}")
    return 0


def _cmd_history(args: argparse.Namespace) -> int:
    stats = read_edit_stats(last_n=args.last, history_file=args.cfg.HISTORY_FILE)
    print(f"Edits:               {stats['total_edits']}")
    print(f"Lines changed:       {stats['total_lines_changed']}")
    print(f"Avg lines per edit:  {stats['avg_lines_changed']:.1f}")
    for name, share in stats["files"].items():
        print(f"  {name:<30} {share:5.1f}%")
    return 0


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shellcraft",
        description="Inspect and safely edit shell startup files and git config.",
    )
    parser.add_argument("--config", default=None,
                        help="Path to .shellcraft.yaml config file")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log progress to stderr")
    parser.add_argument("--log-dir", default=None,
                        help="Directory for the debug log file (default: log_dir from config)")
    sub = parser.add_subparsers(dest="command")

    for name, func, help_text in (
        ("aliases", _cmd_aliases, "List aliases"),
        ("functions", _cmd_functions, "List shell functions"),
        ("env", _cmd_env, "List exported variables"),
        ("path", _cmd_path, "List PATH entries"),
        ("sources", _cmd_sources, "List source directives"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("file", nargs="?", default=None,
                       help="Shell file (default: configured shell files)")
        if name == "path":
            p.add_argument("--check", action="store_true",
                           help="Check that each directory exists")
        p.set_defaults(func=func)

    alias_p = sub.add_parser("alias", help="Add, remove, enable or disable an alias")
    alias_sub = alias_p.add_subparsers(dest="alias_command", required=True)
    add_p = alias_sub.add_parser("add")
    add_p.add_argument("name")
    add_p.add_argument("expansion")
    add_p.add_argument("--disabled", action="store_true",
                       help="Write the alias commented out")
    alias_parsers = [add_p]
    for action in ("remove", "enable", "disable"):
        p = alias_sub.add_parser(action)
        p.add_argument("name")
        alias_parsers.append(p)
    for p in alias_parsers:
        p.add_argument("--file", default=None, help="Shell file to edit")
    alias_p.set_defaults(func=_cmd_alias)

    git_p = sub.add_parser("git", help="Read or modify git config")
    git_sub = git_p.add_subparsers(dest="git_command", required=True)
    show_p = git_sub.add_parser("show")
    get_p = git_sub.add_parser("get")
    set_p = git_sub.add_parser("set")
    unset_p = git_sub.add_parser("unset")
    for p in (get_p, set_p, unset_p):
        p.add_argument("section")
        p.add_argument("key")
    set_p.add_argument("value")
    for p in (show_p, get_p, set_p, unset_p):
        p.add_argument("--file", default=None, help="Git config file")
        if p is not show_p:
            p.add_argument("--subsection", default=None)
    git_p.set_defaults(func=_cmd_git)

    backups_p = sub.add_parser("backups", help="List or restore backups")
    backups_sub = backups_p.add_subparsers(dest="backups_command", required=True)
    list_p = backups_sub.add_parser("list")
    list_p.add_argument("filename")
    restore_p = backups_sub.add_parser("restore")
    restore_p.add_argument("filename")
    restore_p.add_argument("--index", type=int, default=0,
                           help="Backup number from `backups list` (default: newest)")
    restore_p.add_argument("--to", default=None,
                           help="File to restore over (default: ~/FILENAME)")
    backups_p.set_defaults(func=_cmd_backups)

    history_p = sub.add_parser("history", help="Show edit history statistics")
    history_p.add_argument("--last", type=int, default=50)
    history_p.set_defaults(func=_cmd_history)

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the `shellcraft` command. Returns the exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    # Configure logging if not already configured
    if not logging.root.handlers:
        level = logging.INFO if args.verbose else logging.WARNING
        logging.basicConfig(level=level, format="%(levelname)s  %(name)s  %(message)s")
        # stderr keeps the requested level; the file log runs at DEBUG.
        logging.root.handlers[0].setLevel(level)

    args.cfg = Config.load(args.config)
    setup_logger(args.log_dir or args.cfg.LOG_DIR)

    if not hasattr(args, "func"):
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except (FileIOError, ModificationError, ValueError) as exc:
        logger.debug("Command failed", exc_info=True)
        error(str(exc))
        return 1
