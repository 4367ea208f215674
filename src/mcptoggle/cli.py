#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Toggle MCP servers on/off for Claude or Codex
Usage:
  mcp-toggle <claude|codex>                # interactive (TTY)
  mcp-toggle <claude|codex> list [--json]
  mcp-toggle <claude|codex> toggle NAME
  mcp-toggle <claude|codex> enable NAME
  mcp-toggle <claude|codex> disable NAME

Disabled servers are parked in a backup file next to the host config
and moved back when enabled again.
"""
import argparse
import json
import locale
import sys
from pathlib import Path
from typing import Dict, List, Optional

from .registry import RegistryError, ServerRegistry
from .targets import Target, build_targets, is_ci

HOME = Path.home()


class UsageError(RegistryError):
    pass


COMMANDS = ("list", "toggle", "enable", "disable", "help")


class _Parser(argparse.ArgumentParser):
    def error(self, message):
        raise UsageError(message)


def load_targets() -> Dict[str, Target]:
    return build_targets(HOME)


def usage_text(targets: Optional[Dict[str, Target]] = None) -> str:
    targets = targets or load_targets()
    claude, codex = targets["claude"], targets["codex"]
    return (
        "Usage:\n"
        "  mcp-toggle <claude|codex>                # interactive (TTY)\n"
        "  mcp-toggle <claude|codex> list\n"
        "  mcp-toggle <claude|codex> toggle <name>\n"
        "  mcp-toggle <claude|codex> enable <name>\n"
        "  mcp-toggle <claude|codex> disable <name>\n"
        "\n"
        "Files:\n"
        f"  claude: {claude.config_path}\n"
        f"  claude: {claude.backup_path}\n"
        f"  codex:  {codex.config_path}\n"
        f"  codex:  {codex.backup_path}\n"
    )


def _registry(args) -> ServerRegistry:
    return ServerRegistry(load_targets()[args.target])


def _report_warnings(args, reg: ServerRegistry) -> None:
    if getattr(args, "verbose", False):
        for w in reg.warnings:
            print(f"[WARN] {w}", file=sys.stderr)


def _require_name(args) -> str:
    if not getattr(args, "name", None):
        raise UsageError("Missing <name>")
    return args.name


def cmd_help(args):
    sys.stdout.write(usage_text())


def cmd_list(args):
    reg = _registry(args)
    servers = reg.list_servers()
    _report_warnings(args, reg)
    if getattr(args, "json", False):
        payload = [{"name": s.name, "enabled": s.enabled, "config": s.config} for s in servers]
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return
    if not servers:
        print("No MCP servers.")
        return
    for s in servers:
        print(f"{'ENABLED ' if s.enabled else 'DISABLED'} {s.name}")


def _change_state(args, op: str) -> None:
    name = _require_name(args)
    reg = _registry(args)
    try:
        state = getattr(reg, op)(name)
    finally:
        _report_warnings(args, reg)
    print(f"Server '{name}' is now {'ENABLED' if state else 'DISABLED'}")


def cmd_toggle(args):
    _change_state(args, "toggle")


def cmd_enable(args):
    _change_state(args, "enable")


def cmd_disable(args):
    _change_state(args, "disable")


def cmd_interactive(args):
    from .tui import run_interactive

    reg = _registry(args)
    run_interactive(reg)


def is_tty_interactive() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty() and not is_ci()


def build_parser():
    p = _Parser(
        prog="mcp-toggle",
        description="Toggle MCP servers between the active config and a backup file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=usage_text(),
    )
    p.add_argument("-v", "--verbose", action="store_true", help="report unreadable config files on stderr")
    p.add_argument("target", metavar="claude|codex")
    sub = p.add_subparsers(dest="cmd")

    sp_list = sub.add_parser("list", help="list servers and their state")
    sp_list.add_argument("--json", action="store_true", help="JSON output including configs")
    sp_list.set_defaults(func=cmd_list)

    for cmd, func, helptext in (
        ("toggle", cmd_toggle, "flip a server between enabled and disabled"),
        ("enable", cmd_enable, "enable a server (no-op if already enabled)"),
        ("disable", cmd_disable, "disable a server (no-op if already disabled)"),
    ):
        sp = sub.add_parser(cmd, help=helptext)
        sp.add_argument("name", nargs="?", metavar="NAME")
        sp.set_defaults(func=func)

    sp_help = sub.add_parser("help", help="show usage and file locations")
    sp_help.set_defaults(func=cmd_help)

    return p


def _check_positionals(argv: List[str]) -> None:
    if {"-h", "--help"} & set(argv):
        return
    positionals = [a for a in argv if not a.startswith("-")]
    if not positionals or positionals[0] not in load_targets():
        sys.stdout.write(usage_text())
        raise UsageError("Missing or invalid <claude|codex>")
    if len(positionals) > 1 and positionals[1] not in COMMANDS:
        raise UsageError(f"Unknown command: {positionals[1]}")


def run(argv: List[str]) -> None:
    _check_positionals(argv)
    args = build_parser().parse_args(argv)

    if args.cmd is None:
        # TTY가 아니면 usage만 출력
        if is_tty_interactive():
            cmd_interactive(args)
        else:
            cmd_help(args)
        return

    args.func(args)


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        pass
    try:
        run(argv)
    except (RegistryError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
