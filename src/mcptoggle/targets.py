#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Host application targets (claude, codex) and where their files live.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

CAMEL_SERVERS_KEY = "mcpServers"
SNAKE_SERVERS_KEY = "mcp_servers"
SERVERS_KEYS = (CAMEL_SERVERS_KEY, SNAKE_SERVERS_KEY)

DISABLED_KEY = "disabledServers"
LEGACY_DISABLED_KEY = "disabled_servers"


@dataclass(frozen=True)
class Target:
    name: str
    label: str
    config_path: Path
    backup_path: Path
    fmt: str  # json | toml
    servers_key: str


def build_targets(home: Path) -> Dict[str, Target]:
    home = Path(home)
    codex_dir = home / ".codex"
    return {
        "claude": Target(
            name="claude",
            label="Claude",
            config_path=home / ".claude.json",
            backup_path=home / ".ccmcp_backup.json",
            fmt="json",
            servers_key=CAMEL_SERVERS_KEY,
        ),
        "codex": Target(
            name="codex",
            label="Codex",
            config_path=codex_dir / "config.toml",
            backup_path=codex_dir / "ccmcp_backup.toml",
            fmt="toml",
            servers_key=SNAKE_SERVERS_KEY,
        ),
    }


def is_ci() -> bool:
    return os.environ.get("CI") == "true"
