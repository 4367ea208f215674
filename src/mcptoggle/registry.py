#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Enable/disable MCP servers by moving their config between two documents.

- active servers live in the host app's config (``mcpServers`` / ``mcp_servers``)
- disabled servers live in our backup file (``disabledServers``)

Both documents are read fresh on every call; nothing is cached between calls.
"""
import locale
from dataclasses import dataclass
from typing import Any, List, Tuple

from .normalize import ensure_disabled, ensure_servers
from .store import load_document, save_document, to_plain
from .targets import Target


class RegistryError(Exception):
    """Base class for errors reported back to the user."""


class ServerNotFound(RegistryError):
    def __init__(self, name: str):
        super().__init__(f"Server '{name}' not found")
        self.name = name


@dataclass
class ServerEntry:
    name: str
    config: Any
    enabled: bool


def sort_key(name: str):
    return (locale.strxfrm(name.casefold()), name)


class ServerRegistry:
    def __init__(self, target: Target):
        self.target = target
        self.warnings: List[str] = []

    def paths(self):
        return self.target.config_path, self.target.backup_path

    def _load(self) -> Tuple[Any, Any, Any, Any]:
        t = self.target
        self.warnings = []
        full_res = load_document(t.config_path, t.fmt)
        backup_res = load_document(t.backup_path, t.fmt)
        for res in (full_res, backup_res):
            if res.error:
                self.warnings.append(f"ignoring unreadable document {res.error}")

        full, key = ensure_servers(full_res.document, t.servers_key)
        backup, dkey = ensure_disabled(backup_res.document)
        return full, full[key], backup, backup[dkey]

    def _save(self, full: Any, backup: Any) -> None:
        # 두 파일은 별도로 기록됨: 두 번째 쓰기가 실패해도 롤백하지 않는다
        save_document(self.target.config_path, self.target.fmt, full)
        save_document(self.target.backup_path, self.target.fmt, backup)

    def list_servers(self) -> List[ServerEntry]:
        _, active, _, disabled = self._load()
        entries = [ServerEntry(name, to_plain(cfg), True) for name, cfg in active.items()]
        # 양쪽에 모두 있으면 active 쪽을 우선
        entries += [ServerEntry(name, to_plain(cfg), False) for name, cfg in disabled.items() if name not in active]
        return sorted(entries, key=lambda e: sort_key(e.name))

    def toggle(self, name: str) -> bool:
        """Flip ``name`` between active and disabled; return the new enabled state."""
        full, active, backup, disabled = self._load()

        if name in active:
            cfg = to_plain(active[name])
            del active[name]
            if name in disabled:
                del disabled[name]
            disabled[name] = cfg
            self._save(full, backup)
            return False

        if name in disabled:
            cfg = to_plain(disabled[name])
            del disabled[name]
            active[name] = cfg
            self._save(full, backup)
            return True

        raise ServerNotFound(name)

    def _lookup(self, name: str) -> ServerEntry:
        for entry in self.list_servers():
            if entry.name == name:
                return entry
        raise ServerNotFound(name)

    def enable(self, name: str) -> bool:
        if self._lookup(name).enabled:
            return True
        return self.toggle(name)

    def disable(self, name: str) -> bool:
        if not self._lookup(name).enabled:
            return False
        return self.toggle(name)
