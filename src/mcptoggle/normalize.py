#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Container key normalization for server documents.

Two spellings have been used for the same container over time
(``mcpServers`` / ``mcp_servers``, ``disabledServers`` / ``disabled_servers``).
Everything here works on plain mappings, independent of the file format.
"""
from collections.abc import Mapping
from typing import Any, Iterable, Tuple

from .store import to_plain
from .targets import DISABLED_KEY, LEGACY_DISABLED_KEY, SERVERS_KEYS


def _is_mapping(x: Any) -> bool:
    return isinstance(x, Mapping)


def ensure_container(document: Any, preferred_key: str, alternate_keys: Iterable[str] = ()) -> Tuple[Any, str]:
    """Make ``document[preferred_key]`` a mapping, migrating from an alternate key if needed.

    Mutates ``document`` in place; returns it (or a fresh dict if it was not a
    mapping) together with the key holding the container.
    """
    if not _is_mapping(document):
        document = {}

    current = document.get(preferred_key)
    if _is_mapping(current) and len(current) > 0:
        return document, preferred_key

    for alt in alternate_keys:
        if alt == preferred_key or not _is_mapping(document.get(alt)):
            continue
        moved = to_plain(document[alt])
        merged = to_plain(current) if _is_mapping(current) else {}
        for name, conf in moved.items():
            merged.setdefault(name, conf)
        del document[alt]
        document[preferred_key] = merged
        return document, preferred_key

    if not _is_mapping(current):
        document[preferred_key] = {}
    return document, preferred_key


def ensure_servers(document: Any, preferred_key: str) -> Tuple[Any, str]:
    alternates = [k for k in SERVERS_KEYS if k != preferred_key]
    return ensure_container(document, preferred_key, alternates)


def ensure_disabled(document: Any) -> Tuple[Any, str]:
    return ensure_container(document, DISABLED_KEY, [LEGACY_DISABLED_KEY])
