#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Read and write the on-disk config documents (JSON or TOML).

Reads never fail: a missing or broken file comes back as an empty default,
flagged in the ReadResult so callers can tell the difference if they care.
Writes go through a temp file in the same directory and os.replace, so a
reader never sees a half-written document.
"""
import json
import os
import stat
import tempfile
from pathlib import Path
from typing import Any, NamedTuple, Optional

import tomlkit  # type: ignore
from tomlkit.exceptions import TOMLKitError  # type: ignore

FORMATS = ("json", "toml")

OK = "ok"
MISSING = "missing"
MALFORMED = "malformed"


class ReadResult(NamedTuple):
    document: Any
    status: str
    error: Optional[str] = None


def _check_format(fmt: str) -> None:
    if fmt not in FORMATS:
        raise ValueError(f"unsupported document format: {fmt}")


def empty_document(fmt: str):
    _check_format(fmt)
    if fmt == "toml":
        return tomlkit.document()
    return {}


def to_plain(v: Any) -> Any:
    # tomlkit 컨테이너/아이템을 plain Python 타입으로 변환
    if hasattr(v, "unwrap"):
        return v.unwrap()
    if isinstance(v, dict):
        return {k: to_plain(v[k]) for k in v}
    if isinstance(v, list):
        return [to_plain(x) for x in v]
    return v


def _parse_json(text: str) -> Any:
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"top-level JSON value must be an object, got {type(data).__name__}")
    return data


def _parse_toml(text: str) -> Any:
    return tomlkit.parse(text)


def load_document(path: Path, fmt: str) -> ReadResult:
    _check_format(fmt)
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            text = f.read()
    except FileNotFoundError:
        return ReadResult(empty_document(fmt), MISSING)
    except (OSError, UnicodeDecodeError) as exc:
        return ReadResult(empty_document(fmt), MALFORMED, f"{path}: {exc}")

    try:
        doc = _parse_toml(text) if fmt == "toml" else _parse_json(text)
    except (ValueError, TOMLKitError) as exc:
        return ReadResult(empty_document(fmt), MALFORMED, f"{path}: {exc}")
    return ReadResult(doc, OK)


def _dumps(fmt: str, document: Any) -> str:
    if fmt == "toml":
        txt = tomlkit.dumps(document)
    else:
        txt = json.dumps(document, ensure_ascii=False, indent=2, sort_keys=False)
    if not txt.endswith("\n"):
        txt += "\n"
    return txt


def save_document(path: Path, fmt: str, document: Any) -> None:
    _check_format(fmt)
    path = Path(path)
    txt = _dumps(fmt, document)
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        "w", delete=False, dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp", encoding="utf-8"
    ) as tf:
        tmp_name = tf.name
        try:
            tf.write(txt)
        except BaseException:
            tf.close()
            os.unlink(tmp_name)
            raise
    try:
        if path.exists():
            # NamedTemporaryFile는 0600으로 만들어지므로 기존 권한을 유지
            os.chmod(tmp_name, stat.S_IMODE(os.stat(path).st_mode))
        os.replace(tmp_name, path)
    except BaseException:
        os.unlink(tmp_name)
        raise
