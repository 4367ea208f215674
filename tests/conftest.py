import json
from types import SimpleNamespace

import pytest
import tomlkit

from mcptoggle import cli
from mcptoggle.targets import build_targets


@pytest.fixture()
def toggle_env(tmp_path, monkeypatch):
    """Provide a temporary HOME with claude/codex targets for tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setattr(cli, "HOME", home)
    monkeypatch.delenv("CI", raising=False)
    targets = build_targets(home)

    def write_json(path, obj):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(obj, ensure_ascii=False, indent=2))

    def read_json(path):
        return json.loads(path.read_text(encoding="utf-8"))

    def write_toml(path, text):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)

    def read_toml(path):
        return tomlkit.parse(path.read_text(encoding="utf-8")).unwrap()

    return SimpleNamespace(
        home=home,
        claude=targets["claude"],
        codex=targets["codex"],
        write_json=write_json,
        read_json=read_json,
        write_toml=write_toml,
        read_toml=read_toml,
    )
