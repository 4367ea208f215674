import json
import os
import stat

import pytest
import tomlkit

from mcptoggle import store


def test_missing_file_reads_as_empty(tmp_path):
    res = store.load_document(tmp_path / "nope.json", "json")
    assert res.status == store.MISSING
    assert res.document == {}

    res = store.load_document(tmp_path / "nope.toml", "toml")
    assert res.status == store.MISSING
    assert res.document == {}


def test_malformed_json_reads_as_empty(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json")

    res = store.load_document(path, "json")

    assert res.status == store.MALFORMED
    assert res.document == {}
    assert str(path) in res.error
    assert store.load_document(path, "json").document == {}


def test_non_object_json_counts_as_malformed(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2]")

    assert store.load_document(path, "json").status == store.MALFORMED


def test_malformed_toml_reads_as_empty(tmp_path):
    path = tmp_path / "bad.toml"
    path.write_text("[mcp_servers\nx = ")

    res = store.load_document(path, "toml")

    assert res.status == store.MALFORMED
    assert res.document == {}


def test_json_save_keeps_key_order_and_trailing_newline(tmp_path):
    path = tmp_path / "nested" / "dir" / "c.json"
    doc = {"zeta": 1, "mcpServers": {"b": {"command": "x"}, "a": {"command": "y"}}, "alpha": "é"}

    store.save_document(path, "json", doc)

    txt = path.read_text(encoding="utf-8")
    assert txt.endswith("}\n")
    assert "é" in txt
    loaded = json.loads(txt)
    assert list(loaded) == ["zeta", "mcpServers", "alpha"]
    assert list(loaded["mcpServers"]) == ["b", "a"]


def test_toml_save_preserves_unrelated_content(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        '# my settings\nmodel = "o3"\n\n[mcp_servers.fs]\ncommand = "npx"\nargs = ["-y", "fs"]\n'
    )

    doc = store.load_document(path, "toml").document
    doc["mcp_servers"]["git"] = {"command": "uvx"}
    store.save_document(path, "toml", doc)

    txt = path.read_text()
    assert "# my settings" in txt
    parsed = tomlkit.parse(txt).unwrap()
    assert parsed["model"] == "o3"
    assert parsed["mcp_servers"]["fs"] == {"command": "npx", "args": ["-y", "fs"]}
    assert parsed["mcp_servers"]["git"] == {"command": "uvx"}


def test_save_leaves_no_temp_files(tmp_path):
    path = tmp_path / "c.json"
    store.save_document(path, "json", {"a": 1})
    store.save_document(path, "json", {"a": 2})

    assert os.listdir(tmp_path) == ["c.json"]
    assert json.loads(path.read_text()) == {"a": 2}


def test_failed_replace_cleans_up_temp_file(tmp_path, monkeypatch):
    path = tmp_path / "c.json"
    path.write_text('{"a": 1}\n')

    def boom(src, dst):
        raise PermissionError("denied")

    monkeypatch.setattr(store.os, "replace", boom)

    with pytest.raises(PermissionError):
        store.save_document(path, "json", {"a": 2})

    assert os.listdir(tmp_path) == ["c.json"]
    assert path.read_text() == '{"a": 1}\n'


def test_unknown_format_is_rejected(tmp_path):
    with pytest.raises(ValueError):
        store.load_document(tmp_path / "x.yaml", "yaml")


def test_to_plain_unwraps_tomlkit_values():
    doc = tomlkit.parse('[s]\ncommand = "x"\nargs = ["a"]\nenv = { K = "v" }\n')

    plain = store.to_plain(doc["s"])

    assert plain == {"command": "x", "args": ["a"], "env": {"K": "v"}}
    assert type(plain) is dict
    assert type(plain["command"]) is str


def test_save_keeps_existing_file_mode(tmp_path):
    path = tmp_path / "c.json"
    path.write_text('{"a": 1}\n')
    os.chmod(path, 0o644)

    store.save_document(path, "json", {"a": 2})

    assert stat.S_IMODE(os.stat(path).st_mode) == 0o644
