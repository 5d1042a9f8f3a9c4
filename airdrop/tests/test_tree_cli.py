from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from airdrop.tools import atomic_write_text, canonical_json_str
from airdrop.tools.merkle_tree import TreeError, load_rows, main

A = "0x" + "11" * 32
B = "0x" + "22" * 32
C = "0x" + "33" * 32


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)


@pytest.fixture
def csv_input(tmp_path: Path) -> Path:
    p = tmp_path / "alloc.csv"
    p.write_text(f"account,amount\n{A},100\n{B},200\n\n{C},300\n", encoding="utf-8")
    return p


def _run(argv, capsys):
    code = main(["--log-level", "WARNING", *argv])
    out = capsys.readouterr()
    return code, out.out, out.err


def test_build_proof_verify_round_trip(tmp_path, csv_input, capsys):
    out = tmp_path / "merkle.json"
    code, stdout, _ = _run(["build", "--input", str(csv_input), "--out", str(out)], capsys)
    assert code == 0
    art = json.loads(out.read_text(encoding="utf-8"))
    assert stdout.strip() == art["merkle_root"]
    assert art["token_total"] == "600"
    assert set(art["claims"]) == {A, B, C}

    code, stdout, _ = _run(["proof", "--artifact", str(out), "--account", B], capsys)
    assert code == 0
    claim = json.loads(stdout)
    assert claim["account"] == B
    assert claim["amount"] == "200"
    assert claim["proof"] == art["claims"][B]["proof"]

    code, stdout, _ = _run(["verify", "--artifact", str(out), "--account", B, "--amount", "200"], capsys)
    assert (code, stdout.strip()) == (0, "valid")

    code, stdout, _ = _run(["verify", "--artifact", str(out), "--account", B, "--amount", "201"], capsys)
    assert (code, stdout.strip()) == (1, "invalid")

    # a proof for another account does not carry over
    wrong = json.dumps(art["claims"][A]["proof"])
    code, stdout, _ = _run(
        ["verify", "--artifact", str(out), "--account", B, "--amount", "200", "--proof", wrong], capsys
    )
    assert (code, stdout.strip()) == (1, "invalid")


def test_build_is_deterministic(tmp_path, csv_input, capsys):
    a, b = tmp_path / "a.json", tmp_path / "b.json"
    _run(["build", "--input", str(csv_input), "--out", str(a)], capsys)
    _run(["build", "--input", str(csv_input), "--out", str(b)], capsys)
    assert a.read_bytes() == b.read_bytes()


def test_json_inputs(tmp_path):
    as_list = tmp_path / "l.json"
    as_list.write_text(json.dumps([{"account": A, "amount": 1}, {"account": B, "amount": "2"}]), encoding="utf-8")
    as_map = tmp_path / "m.json"
    as_map.write_text(json.dumps({A: 1, B: 2}), encoding="utf-8")
    assert load_rows(as_list) == load_rows(as_map) == [(bytes.fromhex("11" * 32), 1), (bytes.fromhex("22" * 32), 2)]


@pytest.mark.parametrize(
    "body",
    [
        "wallet,amount\n0x11,1\n",
        f"account,amount\n{A},-5\n",
        f"account,amount\n{A},1.5\n",
        "account,amount\n0x1234,1\n",
        "account,amount\nzz,1\n",
        "account,amount\n",
    ],
)
def test_bad_csv_rows(tmp_path, body):
    p = tmp_path / "bad.csv"
    p.write_text(body, encoding="utf-8")
    with pytest.raises(TreeError):
        load_rows(p)


def test_address_column_alias_and_width_override(tmp_path):
    p = tmp_path / "short.csv"
    p.write_text("address,amount\n0x" + "ab" * 20 + ",7\n", encoding="utf-8")
    assert load_rows(p, address_len=20) == [(b"\xab" * 20, 7)]
    with pytest.raises(TreeError):
        load_rows(p)


def test_cli_errors_exit_2(tmp_path, capsys):
    dup = tmp_path / "dup.csv"
    dup.write_text(f"account,amount\n{A},1\n{A},2\n", encoding="utf-8")
    code, _, err = _run(["build", "--input", str(dup), "--out", str(tmp_path / "x.json")], capsys)
    assert code == 2
    assert "duplicate account" in err
    assert not (tmp_path / "x.json").exists()

    code, _, err = _run(["proof", "--artifact", str(tmp_path / "missing.json"), "--account", A], capsys)
    assert code == 2
    assert "cannot read artifact" in err


def test_proof_for_unknown_account(tmp_path, csv_input, capsys):
    out = tmp_path / "merkle.json"
    _run(["build", "--input", str(csv_input), "--out", str(out)], capsys)
    code, _, err = _run(["proof", "--artifact", str(out), "--account", "0x" + "44" * 32], capsys)
    assert code == 2
    assert "not in artifact" in err


def test_canonical_json_and_atomic_write(tmp_path):
    text = canonical_json_str({"b": 1, "a": [1, 2]})
    assert text.endswith("\n")
    assert text.index('"a"') < text.index('"b"')
    target = atomic_write_text(tmp_path / "nested" / "out.json", text)
    assert target.read_text(encoding="utf-8") == text
    assert [p.name for p in target.parent.iterdir()] == ["out.json"]


def test_non_ascii_digit_amount_exits_2(tmp_path, capsys, monkeypatch):
    monkeypatch.setenv("DROPVM_LOG_FORMAT", "json")
    p = tmp_path / "alloc.csv"
    p.write_text(f"account,amount\n{A},²\n", encoding="utf-8")
    code, _, err = _run(["build", "--input", str(p), "--out", str(tmp_path / "x.json")], capsys)
    assert code == 2
    assert "non-negative integer" in err
    records = [json.loads(line) for line in err.splitlines() if line.startswith("{")]
    assert [r["msg"] for r in records] == ["command failed"]
    assert records[0]["component"] == "merkledrop-tree"
    assert records[0]["trace_id"]
