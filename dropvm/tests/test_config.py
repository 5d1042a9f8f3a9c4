from __future__ import annotations

from dropvm.config import load_config


def test_defaults() -> None:
    cfg = load_config()
    assert cfg.as_dict() == {
        "strict_mode": True,
        "address_len": 32,
        "max_call_depth": 64,
        "max_storage_key_bytes": 128,
        "max_storage_value_bytes": 131_072,
        "max_logs_per_call": 1024,
    }


def test_env_overrides_and_clamping(monkeypatch) -> None:
    monkeypatch.setenv("DROPVM_STRICT", "off")
    monkeypatch.setenv("DROPVM_ADDRESS_LEN", "0x14")
    monkeypatch.setenv("DROPVM_MAX_CALL_DEPTH", "2")
    monkeypatch.setenv("DROPVM_MAX_LOGS_PER_CALL", "not-a-number")
    load_config.cache_clear()

    cfg = load_config()
    assert cfg.strict_mode is False
    assert cfg.address_len == 20
    assert cfg.max_call_depth == 8
    assert cfg.max_logs_per_call == 1024


def test_cached_until_cleared(monkeypatch) -> None:
    first = load_config()
    monkeypatch.setenv("DROPVM_ADDRESS_LEN", "20")
    assert load_config() is first
    load_config.cache_clear()
    assert load_config().address_len == 20
