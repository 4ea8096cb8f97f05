import json

import pytest

from database import JsonStore, StoreWriteError, global_discount_store, shipping_store, users_store


def test_missing_file_is_created_with_default(data_dir):
    assert users_store.read() == {}
    assert json.loads((data_dir / "users.json").read_text()) == {}


def test_empty_file_is_initialized(data_dir):
    (data_dir / "coupons.json").write_text("  \n")
    store = JsonStore("coupons.json", [])
    assert store.read() == []
    assert (data_dir / "coupons.json").read_text() == "[]"


def test_malformed_file_returns_default_without_overwriting(data_dir, caplog):
    (data_dir / "users.json").write_text("{not json")
    assert users_store.read() == {}
    assert (data_dir / "users.json").read_text() == "{not json"
    assert "Failed to parse users.json" in caplog.text


def test_invalid_singleton_falls_back_to_default(data_dir):
    (data_dir / "globalDiscount.json").write_text(json.dumps({"percentage": "lots"}))
    assert global_discount_store.read() == {"percentage": 0}

    (data_dir / "shippingSettings.json").write_text(json.dumps({"rate": 10}))
    assert shipping_store.read() == {"rate": 50, "threshold": 5000}


def test_default_is_not_shared_between_reads():
    first = shipping_store.read()
    first["rate"] = 999
    assert shipping_store.read()["rate"] == 50


def test_write_then_read_round_trip(data_dir):
    value = {"a@example.com": {"profile": {"firstName": "Ä"}, "orders": [{"id": "1", "items": []}]}}
    users_store.write(value)
    assert users_store.read() == value
    text = (data_dir / "users.json").read_text(encoding="utf-8")
    assert text.startswith('{\n  "a@example.com"')
    assert "Ä" in text


def test_write_failure_raises_store_error(tmp_path, monkeypatch):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    monkeypatch.setenv("DATA_DIR", str(blocker))
    store = JsonStore("blogs.json", [], label="blog post")
    with pytest.raises(StoreWriteError, match="Could not save blog post data."):
        store.write([])
