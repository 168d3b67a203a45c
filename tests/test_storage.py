"""Tests for StorageItem."""

from functools import partial

import pytest

from tra.backends import MemoryStorage
from tra.cipher import decrypt, encrypt
from tra.storage import JSON_MARKER, StorageItem, identity, load


def plain_item(key, storage, default=None):
    return StorageItem(key, default, encode_fn=None, decode_fn=None, storage=storage)


def test_default_written_on_construction():
    storage = MemoryStorage()
    item = StorageItem("k", default="fallback", storage=storage)
    assert item.value == "fallback"
    assert "k" in storage
    assert storage["k"] != "fallback"
    assert decrypt(storage["k"]) == "fallback"


def test_default_none_is_json_tagged():
    storage = MemoryStorage()
    plain_item("k", storage)
    assert storage["k"] == JSON_MARKER + "null"


def test_string_stored_encrypted():
    storage = MemoryStorage()
    item = StorageItem("k", storage=storage)
    item.value = "secret"
    assert storage["k"] == encrypt("secret", 64)
    assert "secret" not in storage["k"]


def test_json_marker_applied_before_encryption():
    storage = MemoryStorage()
    item = StorageItem("k", storage=storage)
    item.value = {"a": 1}
    assert decrypt(storage["k"]) == JSON_MARKER + '{"a": 1}'


@pytest.mark.parametrize("value", [
    "text", "", 0, 42, 3.5, True, False, [1, "two", None], {"nested": {"list": [1, 2]}},
])
def test_roundtrip_through_new_item(value):
    storage = MemoryStorage()
    StorageItem("k", storage=storage).value = value
    assert StorageItem("k", storage=storage).value == value


def test_identity_codec_stores_plaintext():
    storage = MemoryStorage()
    item = plain_item("k", storage)
    item.value = "plain"
    assert storage["k"] == "plain"
    item.value = [1, 2]
    assert storage["k"] == JSON_MARKER + "[1, 2]"
    assert item.encode_fn is identity
    assert item.decode_fn is identity


def test_custom_codec():
    storage = MemoryStorage()
    item = StorageItem(
        "k",
        encode_fn=partial(encrypt, radix=16),
        decode_fn=partial(decrypt, radix=16),
        storage=storage,
    )
    item.value = "hex"
    assert storage["k"] == encrypt("hex", 16)
    assert item.sync() == "hex"


def test_sync_decoder_override():
    storage = MemoryStorage({"k": encrypt("old format", 16)})
    item = plain_item("k", storage)
    assert item.sync(partial(decrypt, radix=16)) == "old format"


def test_sync_picks_up_external_writes():
    storage = MemoryStorage()
    a = StorageItem("k", storage=storage)
    b = StorageItem("k", storage=storage)
    a.value = "from a"
    assert b.value is None
    assert b.sync() == "from a"
    assert b.value == "from a"


def test_undefined_payload_reads_as_default():
    storage = MemoryStorage({"k": JSON_MARKER + "undefined"})
    item = plain_item("k", storage, default=5)
    assert item.value == 5


def test_existing_value_not_overwritten():
    storage = MemoryStorage({"k": "stored"})
    item = plain_item("k", storage, default="default")
    assert item.value == "stored"
    assert storage["k"] == "stored"


def test_value_falls_back_to_default():
    storage = MemoryStorage()
    item = plain_item("k", storage, default="d")
    item.value = None
    assert item.value == "d"


def test_reset_and_is_default():
    storage = MemoryStorage()
    item = StorageItem("k", default=3, storage=storage)
    assert item.is_default()
    item.value = 4
    assert not item.is_default()
    assert item.reset() == 3
    assert item.is_default()
    assert StorageItem("k", storage=storage).value == 3


def test_remove():
    storage = MemoryStorage()
    item = StorageItem("k", default="d", storage=storage)
    item.value = "v"
    item.remove()
    assert "k" not in storage
    assert item.value == "d"
    item.remove()  # already gone


def test_clear_removes_every_key():
    storage = MemoryStorage({"other": "x"})
    item = StorageItem("k", storage=storage)
    item.clear()
    assert len(storage) == 0


def test_default_storage_is_memory():
    item = StorageItem("k", default=1)
    assert isinstance(item.storage, MemoryStorage)
    assert item.value == 1


def test_plain_dict_storage():
    storage = {}
    item = plain_item("k", storage)
    item.value = "v"
    assert storage == {"k": "v"}


def test_invalid_json_payload_raises():
    storage = MemoryStorage({"k": JSON_MARKER + "{not json"})
    with pytest.raises(ValueError):
        plain_item("k", storage)


def test_bad_arguments():
    with pytest.raises(TypeError, match="key is not a string"):
        StorageItem(1)
    with pytest.raises(TypeError, match="encode_fn is defined but is not callable"):
        StorageItem("k", encode_fn="nope")
    with pytest.raises(TypeError, match="decode_fn is defined but is not callable"):
        StorageItem("k", decode_fn=42)
    with pytest.raises(TypeError, match="storage must be a MutableMapping"):
        StorageItem("k", storage=[])


def test_load_does_not_write():
    storage = MemoryStorage({"k": encrypt("original")})
    before = dict(storage)
    assert load(storage, "k") == "original"
    # a wrong decoder yields garbage but leaves the stored text alone
    assert load(storage, "k", partial(decrypt, radix=16)) != "original"
    assert dict(storage) == before


def test_load_json_and_missing_key():
    storage = MemoryStorage({"k": JSON_MARKER + "[1, 2]"})
    assert load(storage, "k", identity) == [1, 2]
    with pytest.raises(KeyError):
        load(storage, "missing", identity)


def test_sync_returns_stored_null_not_default():
    storage = MemoryStorage({"k": JSON_MARKER + "null"})
    item = plain_item("k", storage, default=5)
    assert item.sync() is None
    assert item.value == 5


def test_reset_returns_default():
    item = plain_item("k", MemoryStorage(), default=[1])
    assert item.reset() == [1]
