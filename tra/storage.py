"""A single cached, obfuscated value in a key-value store.

Values are written as text. Strings are written as-is; anything else is
JSON-encoded behind a marker so it can be told apart on the way back:

    "hello"         → encode_fn("hello")
    42              → encode_fn("\\0JSON\\0 42")
    {"a": [1, 2]}   → encode_fn('\\0JSON\\0 {"a": [1, 2]}')

The marker is added before encode_fn runs and stripped after decode_fn,
so encode_fn/decode_fn only ever see and produce plain strings. By default
they are encrypt/decrypt with radix 64; pass None to store plaintext.
"""

import json
from collections.abc import Callable, MutableMapping
from typing import Any

from tra.backends import MemoryStorage
from tra.cipher import decrypt, encrypt

JSON_MARKER = "\0JSON\0 "


def identity(value: str) -> str:
    return value


def default_encoder(value: str) -> str:
    return encrypt(value, 64)


def default_decoder(value: str) -> str:
    return decrypt(value, 64)


def load(storage: MutableMapping, key: str, decode_fn: Callable[[str], str] = default_decoder) -> Any:
    """Decode the value stored under key without writing anything back.

    Raises KeyError if the key is absent.
    """
    text = decode_fn(storage[key])
    if not text.startswith(JSON_MARKER):
        return text
    payload = text[len(JSON_MARKER):]
    # written by clients that serialize a missing value as undefined
    return None if payload == "undefined" else json.loads(payload)


def _codec_fn(name: str, fn: Callable[[str], str] | None) -> Callable[[str], str]:
    if fn is None:
        return identity
    if not callable(fn):
        raise TypeError(f"{name} is defined but is not callable")
    return fn


class StorageItem:
    """One key of `storage`, with an in-memory copy of its decoded value.

    The constructor reads the current stored value (see sync()); if the key
    is absent the default is written.
    """

    def __init__(
        self,
        key: str,
        default: Any = None,
        encode_fn: Callable[[str], str] | None = default_encoder,
        decode_fn: Callable[[str], str] | None = default_decoder,
        storage: MutableMapping | None = None,
    ):
        if not isinstance(key, str):
            raise TypeError("key is not a string")
        self.key = key
        self.default = default
        self.encode_fn = _codec_fn("encode_fn", encode_fn)
        self.decode_fn = _codec_fn("decode_fn", decode_fn)

        if storage is None:
            storage = MemoryStorage()
        if not isinstance(storage, MutableMapping):
            raise TypeError("storage must be a MutableMapping")
        self.storage = storage

        self._value: Any = None
        self.sync()

    @property
    def value(self) -> Any:
        return self._value if self._value is not None else self.default

    @value.setter
    def value(self, value: Any) -> None:
        self._value = value
        text = value if isinstance(value, str) else JSON_MARKER + json.dumps(value)
        self.storage[self.key] = self.encode_fn(text)

    def sync(self, decode_fn: Callable[[str], str] | None = None) -> Any:
        """Reload the value from storage and return it.

        decode_fn overrides the item's decoder for this read only, e.g. to
        migrate data written with a different radix.
        """
        if self.key not in self.storage:
            return self.reset()
        value = load(self.storage, self.key, decode_fn or self.decode_fn)
        self.value = value
        return value

    def reset(self) -> Any:
        """Write the default value back and return it."""
        self.value = self.default
        return self.default

    def remove(self) -> None:
        """Forget the cached value and delete the key from storage."""
        self._value = None
        self.storage.pop(self.key, None)

    def clear(self) -> None:
        """Delete every key in the backing storage, not just this one."""
        self.storage.clear()

    def is_default(self) -> bool:
        return self._value == self.default

    def __repr__(self):
        return f"StorageItem({self.key!r}, value={self.value!r})"
