#!/usr/bin/env python3
"""tra — rotation cipher and radix codec for obfuscated key-value storage."""

import argparse
import json
import sys
from functools import partial
from pathlib import Path

from tra import radix as codec
from tra.backends import FileStorage, StorageError
from tra.cipher import DEFAULT_RADIX, decrypt, encrypt
from tra.storage import StorageItem, identity, load

DEFAULT_STORE = Path.home() / ".tra" / "store.json"


def _text_arg(value: str) -> str:
    return sys.stdin.read() if value == "-" else value


def _radix(value: str) -> int:
    try:
        return codec.check_radix(int(value))
    except (TypeError, ValueError) as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _codecs(args):
    if args.plain:
        return identity, identity
    return partial(encrypt, radix=args.radix), partial(decrypt, radix=args.radix)


def cmd_encrypt(args):
    print(encrypt(_text_arg(args.text), args.radix))


def cmd_decrypt(args):
    print(decrypt(_text_arg(args.text), args.radix, strict=args.strict))


def cmd_encode(args):
    print(codec.encode(bytes.fromhex(_text_arg(args.hex).strip()), args.radix))


def cmd_decode(args):
    print(codec.decode(_text_arg(args.text).strip(), args.radix, strict=args.strict).hex())


def cmd_get(args):
    storage = FileStorage(args.store)
    if args.key not in storage:
        print(f"tra: no such key: {args.key}", file=sys.stderr)
        sys.exit(1)
    _, decode_fn = _codecs(args)
    value = load(storage, args.key, decode_fn)
    print(value if isinstance(value, str) else json.dumps(value))


def cmd_set(args):
    content = _text_arg(args.value)
    value = json.loads(content) if args.json else content
    encode_fn, decode_fn = _codecs(args)
    item = StorageItem(args.key, None, encode_fn, decode_fn, storage=FileStorage(args.store))
    item.value = value


def cmd_remove(args):
    FileStorage(args.store).pop(args.key, None)


def cmd_clear(args):
    FileStorage(args.store).clear()


def main():
    parser = argparse.ArgumentParser(prog="tra", description="Rotation cipher and radix codec")
    sub = parser.add_subparsers(dest="command")

    radix_opts = argparse.ArgumentParser(add_help=False)
    radix_opts.add_argument("-r", "--radix", type=_radix, default=DEFAULT_RADIX,
                            help="2-36, or 64 for base64 (default: 64)")

    strict_opts = argparse.ArgumentParser(add_help=False)
    strict_opts.add_argument("--strict", action="store_true", help="Fail on malformed input")

    store_opts = argparse.ArgumentParser(add_help=False, parents=[radix_opts])
    store_opts.add_argument("--store", type=Path, default=DEFAULT_STORE,
                            help=f"Store file (default: {DEFAULT_STORE})")
    store_opts.add_argument("--plain", action="store_true", help="Store values unencoded")

    # encrypt / decrypt
    p = sub.add_parser("encrypt", parents=[radix_opts], help="Obfuscate text")
    p.add_argument("text", help="Text (or - for stdin)")
    p.set_defaults(func=cmd_encrypt)

    p = sub.add_parser("decrypt", parents=[radix_opts, strict_opts], help="Recover obfuscated text")
    p.add_argument("text", help="Text (or - for stdin)")
    p.set_defaults(func=cmd_decrypt)

    # encode / decode
    p = sub.add_parser("encode", parents=[radix_opts], help="Encode hex bytes in a radix")
    p.add_argument("hex", help="Bytes as hex (or - for stdin)")
    p.set_defaults(func=cmd_encode)

    p = sub.add_parser("decode", parents=[radix_opts, strict_opts], help="Decode radix text to hex bytes")
    p.add_argument("text", help="Encoded text (or - for stdin)")
    p.set_defaults(func=cmd_decode)

    # store
    p = sub.add_parser("get", parents=[store_opts], help="Print a stored value")
    p.add_argument("key")
    p.set_defaults(func=cmd_get)

    p = sub.add_parser("set", parents=[store_opts], help="Store a value")
    p.add_argument("key")
    p.add_argument("value", help="Value (or - for stdin)")
    p.add_argument("--json", action="store_true", help="Parse the value as JSON")
    p.set_defaults(func=cmd_set)

    p = sub.add_parser("remove", parents=[store_opts], help="Delete a stored value")
    p.add_argument("key")
    p.set_defaults(func=cmd_remove)

    p = sub.add_parser("clear", parents=[store_opts], help="Delete every stored value")
    p.set_defaults(func=cmd_clear)

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)
    try:
        args.func(args)
    except (TypeError, ValueError, StorageError) as e:
        print(f"tra: error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
