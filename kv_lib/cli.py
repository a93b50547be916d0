"""Command line interface for the key-value store.

Each subcommand maps to one Store operation:

    kv get -k KEY                 print the value
    kv set -k KEY -v VALUE        insert or overwrite
    kv del -k KEY                 remove a key
    kv exists -k KEY              print OK / Not exists
    kv rename -k KEY -n NEWKEY    move a value (overwrites NEWKEY)
    kv append -k KEY -v SUFFIX    extend an existing value
    kv keys -p PATTERN            list keys containing a regex match
    kv clear                      remove every key

All subcommands accept `-s/--serializer Json|Bson` to pick the backing file.
This module is the only place that prints errors or decides exit codes.
"""
from __future__ import annotations
import argparse
import logging
import sys
from typing import Callable, Dict, Iterable, Optional

from kv_lib.config import load_config
from kv_lib.errors import KVError
from kv_lib.logging_config import configure_logging
from kv_lib.storage import SERIALIZERS, create_storage, normalize_serializer_name
from kv_lib.store import Store

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1


def _serializer_arg(value: str) -> str:
    try:
        key = normalize_serializer_name(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e
    if key not in SERIALIZERS:
        raise argparse.ArgumentTypeError("Serializer must be either Json or Bson")
    return key


def _key_arg(value: str) -> str:
    if value == "":
        raise argparse.ArgumentTypeError("key must not be empty")
    return value


def _add_serializer(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "-s", "--serializer",
        type=_serializer_arg,
        default=None,
        metavar="{Json,Bson}",
        help="Storage format (default: from config, Bson)",
    )


def _add_key(p: argparse.ArgumentParser, *flags: str, dest: str = "key", help: str = "Key") -> None:
    p.add_argument(*flags, dest=dest, type=_key_arg, required=True, help=help)


def _cmd_get(store: Store, args: argparse.Namespace) -> str:
    return store.get(args.key)


def _cmd_set(store: Store, args: argparse.Namespace) -> str:
    store.set(args.key, args.value)
    return "OK"


def _cmd_del(store: Store, args: argparse.Namespace) -> str:
    store.delete(args.key)
    return "OK"


def _cmd_exists(store: Store, args: argparse.Namespace) -> str:
    return "OK" if store.exists(args.key) else "Not exists"


def _cmd_rename(store: Store, args: argparse.Namespace) -> str:
    store.rename(args.key, args.newkey)
    return "OK"


def _cmd_append(store: Store, args: argparse.Namespace) -> str:
    store.append(args.key, args.value)
    return "OK"


def _cmd_keys(store: Store, args: argparse.Namespace) -> str:
    keys = sorted(store.list_keys(args.pattern))
    return f"Keys : {', '.join(keys)}"


def _cmd_clear(store: Store, args: argparse.Namespace) -> str:
    store.clear()
    return "OK"


COMMANDS: Dict[str, Callable[[Store, argparse.Namespace], str]] = {
    "get": _cmd_get,
    "set": _cmd_set,
    "del": _cmd_del,
    "exists": _cmd_exists,
    "rename": _cmd_rename,
    "append": _cmd_append,
    "keys": _cmd_keys,
    "clear": _cmd_clear,
}


def get_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="kv", description="A key value store")
    p.add_argument("--config", default=None, help="Path to a YAML config file (default: ./kv_config.yml)")
    p.add_argument("--verbose", action="store_true", help="Log debug output to stderr")
    sub = p.add_subparsers(dest="command", metavar="command", required=True)

    sp = sub.add_parser("get", help="Print the value stored under a key")
    _add_key(sp, "-k", "--key")
    _add_serializer(sp)

    sp = sub.add_parser("set", help="Set a key to a value")
    _add_key(sp, "-k", "--key")
    sp.add_argument("-v", "--value", required=True, help="Value")
    _add_serializer(sp)

    sp = sub.add_parser("del", help="Delete a key")
    _add_key(sp, "-k", "--key")
    _add_serializer(sp)

    sp = sub.add_parser("exists", help="Check whether a key exists")
    _add_key(sp, "-k", "--key")
    _add_serializer(sp)

    sp = sub.add_parser("rename", help="Rename a key, overwriting the target")
    _add_key(sp, "-k", "--key")
    _add_key(sp, "-n", "--newkey", dest="newkey", help="New key")
    _add_serializer(sp)

    sp = sub.add_parser("append", help="Append to the value of an existing key")
    _add_key(sp, "-k", "--key")
    sp.add_argument("-v", "--value", required=True, help="Suffix to append")
    _add_serializer(sp)

    sp = sub.add_parser("keys", help="List keys matching a regular expression")
    sp.add_argument("-p", "--pattern", required=True, help="Regular expression searched in each key")
    _add_serializer(sp)

    sp = sub.add_parser("clear", help="Remove all keys")
    _add_serializer(sp)

    return p


def main(argv: Optional[Iterable[str]] = None) -> int:
    """Run one command and return the process exit status.

    argparse exits with status 2 on usage errors.
    """
    args = get_parser().parse_args(list(argv) if argv is not None else None)

    try:
        cfg = load_config(args.config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    configure_logging("DEBUG" if args.verbose else cfg.log_level)

    try:
        storage = create_storage(
            args.serializer or cfg.serializer,
            data_dir=cfg.data_dir,
            use_lock=cfg.use_lock,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    store = Store(storage)
    logger.debug("Running %s against %r", args.command, store)
    try:
        result = COMMANDS[args.command](store, args)
    except KVError as e:
        logger.debug("%s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    print(result)
    return EXIT_OK


def run() -> None:
    sys.exit(main())
