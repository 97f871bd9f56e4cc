from __future__ import annotations

"""Command line access to a registry.

The registry is loaded from a ``module:attribute`` target pointing at a
:class:`~pigeon.instance.Pigeon` (or a zero-argument callable returning one):

    pigeon fragments myapp.content:pigeon --scope page
    pigeon query myapp.content:pigeon --scope page
    pigeon validate myapp.content:pigeon records.json
"""

import argparse
import importlib
import json
import sys
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter
from pydantic_core import PydanticSerializationError

from pigeon.errors import PigeonError
from pigeon.instance import Pigeon
from pigeon.logger import get_logger

logger = get_logger("cli")

_OUTPUT = TypeAdapter(list[Any])


def load_target(target: str) -> Pigeon:
    module_name, _, attribute = target.partition(":")
    if not module_name or not attribute:
        raise PigeonError(f"target must look like 'module:attribute', got {target!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise PigeonError(f"cannot import {module_name!r}: {e}") from e
    try:
        value = getattr(module, attribute)
    except AttributeError as e:
        raise PigeonError(f"{module_name!r} has no attribute {attribute!r}") from e
    if callable(value) and not isinstance(value, Pigeon):
        value = value()
    if not isinstance(value, Pigeon):
        raise PigeonError(f"{target} is a {type(value).__name__}, not a Pigeon")
    return value


def _scoped(pigeon: Pigeon, scope: str) -> Pigeon:
    return pigeon.scope(scope) if scope else pigeon


def _read_records(path: str) -> list[Any]:
    try:
        raw = sys.stdin.read() if path == "-" else Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise PigeonError(f"cannot read {path}: {e}") from e
    try:
        records = json.loads(raw)
    except json.JSONDecodeError as e:
        raise PigeonError(f"{path}: invalid JSON ({e})") from e
    if not isinstance(records, list):
        raise PigeonError(f"{path}: expected a JSON array of records")
    return records


def _cmd_fragments(args: argparse.Namespace) -> None:
    print(_scoped(load_target(args.target), args.scope).fragments())


def _cmd_query(args: argparse.Namespace) -> None:
    print(_scoped(load_target(args.target), args.scope).query())


def _cmd_validate(args: argparse.Namespace) -> None:
    pigeon = _scoped(load_target(args.target), args.scope)
    results = pigeon.validate_sync(_read_records(args.file))
    try:
        output = _OUTPUT.dump_json(results, indent=2, by_alias=True)
    except PydanticSerializationError as e:
        raise PigeonError(f"cannot serialize validated records: {e}") from e
    print(output.decode("utf-8"))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pigeon", description="Build fragments and validate CMS content from a registry."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    fragments = subparsers.add_parser("fragments", help="Print fragment definitions")
    fragments.add_argument("target", help="module:attribute of the registry")
    fragments.add_argument("--scope", default="", help="Only components in this scope")
    fragments.set_defaults(handler=_cmd_fragments)

    query = subparsers.add_parser("query", help="Print inline fragments for a flexible field")
    query.add_argument("target", help="module:attribute of the registry")
    query.add_argument("--scope", default="", help="Only components in this scope")
    query.set_defaults(handler=_cmd_query)

    validate = subparsers.add_parser("validate", help="Validate a JSON array of CMS records")
    validate.add_argument("target", help="module:attribute of the registry")
    validate.add_argument("file", help="Path to a JSON file, or - for stdin")
    validate.add_argument("--scope", default="", help="Only components in this scope")
    validate.set_defaults(handler=_cmd_validate)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        args.handler(args)
    except PigeonError as e:
        logger.error("COMMAND FAILED command=%s error=%s", args.command, e)
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
