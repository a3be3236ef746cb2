from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

import yaml

from .codecs import CodecRegistry, register_builtin_codecs, register_numeric_codecs
from .config import load_settings
from .errors import DefaultsError
from .reconcile import PreferenceEntry, Reconciler
from .stores import DefaultsCommand

logger = logging.getLogger("pydefaults")


def parse_value(text: str, *, raw: bool = False) -> Any:
    """Turn command line *text* into a Python value.

    The text is read as a YAML scalar so ``true`` becomes a bool and ``12`` an
    int; anything that does not parse stays a string.
    """
    if raw:
        return text
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError:
        return text


def _registry(args: argparse.Namespace) -> CodecRegistry:
    registry = register_builtin_codecs(CodecRegistry())
    if args.numeric:
        register_numeric_codecs(registry)
    return registry


def _reconciler(args: argparse.Namespace) -> Reconciler:
    return Reconciler(DefaultsCommand(args.executable), _registry(args))


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def read_cmd(args: argparse.Namespace) -> int:
    reconciler = _reconciler(args)
    entry = PreferenceEntry(args.domain, args.key)
    current = reconciler.current_state(entry)
    if args.as_json:
        print(json.dumps({"type": current.type_tag, "value": current.value}))
    else:
        print(f"type: {current.type_tag if current.type_tag is not None else '-'}")
        print(f"value: {current.value if current.value is not None else '-'}")
    return 0 if current.type_tag is not None else 1


def typed_value(registry: CodecRegistry, type_tag: str | None, text: str) -> Any:
    """Turn *text* into a value of *type_tag* when that type recognises it.

    Falls back to :func:`parse_value` for unknown types and for text the
    type's decoder does not accept (``true`` for a boolean, for example).
    """
    if type_tag is not None and type_tag in registry:
        value = registry.decode(type_tag, text)
        if value is not None:
            return value
    return parse_value(text)


def apply_cmd(args: argparse.Namespace) -> int:
    reconciler = _reconciler(args)
    if args.raw:
        value: Any = args.value
    else:
        type_tag = args.type
        if type_tag is None:
            type_tag = reconciler.current_state(
                PreferenceEntry(args.domain, args.key)
            ).type_tag
        value = typed_value(reconciler.registry, type_tag, args.value)
    entry = PreferenceEntry(args.domain, args.key, value, args.type)
    result = reconciler.plan(entry) if args.dry_run else reconciler.reconcile(entry)
    if result.changed:
        verb = "would change" if args.dry_run else "changed"
        print(f"{verb}: {entry.domain} {entry.key} -{result.type_tag} {result.encoded}")
    else:
        print(f"unchanged: {entry.domain} {entry.key}")
    return 0


def infer_cmd(args: argparse.Namespace) -> int:
    registry = _registry(args)
    print(registry.infer_type(parse_value(args.value, raw=args.raw)))
    return 0


def types_cmd(args: argparse.Namespace) -> int:
    for tag in _registry(args).tags():
        print(tag)
    return 0


def build_parser(prog: str = "pydefaults") -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=prog, description="Reconcile macOS preferences through defaults."
    )
    parser.add_argument("-v", "--verbose", action="count", default=0)
    parser.add_argument(
        "--numeric", action="store_true", help="Enable the integer and float types"
    )
    parser.add_argument(
        "--command", dest="executable", default=None, help="defaults executable"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_read = subparsers.add_parser("read", help="Show the current type and value.")
    p_read.add_argument("domain")
    p_read.add_argument("key")
    p_read.add_argument("--json", dest="as_json", action="store_true")
    p_read.set_defaults(func=read_cmd)

    p_apply = subparsers.add_parser("apply", help="Set KEY to VALUE if it differs.")
    p_apply.add_argument("domain")
    p_apply.add_argument("key")
    p_apply.add_argument("value")
    p_apply.add_argument("--type", default=None, help="Type tag, inferred if omitted")
    p_apply.add_argument("--raw", action="store_true", help="Treat VALUE as plain text")
    p_apply.add_argument("--dry-run", action="store_true")
    p_apply.set_defaults(func=apply_cmd)

    p_infer = subparsers.add_parser("infer", help="Print the type inferred for VALUE.")
    p_infer.add_argument("value")
    p_infer.add_argument("--raw", action="store_true", help="Treat VALUE as plain text")
    p_infer.set_defaults(func=infer_cmd)

    p_types = subparsers.add_parser("types", help="List registered types in order.")
    p_types.set_defaults(func=types_cmd)

    return parser


def _configure_logging(level: str, verbose: int) -> None:
    if verbose >= 2:
        level = "DEBUG"
    elif verbose == 1 and level != "DEBUG":
        level = "INFO"
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: list[str] | None = None, prog: str = "pydefaults") -> int:
    parser = build_parser(prog=prog)
    args = parser.parse_args(argv)
    settings = load_settings()
    if args.executable is None:
        args.executable = settings.command
    _configure_logging(settings.log_level, args.verbose)
    try:
        return int(args.func(args))
    except DefaultsError as exc:
        logger.debug("%s failed", args.command, exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
