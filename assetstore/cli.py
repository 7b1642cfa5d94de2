"""Assetstore CLI: quick storage operations from the command line.

Usage examples::

    assetstore --provider s3 --config '{"bucket":"acme"}' list docs
    assetstore -p s3 -c @config.json soft-delete docs/Readme.txt
    assetstore -p filesystem -c '{"root_path":"/srv/assets"}' read a.txt --kwargs '{"private":true}'
    assetstore -p s3 -c @config.json validate
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import sys
from pathlib import Path
from typing import Any

OPERATIONS = [
    "list", "inspect", "exists", "read", "write", "delete",
    "soft-delete", "restore", "move", "public-url", "validate",
]


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the ``assetstore`` CLI.

    Returns:
        Configured :class:`~argparse.ArgumentParser`.
    """
    parser = argparse.ArgumentParser(
        prog="assetstore",
        description="Namespaced object storage CLI",
    )
    parser.add_argument(
        "--provider", "-p",
        required=True,
        choices=["s3", "filesystem"],
        help="Storage provider",
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        default="{}",
        help='JSON config string, or @path to a JSON file (e.g. \'{"bucket":"acme"}\')',
    )
    parser.add_argument(
        "operation",
        choices=OPERATIONS,
        help="Operation to perform",
    )
    parser.add_argument(
        "args",
        nargs="*",
        help="Positional arguments for the operation (write takes a local file first)",
    )
    parser.add_argument(
        "--kwargs", "-k",
        type=str,
        default="{}",
        help='JSON keyword arguments for the operation (e.g. \'{"private":true}\')',
    )
    return parser


def _load_json(raw: str, flag: str) -> dict[str, Any]:
    if raw.startswith("@"):
        try:
            raw = Path(raw[1:]).read_text()
        except OSError as e:
            print(f"Cannot read {flag} file: {e}", file=sys.stderr)
            sys.exit(1)
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        print(f"Invalid {flag} JSON: {e}", file=sys.stderr)
        sys.exit(1)
    if not isinstance(value, dict):
        print(f"Invalid {flag} JSON: expected an object, got {type(value).__name__}", file=sys.stderr)
        sys.exit(1)
    return value


def _to_jsonable(result: Any) -> Any:
    if dataclasses.is_dataclass(result) and not isinstance(result, type):
        return dataclasses.asdict(result)
    if isinstance(result, list):
        return [_to_jsonable(item) for item in result]
    return result


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Parses arguments, creates a provider via :func:`provider_factory`,
    and invokes the requested operation. Results are printed as JSON
    (dicts/lists/records), raw bytes for ``read``, or plain text.

    Args:
        argv: Optional argument list (defaults to ``sys.argv``).
    """
    parser = _build_parser()
    ns = parser.parse_args(argv)

    config = _load_json(ns.config, "--config")
    kwargs = _load_json(ns.kwargs, "--kwargs")

    # Lazy-import to avoid loading boto3 for --help
    from assetstore.base.exceptions import AssetStoreError
    from assetstore.factory import get_provider_class, provider_factory

    if ns.operation == "validate":
        report = get_provider_class(ns.provider).validate_configuration(config)
        if report.ok:
            print("OK")
            return
        print(json.dumps(report.as_dict(), indent=2), file=sys.stderr)
        sys.exit(1)

    try:
        provider = provider_factory(ns.provider, config)
    except ValueError as e:  # pydantic.ValidationError is a ValueError
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    args = list(ns.args)
    if ns.operation == "write":
        if len(args) != 2:
            print("write expects: <local-file> <path>", file=sys.stderr)
            sys.exit(1)
        args[0] = Path(args[0]).read_bytes()

    method = getattr(provider, ns.operation.replace("-", "_"))
    try:
        result = method(*args, **kwargs)
    except (AssetStoreError, TypeError) as e:
        print(f"Operation failed: {e}", file=sys.stderr)
        sys.exit(1)

    if ns.operation == "read":
        sys.stdout.buffer.write(result)
    elif result is None and ns.operation == "inspect":
        print("null")
    elif result is None:
        print("OK")
    elif isinstance(result, (dict, list)) or dataclasses.is_dataclass(result):
        print(json.dumps(_to_jsonable(result), indent=2, default=str))
    else:
        print(result)


if __name__ == "__main__":
    main()
