#!/usr/bin/env python3
"""Decode a GraphQL JSON response file into a dataclass and print it."""

import argparse, dataclasses, enum, importlib, json, logging, pathlib, sys, time
from decimal import Decimal

from .config import Config
from .decoder import loads
from .errors import DecodeError

logger = logging.getLogger(__name__)


def load_type(path: str) -> type:
    """Import ``package.module:Class``."""
    module_name, _, attr = path.partition(":")
    if not attr:
        raise ValueError(f"expected module:Class, got {path!r}")
    obj = importlib.import_module(module_name)
    for part in attr.split("."):
        obj = getattr(obj, part)
    return obj


def _json_default(value):
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    raise TypeError(f"{type(value).__name__} is not JSON serializable")


def cli(argv=None) -> int:
    ap = argparse.ArgumentParser(description=__doc__)
    ap.add_argument("file", type=pathlib.Path)
    ap.add_argument("--type", dest="type_path", required=True, help="target dataclass as module:Class")
    ap.add_argument("--backend", default=Config.BACKEND, help="ijson backend")
    ap.add_argument("--buf-size", type=int, default=Config.BUF_SIZE, help="read buffer in bytes")
    ap.add_argument("--log-level", default=Config.LOG_LEVEL)
    args = ap.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper())
    cls = load_type(args.type_path)

    start = time.time()
    try:
        with open(args.file, "rb") as f:
            result = loads(f, cls, backend=args.backend, buf_size=args.buf_size)
    except DecodeError as e:
        print(f"{args.file}: {e}", file=sys.stderr)
        return 1
    logger.info("Decoded %s into %s in %.2fs", args.file, cls.__name__, time.time() - start)

    print(json.dumps(dataclasses.asdict(result), indent=2, default=_json_default))
    return 0


if __name__ == "__main__":
    sys.exit(cli())
