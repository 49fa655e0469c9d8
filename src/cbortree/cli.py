from __future__ import annotations
import argparse, json, logging, sys
from typing import List, Optional

from .binary.errors import CborDecodeError
from .binary.reader import load_bytes, decode, iter_items
from .models.common import UnsupportedPolicy
from .models.config import DEFAULT_MAX_DEPTH, DecoderConfig
from .textio.diagnostic import to_diagnostic

logger = logging.getLogger(__name__)

def _read_input(args) -> bytes:
    if args.hex:
        try:
            return bytes.fromhex("".join(args.input.split()))
        except ValueError as e:
            raise ValueError(f"bad hex input: {e}") from e
    return load_bytes(args.input)

def _config(args) -> DecoderConfig:
    return DecoderConfig(
        max_depth=args.max_depth,
        canonical=args.canonical,
        on_unsupported=UnsupportedPolicy.INVALID if args.lenient else UnsupportedPolicy.RAISE,
    )

def _dump_json(values) -> list:
    return [v.model_dump(mode="json") for v in values]

def cmd_info(args):
    raw = _read_input(args)
    cfg = _config(args)

    # Summary mode: one line per top-level item
    if args.format == "summary":
        count = 0
        for offset, item in iter_items(raw, cfg):
            print(f"{offset:>8}  {item.kind:<7} {to_diagnostic(item)[:60]}")
            count += 1
        print(f"items={count}, bytes={len(raw)}")
        return 0

    values = decode(raw, cfg)
    if args.format == "json":
        print(json.dumps(_dump_json(values), indent=2, allow_nan=False))
    else:
        for v in values:
            print(to_diagnostic(v))
    return 0

def cmd_to_json(args):
    values = decode(_read_input(args), _config(args))
    with open(args.output, "w", encoding="utf-8") as out:
        json.dump(_dump_json(values), out, indent=2, allow_nan=False)
    return 0

def _add_decode_options(sp: argparse.ArgumentParser) -> None:
    sp.add_argument("input", help="Path to a CBOR file, or a hex string with --hex")
    sp.add_argument("--hex", action="store_true", help="Treat INPUT as hex-encoded bytes (whitespace allowed)")
    sp.add_argument("--max-depth", type=int, default=DEFAULT_MAX_DEPTH, help="Maximum array/map/tag nesting (1-256)")
    sp.add_argument("--canonical", action="store_true", help="Reject arguments not in their shortest form")
    sp.add_argument("--lenient", action="store_true", help="Emit invalid(..) markers instead of failing on reserved encodings")

def build_parser():
    p = argparse.ArgumentParser(prog="cbortree", description="Decode CBOR payloads into a value tree for inspection")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = p.add_subparsers(dest="cmd")

    sp = sub.add_parser("info", help="print decoded items")
    _add_decode_options(sp)
    sp.add_argument("--format", default="diag", choices=["diag", "json", "summary"])
    sp.set_defaults(func=cmd_info)

    sp = sub.add_parser("to-json", help="write decoded items as JSON")
    _add_decode_options(sp)
    sp.add_argument("output")
    sp.set_defaults(func=cmd_to_json)

    return p

def main(argv: Optional[List[str]] = None) -> int:
    p = build_parser()
    ns = p.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not hasattr(ns, "func"):
        p.print_help()
        return 2
    try:
        return ns.func(ns)
    except CborDecodeError as e:
        logger.debug("decode failed", exc_info=True)
        print(f"cbortree: decode error: {e}", file=sys.stderr)
        return 2
    except (OSError, ValueError) as e:
        print(f"cbortree: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
