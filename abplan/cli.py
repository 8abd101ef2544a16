from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from typing import List, Optional, Tuple

from .planner import compute, sweep
from .share import from_query, share_url
from .utils import as_report_dict, render_report
from .validation import DEFAULT_VALUES, RawInputs

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

EXIT_INVALID = 2


def _option(name: str) -> str:
    return "--" + name.replace("_", "-")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="abplan",
        description="Estimate sample size and duration for a conversion-rate A/B test.",
    )
    for name in RawInputs.field_names():
        # Kept as strings: validation reports bad values instead of argparse exiting.
        ap.add_argument(_option(name), dest=name, default=None,
                        help=f"default: {DEFAULT_VALUES[name]}")
    ap.add_argument("--query", default=None,
                    help="Load inputs from a shared query string or URL; explicit options win.")
    ap.add_argument("--json", action="store_true", help="Print the outcome as JSON")
    ap.add_argument("--share-url", metavar="BASE", default=None,
                    help="Also print a share link built on BASE")
    ap.add_argument("--sweep", metavar="FIELD=V1,V2,...", default=None,
                    help="Print a table varying one field, e.g. min_detectable_uplift=5,10,20")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return ap


def _parse_sweep(spec: str) -> Tuple[str, List[str]]:
    field, sep, values = spec.partition("=")
    field = field.strip().replace("-", "_")
    items = [v.strip() for v in values.split(",") if v.strip()]
    if not sep or not items:
        raise ValueError(f"--sweep expects FIELD=V1,V2,..., got {spec!r}")
    return field, items


def inputs_from_args(args: argparse.Namespace) -> RawInputs:
    raw = from_query(args.query) if args.query else RawInputs.defaults()
    overrides = {
        name: getattr(args, name) for name in RawInputs.field_names() if getattr(args, name) is not None
    }
    return replace(raw, **overrides)


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format=LOG_FORMAT)

    raw = inputs_from_args(args)

    if args.sweep:
        try:
            field, values = _parse_sweep(args.sweep)
            table = sweep(raw, field, values)
        except ValueError as e:
            ap.error(str(e))
        print(table.to_string(index=False))
        return 0

    outcome = compute(raw)

    if args.json:
        print(json.dumps(as_report_dict(outcome), indent=2))
    else:
        print(render_report(outcome, raw))

    if args.share_url:
        print(share_url(args.share_url, raw))

    if not outcome.ok:
        for msg in outcome.messages():
            print(msg, file=sys.stderr)
        return EXIT_INVALID
    return 0


if __name__ == "__main__":
    sys.exit(main())
