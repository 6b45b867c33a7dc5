"""Command line entry point: ``passport-photo``."""
from __future__ import annotations

import argparse
import sys
from typing import Dict, List, Optional

from config import get_settings
from passport_photo import __version__
from passport_photo.client import create_photo_client


def _parse_params(pairs: List[str]) -> Dict[str, str]:
    """Turn ``KEY=VALUE`` arguments into query parameters."""
    params: Dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"expected KEY=VALUE, got {pair!r}")
        params[key] = value
    return params


def cmd_fetch(args: argparse.Namespace) -> int:
    """Download one photo and print its path."""
    settings = get_settings()
    if args.verbose:
        settings.configure_logging()

    try:
        params = _parse_params(args.param)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    overrides = {}
    if args.base_url:
        overrides["passport_base_url"] = args.base_url
    if args.token:
        overrides["passport_token"] = args.token
    if overrides:
        settings = settings.model_copy(update=overrides)

    try:
        client = create_photo_client(settings)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    output_dir = args.output_dir if args.output_dir is not None else settings.output_dir
    with client:
        if args.visibility == "private":
            result = client.get_private_photo(args.identifier, output_dir, params)
        else:
            result = client.get_public_photo(args.identifier, output_dir, params)

    if not result:
        print(f"photo unavailable: {args.identifier}", file=sys.stderr)
        return 1

    print(result.path)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="passport-photo",
        description="Download user photos from a Passport image service.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    sub = parser.add_subparsers(dest="visibility", required=True)
    for name, help_text in (
        ("public", "download a public photo"),
        ("private", "download a private photo (requires a token)"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("identifier", help="username or identifier of the user")
        p.add_argument("-o", "--output-dir", default=None, help="directory to save the photo to")
        p.add_argument(
            "-p",
            "--param",
            action="append",
            default=[],
            metavar="KEY=VALUE",
            help="image transform query parameter, e.g. w=200 (repeatable)",
        )
        p.add_argument("--base-url", default=None, help="Passport base URL")
        p.add_argument("--token", default=None, help="bearer token for private photos")
        p.add_argument("-v", "--verbose", action="store_true", help="enable logging output")
        p.set_defaults(func=cmd_fetch)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
