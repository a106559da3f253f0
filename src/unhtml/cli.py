#!/usr/bin/env python3
"""Strip HTML from documents and print them as plain text.

Reads standard input when no files are given, so it can sit in a pipe:

Usage:
    curl -s https://example.com/feed-item | unhtml
    unhtml message.html
    unhtml --output-dir text/ page1.html page2.html
    unhtml --encoding latin-1 --errors replace legacy.html
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .base import TokenizationFault
from .config import ConverterConfig, load_config
from .converter import html_to_text


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------

def convert_stdin(config: ConverterConfig) -> bool:
    """Convert standard input to standard output.  Returns True on success."""
    try:
        html_to_text(
            sys.stdin.buffer, sys.stdout.buffer,
            encoding=config.encoding, errors=config.errors, chunk_size=config.chunk_size,
        )
    except TokenizationFault as e:
        print(f"Error converting <stdin>: {e}", file=sys.stderr)
        return False
    return True


def convert_file(path: Path, config: ConverterConfig, output_dir: Path | None = None) -> bool:
    """Convert one file to stdout or to ``output_dir/<stem>.txt``.

    Returns:
        True if the conversion succeeded.  Failures are reported on stderr.
    """
    if not path.is_file():
        print(f"Error: file not found: {path}", file=sys.stderr)
        return False

    try:
        with open(path, "rb") as reader:
            if output_dir is None:
                html_to_text(
                    reader, sys.stdout.buffer,
                    encoding=config.encoding, errors=config.errors, chunk_size=config.chunk_size,
                )
            else:
                output_dir.mkdir(parents=True, exist_ok=True)
                out_path = output_dir / f"{path.stem}.txt"
                with open(out_path, "w", encoding="utf-8", newline="\n") as writer:
                    html_to_text(
                        reader, writer,
                        encoding=config.encoding, errors=config.errors,
                        chunk_size=config.chunk_size,
                    )
                print(f"  Done: {out_path}", file=sys.stderr)
    except (TokenizationFault, OSError) as e:
        print(f"Error converting {path}: {e}", file=sys.stderr)
        return False
    return True


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="unhtml",
        description="unhtml: Convert HTML snippets to plain text",
    )
    parser.add_argument(
        "files", nargs="*", type=Path, help="HTML files to convert (default: stdin)",
    )
    parser.add_argument(
        "--output-dir", type=Path, metavar="DIR",
        help="Write each result to DIR/<name>.txt instead of stdout",
    )
    parser.add_argument(
        "--encoding", help="Input encoding (default: utf-8)",
    )
    parser.add_argument(
        "--errors", help="Decode error handling: strict, replace, ignore (default: strict)",
    )
    parser.add_argument(
        "--chunk-size", type=int, metavar="N", help="Read size for streaming input",
    )
    parser.add_argument(
        "--config", type=Path, metavar="FILE",
        help="Config file (default: ./.unhtml.toml)",
    )
    parser.add_argument(
        "--no-config", action="store_true", help="Ignore .unhtml.toml",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.chunk_size is not None and args.chunk_size < 1:
        parser.error("--chunk-size must be positive")

    config = ConverterConfig()
    if not args.no_config:
        try:
            config = load_config(args.config)
        except (ValueError, OSError) as e:
            print(f"Error loading config: {e}", file=sys.stderr)
            sys.exit(1)
    config = config.merged(
        encoding=args.encoding, errors=args.errors, chunk_size=args.chunk_size,
    )

    # Output goes to the binary layer as UTF-8 regardless of locale
    sys.stdout.flush()
    try:
        if not args.files:
            ok = convert_stdin(config)
        else:
            ok = True
            for i, path in enumerate(args.files, 1):
                if len(args.files) > 1:
                    print(f"[{i}/{len(args.files)}] {path}", file=sys.stderr)
                ok = convert_file(path, config, args.output_dir) and ok
                if args.output_dir is None and len(args.files) > 1:
                    sys.stdout.buffer.write(b"\n")
    except LookupError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    sys.stdout.buffer.flush()

    if not ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
