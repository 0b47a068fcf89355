"""
SPDX-License-Identifier: Apache-2.0
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from subparse import settings
from subparse.models import AttachmentType, Format
from subparse.script import ASS
from subparse.serialization import create_registry, serialize


def print_summary(ass: ASS) -> None:
    properties = ass.properties
    print(f"Resolution: {properties.resolution_x}x{properties.resolution_y}")
    if properties.wrapping_style is not None:
        print(f"Wrap style: {properties.wrapping_style.name}")
    print(f"Styles ({len(ass.styles)}): {', '.join(ass.styles)}")
    print(f"Dialogues: {len(ass.dialogues)}")

    for attachment in ass.attachments:
        if attachment.type == AttachmentType.Font:
            try:
                names = ", ".join(sorted(attachment.font_names()))
            except Exception as e:
                names = f"unreadable font ({e})"
            print(f"Font {attachment.filename}: {names}")
        else:
            print(f"Graphic {attachment.filename}")

    print()
    for dialogue in ass.dialogues:
        dialogue.parts  # parse before printing
        print(dialogue)


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="subparse",
        description="Parse an ASS/SSA or SRT subtitle script and show what was read",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s episode01.ass
  %(prog)s episode01.srt --encoding cp1252
  %(prog)s episode01.ass --json > episode01.json
        """,
    )

    parser.add_argument(
        "input",
        type=str,
        help="Input subtitle file path",
    )

    parser.add_argument(
        "-f",
        "--format",
        choices=[fmt.value for fmt in Format],
        default=None,
        help="Script format (default: guessed from the file extension)",
    )

    parser.add_argument(
        "-e",
        "--encoding",
        type=str,
        default="utf-8-sig",
        help="Text encoding of the input file (default: utf-8-sig)",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the parsed script as JSON instead of a summary",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug diagnostics for suspicious or skipped lines",
    )

    parser.add_argument(
        "--trace-lines",
        action="store_true",
        help="Log every style and dialogue line as it is read",
    )

    args = parser.parse_args()

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file '{args.input}' does not exist", file=sys.stderr)
        sys.exit(1)

    if not input_path.is_file():
        print(f"Error: Input path '{args.input}' is not a file", file=sys.stderr)
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose or args.trace_lines else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    settings.set_debug_mode(args.verbose)
    settings.set_verbose_mode(args.trace_lines)

    try:
        ass = ASS.from_file(input_path, type=args.format, encoding=args.encoding)
    except Exception as e:
        print(f"Error while reading '{input_path.name}': {e}", file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc()
        sys.exit(1)

    if args.json:
        print(serialize(ass, create_registry()))
    else:
        print_summary(ass)


if __name__ == "__main__":
    main()
