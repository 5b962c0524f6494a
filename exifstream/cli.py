# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Command-line interface for exifstream

Prints the EXIF tags of one or more JPEG files and can save the embedded
thumbnail.

Copyright 2025 DNAi inc.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from exifstream import __version__
from exifstream.exceptions import ExifStreamError
from exifstream.exif_parser import ParseResult, parse_file
from exifstream.logging_utils import setup_logging


def format_output(result: ParseResult, format_type: str = "text") -> str:
    """
    Format a parse result for display.
    
    Args:
        result: Parse result of one file
        format_type: Output format ('text', 'json', 'csv')
        
    Returns:
        Formatted output string
    """
    metadata = result.to_dict()
    gps = {
        "Composite:GPSLatitude": result.gps_latitude(),
        "Composite:GPSLongitude": result.gps_longitude(),
    }
    metadata.update({k: v for k, v in gps.items() if v is not None})
    if result.thumbnail is not None:
        metadata["Composite:ThumbnailLength"] = len(result.thumbnail)

    if format_type == "json":
        return json.dumps(metadata, indent=2, ensure_ascii=False)
    elif format_type == "csv":
        lines = ["Tag,Value"]
        for tag, value in metadata.items():
            # Escape quotes in CSV
            value_str = _display(value).replace('"', '""')
            lines.append(f'"{tag}","{value_str}"')
        return "\n".join(lines)
    else:  # text format (default)
        width = max((len(tag) for tag in metadata), default=0)
        return "\n".join(f"{tag:<{width}} : {_display(value)}" for tag, value in metadata.items())


def _display(value) -> str:
    if value is None:
        return "(undecoded)"
    if isinstance(value, list):
        return " ".join(str(v) for v in value)
    return str(value).rstrip('\x00')


def save_thumbnail(result: ParseResult, output_path: Path) -> bool:
    if result.thumbnail is None:
        return False
    output_path.write_bytes(result.thumbnail)
    return True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="exifstream",
        description="Read EXIF metadata embedded in JPEG files.",
    )
    parser.add_argument('files', nargs='+', type=Path, help='JPEG files to read')
    parser.add_argument('--format', choices=['text', 'json', 'csv'], default='text', help='Output format')
    parser.add_argument('--no-thumbnail', action='store_true', help='Do not follow the thumbnail directory')
    parser.add_argument('--save-thumbnail', type=Path, metavar='PATH',
                        help='Write the embedded thumbnail to PATH (single input file only)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Trace markers and directory entries')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.save_thumbnail and len(args.files) > 1:
        parser.error("--save-thumbnail accepts a single input file")
    setup_logging(verbose=args.verbose)

    exit_code = 0
    for file_path in args.files:
        try:
            result = parse_file(file_path, extract_thumbnail=not args.no_thumbnail)
        except (ExifStreamError, OSError) as e:
            print(f"Error: {file_path}: {e}", file=sys.stderr)
            exit_code = 1
            continue

        if len(args.files) > 1 and args.format == 'text':
            print(f"======== {file_path}")
        print(format_output(result, args.format))

        if args.save_thumbnail:
            if save_thumbnail(result, args.save_thumbnail):
                print(f"Thumbnail written to {args.save_thumbnail}", file=sys.stderr)
            else:
                print(f"Error: {file_path}: no thumbnail found", file=sys.stderr)
                exit_code = 1
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
