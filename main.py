#!/usr/bin/env python3
"""
main.py — playlist share-code scanner
-------------------------------------
• scans a folder for *.json playlist exports
• extracts playlistName / shareCode (+ author, description on request)
• counts duplicate share codes and playlist names
• writes a flat text summary (results.txt by default)
"""
from __future__ import annotations

import argparse
import logging
import os
import pathlib
import sys
from typing import List, Optional, Sequence

from dotenv import load_dotenv
from tqdm import tqdm
from tqdm.contrib.logging import logging_redirect_tqdm

from aggregation_utils import ingest
from extraction_utils import extract_file
from models import AggregateState, FieldSet
from report_utils import (
    DEFAULT_RESULTS_NAME,
    export_records_csv,
    format_statistics,
    render,
    write_report,
)

logger = logging.getLogger(__name__)

JSON_SUFFIX = ".json"


def _as_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        normalized = value.strip().lower()
        if not normalized:
            return False
        return normalized in {"true", "1", "yes", "y"}
    return False


def configure_logging(quiet: bool = False, verbose: bool = False) -> None:
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    logging.getLogger().setLevel(level)


def discover_json_files(folder: pathlib.Path) -> List[pathlib.Path]:
    """Regular ``*.json`` files directly inside ``folder``, sorted by name."""
    return sorted(
        path for path in folder.iterdir() if path.is_file() and path.suffix == JSON_SUFFIX
    )


def default_output_path(folder: pathlib.Path) -> pathlib.Path:
    return folder.parent / DEFAULT_RESULTS_NAME


def scan_folder(
    folder: pathlib.Path,
    config: FieldSet,
    *,
    progress: bool = True,
) -> AggregateState:
    state = AggregateState()
    files = discover_json_files(folder)
    show_bar = progress and sys.stdout.isatty()
    with logging_redirect_tqdm():
        for json_path in tqdm(files, desc="Scanning", unit="file", disable=not show_bar):
            ingest(state, extract_file(json_path, config))
    return state


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    load_dotenv()
    parser = argparse.ArgumentParser(
        description="Extract playlist names and share codes from a folder of JSON files."
    )
    parser.add_argument(
        "folder",
        nargs="?",
        type=pathlib.Path,
        default=pathlib.Path(os.getenv("PLAYLIST_SCAN_DIR", ".")),
        help="Folder containing *.json playlist files (default: $PLAYLIST_SCAN_DIR or '.').",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=pathlib.Path,
        default=os.getenv("PLAYLIST_RESULTS_PATH") or None,
        help="Report path (default: results.txt next to the scanned folder).",
    )
    parser.add_argument(
        "--author",
        action="store_true",
        default=_as_bool(os.getenv("PLAYLIST_INCLUDE_AUTHOR")),
        help="Also extract authorName and authorSteamId.",
    )
    parser.add_argument(
        "--description",
        action="store_true",
        default=_as_bool(os.getenv("PLAYLIST_INCLUDE_DESCRIPTION")),
        help="Also extract the playlist description.",
    )
    parser.add_argument(
        "--csv",
        type=pathlib.Path,
        help="Additionally export the parsed records to this CSV file.",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable the progress bar.",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-q", "--quiet", action="store_true", help="Hide the per-file trace."
    )
    verbosity.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging."
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(quiet=args.quiet, verbose=args.verbose)

    folder: pathlib.Path = args.folder
    if not folder.exists():
        print(f"❌ Error: Path does not exist: {folder}")
        return 1
    if not folder.is_dir():
        print(f"❌ Error: Path is not a directory: {folder}")
        return 1

    config = FieldSet(include_author=args.author, include_description=args.description)

    print(f"🔍 Scanning folder: {folder}")
    print()

    state = scan_folder(folder, config, progress=not args.no_progress)
    counters = state.counters

    if counters.total == 0:
        print("⚠️ No .json files found in the directory.")
        return 0

    print()
    print(f"📊 Processed {counters.total} JSON file(s).")
    for line in format_statistics(counters):
        print(f"  {line}")

    output_path = args.output or default_output_path(folder)
    try:
        write_report(render(state.records, config), output_path)
    except OSError as exc:
        print(f"❌ Failed to open output file: {output_path} ({exc})")
        return 1
    print(f"📝 Results written to {output_path}")

    if args.csv:
        try:
            rows = export_records_csv(state.records, args.csv, config)
        except OSError as exc:
            print(f"❌ Failed to write CSV export: {args.csv} ({exc})")
            return 1
        print(f"📝 CSV export written to {args.csv} ({rows} row(s))")

    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
