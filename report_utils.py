"""Rendering and writing of the scan summary."""
from __future__ import annotations

import pathlib
from typing import List, Sequence

import pandas as pd

from extraction_utils import NOT_FOUND
from models import FieldSet, PlaylistRecord, ScanCounters

DEFAULT_RESULTS_NAME = "results.txt"


def _render_block(record: PlaylistRecord, config: FieldSet) -> List[str]:
    lines = [
        f"Playlist Name: {record.playlist_name or NOT_FOUND}",
        f"Share Code: {record.share_code or NOT_FOUND}",
    ]
    # No partial author line: both values or nothing.
    if config.include_author and record.has_author:
        lines.append(f"Author: {record.author_name} (Steam ID: {record.author_steam_id})")
    if config.include_description and record.description:
        lines.append(f"Description: {record.description}")
    return lines


def render(records: Sequence[PlaylistRecord], config: FieldSet) -> str:
    """Render records as newline-terminated blocks separated by one blank line."""
    blocks = ["\n".join(_render_block(record, config)) + "\n" for record in records]
    return "\n".join(blocks)


def write_report(text: str, output_path: pathlib.Path) -> pathlib.Path:
    output_path.write_text(text, encoding="utf-8")
    return output_path


def _csv_columns(config: FieldSet) -> List[str]:
    columns = ["Playlist Name", "Share Code"]
    if config.include_author:
        columns.extend(["Author", "Author Steam ID"])
    if config.include_description:
        columns.append("Description")
    return columns


def export_records_csv(
    records: Sequence[PlaylistRecord], output_path: pathlib.Path, config: FieldSet
) -> int:
    rows = []
    for record in records:
        row = {
            "Playlist Name": record.playlist_name,
            "Share Code": record.share_code,
        }
        if config.include_author:
            row["Author"] = record.author_name
            row["Author Steam ID"] = record.author_steam_id
        if config.include_description:
            row["Description"] = record.description
        rows.append(row)

    df = pd.DataFrame(rows, columns=_csv_columns(config))
    df.to_csv(output_path, index=False)
    return len(df)


def format_statistics(counters: ScanCounters) -> List[str]:
    return [
        f"Total files: {counters.total}",
        f"Parsed successfully: {counters.succeeded}",
        f"Failed to parse: {counters.failed}",
        f"Duplicate share codes: {counters.dup_code}",
        f"Duplicate playlist names: {counters.dup_name}",
    ]


__all__ = [
    "DEFAULT_RESULTS_NAME",
    "render",
    "write_report",
    "export_records_csv",
    "format_statistics",
]
