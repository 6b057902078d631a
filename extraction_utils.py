"""Field extraction from playlist JSON exports.

Each field is resolved independently: a structured ``json.loads`` pass is tried
first and any requested field it leaves empty is recovered from the raw text
with a ``"key": "value"`` pattern. Malformed input never raises; the worst case
is an all-empty record.
"""
from __future__ import annotations

import json
import logging
import pathlib
import re
from typing import Dict, List, Mapping, Optional, Tuple

from models import FieldSet, PlaylistRecord

logger = logging.getLogger(__name__)

NOT_FOUND = "(not found)"

# Record attribute -> JSON key
FIELD_KEYS: Dict[str, str] = {
    "playlist_name": "playlistName",
    "share_code": "shareCode",
    "author_name": "authorName",
    "author_steam_id": "authorSteamId",
    "description": "description",
}

_REQUIRED_FIELDS = ("playlist_name", "share_code")
_AUTHOR_FIELDS = ("author_name", "author_steam_id")
_BOM = "\ufeff"

_FIELD_PATTERNS = {
    attr: re.compile(r'"%s"\s*:\s*"([^"]*)"' % re.escape(key))
    for attr, key in FIELD_KEYS.items()
}


def requested_fields(config: FieldSet) -> List[str]:
    fields = list(_REQUIRED_FIELDS)
    if config.include_author:
        fields.extend(_AUTHOR_FIELDS)
    if config.include_description:
        fields.append("description")
    return fields


def parse_structured(content: str) -> Mapping[str, object]:
    """Parse ``content`` as a JSON object, returning ``{}`` when it is not one."""
    try:
        payload = json.loads(content.removeprefix(_BOM))
    except (ValueError, RecursionError):
        return {}
    return payload if isinstance(payload, dict) else {}


def _structured_value(payload: Mapping[str, object], key: str) -> str:
    value = payload.get(key)
    return value if isinstance(value, str) else ""


def _pattern_value(content: str, attr: str) -> str:
    match = _FIELD_PATTERNS[attr].search(content)
    return match.group(1) if match else ""


def resolve_fields(
    content: str, config: FieldSet
) -> Tuple[Dict[str, str], Dict[str, str]]:
    """Resolve every requested field, returning ``(values, strategies)``.

    ``strategies`` maps each resolved attribute to ``"structured"`` or
    ``"pattern"``; unresolved attributes are absent from it.
    """
    payload = parse_structured(content)
    values: Dict[str, str] = {}
    strategies: Dict[str, str] = {}

    for attr in requested_fields(config):
        value = _structured_value(payload, FIELD_KEYS[attr])
        if value:
            strategies[attr] = "structured"
        else:
            value = _pattern_value(content, attr)
            if value:
                strategies[attr] = "pattern"
        values[attr] = value

    return values, strategies


def _log_trace(
    record: PlaylistRecord, config: FieldSet, strategies: Mapping[str, str]
) -> None:
    logger.info("File: %s", record.source or "<content>")
    for attr in requested_fields(config):
        value = getattr(record, attr)
        logger.info("  %s: %s", FIELD_KEYS[attr], value or NOT_FOUND)
        if attr in strategies:
            logger.debug("    %s resolved via %s parse", FIELD_KEYS[attr], strategies[attr])


def extract(content: str, config: FieldSet, source: str = "") -> PlaylistRecord:
    if not content:
        logger.warning("Empty content: %s", source or "<content>")
        return PlaylistRecord(source=source)

    values, strategies = resolve_fields(content, config)
    record = PlaylistRecord(source=source, **values)
    _log_trace(record, config, strategies)
    return record


def load_file_text(path: pathlib.Path) -> str:
    """Read ``path`` as UTF-8 (BOM stripped); undecodable bytes become U+FFFD."""
    try:
        raw = path.read_bytes()
    except OSError as exc:
        logger.warning("Failed to read %s: %s", path, exc)
        return ""
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        logger.warning("Invalid UTF-8 in %s, replacing undecodable bytes: %s", path, exc)
        text = raw.decode("utf-8-sig", errors="replace")
    if not text:
        logger.warning("Failed to open or empty file: %s", path)
    return text


def extract_file(path: pathlib.Path, config: FieldSet) -> PlaylistRecord:
    content = load_file_text(path)
    if not content:
        return PlaylistRecord(source=path.name)
    return extract(content, config, source=path.name)


__all__ = [
    "FIELD_KEYS",
    "NOT_FOUND",
    "requested_fields",
    "parse_structured",
    "resolve_fields",
    "extract",
    "load_file_text",
    "extract_file",
]
