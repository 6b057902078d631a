"""Core data models used across the playlist scanner."""
from dataclasses import dataclass, field
from typing import List, Set

from pydantic import BaseModel


@dataclass(frozen=True)
class FieldSet:
    include_author: bool = False
    include_description: bool = False


class PlaylistRecord(BaseModel):
    playlist_name: str = ""
    share_code: str = ""
    author_name: str = ""
    author_steam_id: str = ""
    description: str = ""
    # File the record came from; diagnostic only, never rendered.
    source: str = ""

    @property
    def is_complete(self) -> bool:
        return bool(self.playlist_name and self.share_code)

    @property
    def has_author(self) -> bool:
        return bool(self.author_name and self.author_steam_id)


@dataclass
class ScanCounters:
    total: int = 0
    succeeded: int = 0
    failed: int = 0
    dup_code: int = 0
    dup_name: int = 0


@dataclass
class AggregateState:
    records: List[PlaylistRecord] = field(default_factory=list)
    seen_share_codes: Set[str] = field(default_factory=set)
    seen_playlist_names: Set[str] = field(default_factory=set)
    counters: ScanCounters = field(default_factory=ScanCounters)


__all__ = ["FieldSet", "PlaylistRecord", "ScanCounters", "AggregateState"]
