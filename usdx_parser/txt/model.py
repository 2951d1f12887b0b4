from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Union


class NoteKind(str, Enum):
    NORMAL = "normal"
    GOLDEN = "golden"
    FREESTYLE = "freestyle"
    RAP = "rap"
    GOLDEN_RAP = "golden_rap"


@dataclass(frozen=True, slots=True)
class Note:
    kind: NoteKind
    start: int
    duration: int
    pitch: int
    text: str

    @property
    def end(self) -> int:
        return self.start + self.duration


@dataclass(frozen=True, slots=True)
class LineBreak:
    beat: int
    next_beat: int | None = None


Event = Union[Note, LineBreak]


@dataclass(frozen=True, slots=True)
class VoiceTrack:
    index: int
    events: tuple[Event, ...] = ()

    @property
    def notes(self) -> tuple[Note, ...]:
        return tuple(e for e in self.events if isinstance(e, Note))

    @property
    def line_breaks(self) -> tuple[LineBreak, ...]:
        return tuple(e for e in self.events if isinstance(e, LineBreak))

    def lines(self) -> list[tuple[Note, ...]]:
        """Notes grouped into display lines; empty groups are dropped."""
        out: list[tuple[Note, ...]] = []
        cur: list[Note] = []
        for e in self.events:
            if isinstance(e, LineBreak):
                if cur:
                    out.append(tuple(cur))
                cur = []
            else:
                cur.append(e)
        if cur:
            out.append(tuple(cur))
        return out


@dataclass(frozen=True, slots=True)
class Tag:
    key: str
    raw: str
    value: Any
    line_no: int | None = None


@dataclass(frozen=True, slots=True)
class Song:
    tags: Mapping[str, Any]
    voices: tuple[VoiceTrack, ...]
    raw_tags: Mapping[str, Tag] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        # copy + read-only view: callers may keep the dicts they passed in
        object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))
        object.__setattr__(self, "raw_tags", MappingProxyType(dict(self.raw_tags)))

    def __hash__(self) -> int:
        return hash((tuple(self.tags.items()), self.voices))

    def voice(self, index: int) -> VoiceTrack:
        for v in self.voices:
            if v.index == index:
                return v
        raise KeyError(index)

    @property
    def is_duet(self) -> bool:
        return len(self.voices) > 1

    @property
    def notes(self) -> tuple[Note, ...]:
        return tuple(n for v in self.voices for n in v.notes)

    @property
    def artist(self) -> str | None:
        return self.tags.get("ARTIST")

    @property
    def title(self) -> str | None:
        return self.tags.get("TITLE")

    @property
    def mp3(self) -> str | None:
        return self.tags.get("MP3") or self.tags.get("AUDIO")

    @property
    def language(self) -> str | None:
        return self.tags.get("LANGUAGE")

    @property
    def genre(self) -> str | None:
        return self.tags.get("GENRE")

    @property
    def year(self) -> int | None:
        return self.tags.get("YEAR")

    @property
    def cover(self) -> str | None:
        return self.tags.get("COVER")

    @property
    def background(self) -> str | None:
        return self.tags.get("BACKGROUND")

    @property
    def video(self) -> str | None:
        return self.tags.get("VIDEO")

    @property
    def bpm(self) -> float | None:
        return self.tags.get("BPM")

    @property
    def gap(self) -> int:
        return self.tags.get("GAP", 0)

    @property
    def relative(self) -> bool:
        return bool(self.tags.get("RELATIVE", False))

    @property
    def start(self) -> float | None:
        return self.tags.get("START")

    @property
    def end(self) -> int | None:
        return self.tags.get("END")

    @property
    def medley_start_beat(self) -> int | None:
        return self.tags.get("MEDLEYSTARTBEAT")

    @property
    def medley_end_beat(self) -> int | None:
        return self.tags.get("MEDLEYENDBEAT")
