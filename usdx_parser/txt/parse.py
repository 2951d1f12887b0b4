from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

from usdx_parser.config import ParserConfig
from usdx_parser.errors import (
    EmptySongError,
    IoError,
    MissingRequiredTagError,
    TagValueError,
    UnrecognizedLineError,
)

from .classify import LineKind, classify_line
from .model import LineBreak, Note, Song, Tag
from .notes import parse_line_break, parse_note
from .tags import parse_tag
from .voices import VoiceSplitter

logger = logging.getLogger(__name__)

Buffer = Union[str, bytes, bytearray, memoryview]


@dataclass(frozen=True, slots=True)
class ParseStats:
    lines_total: int
    tag_lines: int
    note_lines: int
    line_breaks: int
    voice_markers: int
    lines_ignored: int
    lines_skipped: int
    lines_after_end: int


class SongBuilder:
    """
    Line-by-line accumulator. Sole mutator while a song is being parsed;
    `finish()` validates and hands out the immutable Song.
    """

    def __init__(self, config: ParserConfig):
        self.config = config
        self._tags: dict[str, Tag] = {}
        self._voices = VoiceSplitter()
        self._rel_offset: dict[int, int] = {}
        self.ended = False
        self.end_line_no: int | None = None

        self.tag_lines = 0
        self.note_lines = 0
        self.line_breaks = 0
        self.voice_markers = 0
        self.lines_ignored = 0
        self.lines_skipped = 0

    @property
    def _relative(self) -> bool:
        tag = self._tags.get("RELATIVE")
        return tag is not None and tag.value is True

    def feed(self, line_no: int, raw: str) -> bool:
        """Consume one line. Returns False once the end marker was seen."""
        if self.ended:
            return False

        cl = classify_line(raw, self.config.sigils)

        if cl.kind is LineKind.BLANK:
            self.lines_ignored += 1
        elif cl.kind is LineKind.TAG:
            self.tag_lines += 1
            tag = parse_tag(cl.payload, self.config.tag_types, line_no)
            prev = self._tags.get(tag.key)
            if prev is not None:
                logger.debug("#%s redefined on line %s (was line %s)", tag.key, line_no, prev.line_no)
            self._tags[tag.key] = tag
        elif cl.kind is LineKind.NOTE:
            self.note_lines += 1
            note = parse_note(cl.payload, self.config.sigils[cl.sigil], line_no)
            if self._relative:
                base = self._rel_offset.get(self._voices.current, 0)
                note = Note(note.kind, note.start + base, note.duration, note.pitch, note.text)
            self._voices.append(note)
        elif cl.kind is LineKind.LINE_BREAK:
            self.line_breaks += 1
            lb = parse_line_break(cl.payload, line_no)
            if self._relative:
                lb = self._shift_break(lb)
            self._voices.append(lb)
        elif cl.kind is LineKind.VOICE:
            self.voice_markers += 1
            self._voices.switch(cl.voice)
        elif cl.kind is LineKind.END:
            logger.debug("End marker on line %s", line_no)
            self.ended = True
            self.end_line_no = line_no
            return False
        else:
            if not self.config.lenient:
                raise UnrecognizedLineError(cl.payload, line_no)
            logger.warning("Skipping unrecognized line %s: %r", line_no, cl.payload)
            self.lines_skipped += 1
        return True

    def _shift_break(self, lb: LineBreak) -> LineBreak:
        # relative songs restart beat counting after every line break
        voice = self._voices.current
        base = self._rel_offset.get(voice, 0)
        step = lb.next_beat if lb.next_beat is not None else lb.beat
        self._rel_offset[voice] = base + step
        return LineBreak(
            beat=base + lb.beat,
            next_beat=None if lb.next_beat is None else base + lb.next_beat,
        )

    def finish(self, last_line_no: int) -> Song:
        line_no = self.end_line_no if self.end_line_no is not None else last_line_no

        missing = tuple(k for k in self.config.required_tags if k.upper() not in self._tags)
        if missing:
            raise MissingRequiredTagError(missing, line_no)

        voices = self._voices.tracks()
        if not any(v.notes for v in voices):
            raise EmptySongError(line_no)

        self._check_number("BPM", lambda v: v > 0, "must be > 0")
        self._check_number("GAP", lambda v: v >= 0, "must be >= 0")

        return Song(
            tags={k: t.value for k, t in self._tags.items()},
            voices=voices,
            raw_tags=dict(self._tags),
        )

    def _check_number(self, key: str, ok: Any, why: str) -> None:
        tag = self._tags.get(key)
        if tag is None or not isinstance(tag.value, (int, float)) or isinstance(tag.value, bool):
            return
        if not ok(tag.value):
            raise TagValueError(key, tag.raw, tag.line_no, reason=why)

    def stats(self, lines_total: int) -> ParseStats:
        lines_after_end = 0
        if self.end_line_no is not None:
            lines_after_end = lines_total - self.end_line_no
        return ParseStats(
            lines_total=lines_total,
            tag_lines=self.tag_lines,
            note_lines=self.note_lines,
            line_breaks=self.line_breaks,
            voice_markers=self.voice_markers,
            lines_ignored=self.lines_ignored,
            lines_skipped=self.lines_skipped,
            lines_after_end=lines_after_end,
        )


def parse_song_with_stats(text: str, config: ParserConfig | None = None) -> tuple[Song, ParseStats]:
    builder = SongBuilder(config or ParserConfig())
    if text.startswith("\ufeff"):
        text = text[1:]

    # only \n, \r\n and lone \r end a line; lyrics may carry \x0c, U+2028 etc.
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    for line_no, raw in enumerate(lines, start=1):
        if not builder.feed(line_no, raw):
            break

    song = builder.finish(len(lines))
    return song, builder.stats(len(lines))


def parse_song(text: str, config: ParserConfig | None = None) -> Song:
    """
    Parse USDX song text.

    Fail-fast: the first problem raises a ParseError subclass carrying the
    1-based line number; no partial Song is returned.
    """
    song, _stats = parse_song_with_stats(text, config)
    return song


def _decode(data: bytes, path: str | None = None) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        where = f" {path}" if path else ""
        raise IoError(f"Cannot decode{where} as UTF-8: {e}", path) from e


def song_from_buffer(buffer: Buffer, config: ParserConfig | None = None) -> Song:
    """Same as parse_song, but also takes raw bytes (decoded as UTF-8)."""
    if isinstance(buffer, str):
        return parse_song(buffer, config)
    return parse_song(_decode(bytes(buffer)), config)


def read_song_text(path: str | Path) -> str:
    """Read and decode a song file; any failure surfaces as IoError."""
    p = Path(path)
    try:
        data = p.read_bytes()
    except OSError as e:
        raise IoError(f"Cannot read {p}: {e}", str(p)) from e
    logger.debug("Read %s bytes from %s", len(data), p)
    return _decode(data, str(p))


def load_song(path: str | Path, config: ParserConfig | None = None) -> Song:
    return parse_song(read_song_text(path), config)
