"""Parser for UltraStar Deluxe (USDX) karaoke song files."""

from usdx_parser.config import ParserConfig, load_config
from usdx_parser.errors import (
    EmptySongError,
    IncompleteNoteLineError,
    IoError,
    MalformedTagError,
    MissingRequiredTagError,
    NoteFieldError,
    ParseError,
    TagValueError,
    UnrecognizedLineError,
    UsdxError,
)
from usdx_parser.txt.export import export_json, export_txt
from usdx_parser.txt.model import LineBreak, Note, NoteKind, Song, Tag, VoiceTrack
from usdx_parser.txt.parse import (
    ParseStats,
    load_song,
    parse_song,
    parse_song_with_stats,
    read_song_text,
    song_from_buffer,
)
from usdx_parser.txt.tags import TagType

__all__ = [
    "EmptySongError",
    "IncompleteNoteLineError",
    "IoError",
    "LineBreak",
    "MalformedTagError",
    "MissingRequiredTagError",
    "Note",
    "NoteFieldError",
    "NoteKind",
    "ParseError",
    "ParseStats",
    "ParserConfig",
    "Song",
    "Tag",
    "TagType",
    "TagValueError",
    "UnrecognizedLineError",
    "UsdxError",
    "VoiceTrack",
    "export_json",
    "export_txt",
    "load_config",
    "load_song",
    "parse_song",
    "parse_song_with_stats",
    "read_song_text",
    "song_from_buffer",
]
