from __future__ import annotations

import regex

from usdx_parser.errors import IncompleteNoteLineError, NoteFieldError

from .model import LineBreak, Note, NoteKind

_TOKEN_RE = regex.compile(r"\S+")
_UINT_RE = regex.compile(r"^[0-9]+$")
_SINT_RE = regex.compile(r"^[+-]?[0-9]+$")


def _uint(field: str, token: str, line_no: int | None) -> int:
    if not _UINT_RE.match(token):
        raise NoteFieldError(field, token, line_no)
    return int(token)


def _sint(field: str, token: str, line_no: int | None) -> int:
    if not _SINT_RE.match(token):
        raise NoteFieldError(field, token, line_no)
    return int(token)


def parse_note(payload: str, kind: NoteKind, line_no: int | None = None) -> Note:
    """
    Parse `START DURATION PITCH LYRIC` (the part after the sigil).

    The lyric is everything after the single separator following PITCH and
    is kept verbatim: a leading space marks a word boundary in USDX files,
    a trailing '~' or '-' marks hyphenation. Freestyle notes need all three
    numeric fields as well.
    """
    tokens = []
    for m in _TOKEN_RE.finditer(payload):
        tokens.append(m)
        if len(tokens) == 3:
            break
    if len(tokens) < 3:
        raise IncompleteNoteLineError(payload.strip(), line_no)

    start = _uint("start", tokens[0].group(), line_no)
    duration = _uint("duration", tokens[1].group(), line_no)
    pitch = _sint("pitch", tokens[2].group(), line_no)

    rest = payload[tokens[2].end() :]
    text = rest[1:] if rest else ""
    return Note(kind=kind, start=start, duration=duration, pitch=pitch, text=text)


def parse_line_break(payload: str, line_no: int | None = None) -> LineBreak:
    """`BEAT [NEXT_BEAT]`; anything past the second number is ignored."""
    tokens = payload.split()
    if not tokens:
        raise IncompleteNoteLineError("-" + payload, line_no)
    beat = _uint("beat", tokens[0], line_no)
    next_beat = _uint("next_beat", tokens[1], line_no) if len(tokens) > 1 else None
    return LineBreak(beat=beat, next_beat=next_beat)
