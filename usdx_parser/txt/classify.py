from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

import regex

from .model import NoteKind

DEFAULT_SIGILS: Mapping[str, NoteKind] = MappingProxyType(
    {
        ":": NoteKind.NORMAL,
        "*": NoteKind.GOLDEN,
        "F": NoteKind.FREESTYLE,
        "R": NoteKind.RAP,
        "G": NoteKind.GOLDEN_RAP,
    }
)

LINE_BREAK_SIGIL = "-"

_VOICE_RE = regex.compile(r"^P\s*([1-9][0-9]*)\s*$")
_END_RE = regex.compile(r"^E(?:\s.*)?$")


class LineKind(str, Enum):
    TAG = "tag"
    NOTE = "note"
    LINE_BREAK = "line_break"
    VOICE = "voice"
    END = "end"
    BLANK = "blank"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True, slots=True)
class ClassifiedLine:
    kind: LineKind
    payload: str = ""
    sigil: str | None = None
    voice: int | None = None


def classify_line(line: str, sigils: Mapping[str, NoteKind] = DEFAULT_SIGILS) -> ClassifiedLine:
    """
    Look at the leading characters only; payload shape is checked later by
    the tag/note parsers. `payload` is whatever follows the sigil.
    """
    line = line.rstrip("\r")
    s = line.lstrip()
    if not s.strip():
        return ClassifiedLine(LineKind.BLANK)

    if s[0] == "#":
        return ClassifiedLine(LineKind.TAG, payload=s[1:], sigil="#")

    m = _VOICE_RE.match(s)
    if m:
        return ClassifiedLine(LineKind.VOICE, payload=m.group(1), sigil="P", voice=int(m.group(1)))

    # longest sigil first, so multi-character dialect sigils win over ":" etc.
    for sigil in sorted(sigils, key=len, reverse=True):
        if sigil and s.startswith(sigil):
            return ClassifiedLine(LineKind.NOTE, payload=s[len(sigil) :], sigil=sigil)

    if s[0] == LINE_BREAK_SIGIL:
        return ClassifiedLine(LineKind.LINE_BREAK, payload=s[1:], sigil=LINE_BREAK_SIGIL)

    if _END_RE.match(s):
        return ClassifiedLine(LineKind.END, payload=s[1:], sigil="E")

    return ClassifiedLine(LineKind.UNRECOGNIZED, payload=line)
