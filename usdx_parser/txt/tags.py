from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Mapping

import regex

from usdx_parser.errors import MalformedTagError, TagValueError

from .model import Tag


class TagType(str, Enum):
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"


DEFAULT_TAG_TYPES: Mapping[str, TagType] = MappingProxyType(
    {
        "ARTIST": TagType.STRING,
        "TITLE": TagType.STRING,
        "MP3": TagType.STRING,
        "AUDIO": TagType.STRING,
        "LANGUAGE": TagType.STRING,
        "COVER": TagType.STRING,
        "BACKGROUND": TagType.STRING,
        "VIDEO": TagType.STRING,
        "GENRE": TagType.STRING,
        "EDITION": TagType.STRING,
        "CREATOR": TagType.STRING,
        "ENCODING": TagType.STRING,
        "VERSION": TagType.STRING,
        "P1": TagType.STRING,
        "P2": TagType.STRING,
        "DUETSINGERP1": TagType.STRING,
        "DUETSINGERP2": TagType.STRING,
        "BPM": TagType.FLOAT,
        "START": TagType.FLOAT,
        "VIDEOGAP": TagType.FLOAT,
        "PREVIEWSTART": TagType.FLOAT,
        "GAP": TagType.INT,
        "END": TagType.INT,
        "MEDLEYSTARTBEAT": TagType.INT,
        "MEDLEYENDBEAT": TagType.INT,
        "YEAR": TagType.INT,
        "RELATIVE": TagType.BOOL,
    }
)

# value constraints on top of the type; key -> (predicate, description)
_RANGES: dict[str, tuple[Callable[[Any], bool], str]] = {
    "BPM": (lambda v: v > 0, "must be > 0"),
    "GAP": (lambda v: v >= 0, "must be >= 0"),
    "START": (lambda v: v >= 0, "must be >= 0"),
    "END": (lambda v: v >= 0, "must be >= 0"),
    "MEDLEYSTARTBEAT": (lambda v: v >= 0, "must be >= 0"),
    "MEDLEYENDBEAT": (lambda v: v >= 0, "must be >= 0"),
}

_INT_RE = regex.compile(r"^[+-]?[0-9]+$")
# editors in some locales write "314,5"
_FLOAT_RE = regex.compile(r"^[+-]?(?:[0-9]+(?:[.,][0-9]*)?|[.,][0-9]+)$")

_TRUE = ("YES", "TRUE")
_FALSE = ("NO", "FALSE")


def _to_int(raw: str) -> int:
    if not _INT_RE.match(raw):
        raise ValueError(raw)
    return int(raw)


def _to_float(raw: str) -> float:
    if not _FLOAT_RE.match(raw):
        raise ValueError(raw)
    return float(raw.replace(",", "."))


def _to_bool(raw: str) -> bool:
    up = raw.upper()
    if up in _TRUE:
        return True
    if up in _FALSE:
        return False
    raise ValueError(raw)


_COERCE: dict[TagType, Callable[[str], Any]] = {
    TagType.STRING: str,
    TagType.INT: _to_int,
    TagType.FLOAT: _to_float,
    TagType.BOOL: _to_bool,
}


def coerce_value(key: str, raw: str, tag_type: TagType, line_no: int | None = None) -> Any:
    try:
        value = _COERCE[tag_type](raw)
    except ValueError as e:
        raise TagValueError(key, raw, line_no, reason=f"expected {tag_type.value}") from e

    rng = _RANGES.get(key)
    if rng is not None and tag_type in (TagType.INT, TagType.FLOAT):
        ok, why = rng
        if not ok(value):
            raise TagValueError(key, raw, line_no, reason=why)
    return value


def parse_tag(
    payload: str,
    tag_types: Mapping[str, TagType] = DEFAULT_TAG_TYPES,
    line_no: int | None = None,
) -> Tag:
    """
    `payload` is the tag line without the leading '#'.
    Split on the first ':' only, so values like 'C:\\songs\\a.mp3' survive.
    Unknown keys keep their raw string value.
    """
    key, sep, raw = payload.partition(":")
    key = key.strip().upper()
    if not sep or not key:
        raise MalformedTagError(payload, line_no)

    raw = raw.strip()
    tag_type = tag_types.get(key)
    if tag_type is None:
        return Tag(key=key, raw=raw, value=raw, line_no=line_no)
    return Tag(key=key, raw=raw, value=coerce_value(key, raw, tag_type, line_no), line_no=line_no)
