import pytest

from usdx_parser.errors import MalformedTagError, TagValueError
from usdx_parser.txt.tags import DEFAULT_TAG_TYPES, TagType, parse_tag


def test_key_is_normalized_and_value_stripped():
    tag = parse_tag("artist: Three Days Grace ", line_no=3)
    assert tag.key == "ARTIST"
    assert tag.value == "Three Days Grace"
    assert tag.line_no == 3


def test_split_on_first_colon_only():
    tag = parse_tag("VIDEO:C:\\videos\\clip.avi")
    assert tag.value == "C:\\videos\\clip.avi"


@pytest.mark.parametrize(
    "payload, expected",
    [
        ("BPM:100", 100.0),
        ("BPM:314,5", 314.5),
        ("BPM:12.25", 12.25),
        ("GAP:1500", 1500),
        ("YEAR:1985", 1985),
        ("START:12,5", 12.5),
        ("END:98000", 98000),
        ("MEDLEYSTARTBEAT:120", 120),
        ("RELATIVE:YES", True),
        ("RELATIVE:no", False),
        ("RELATIVE:true", True),
    ],
)
def test_known_tags_are_coerced(payload, expected):
    assert parse_tag(payload).value == expected


def test_bpm_is_float():
    assert isinstance(parse_tag("BPM:100").value, float)


def test_unknown_tag_kept_as_raw_string():
    tag = parse_tag("CALCMEDLEY:OFF")
    assert tag.key == "CALCMEDLEY"
    assert tag.value == "OFF"


def test_missing_separator():
    with pytest.raises(MalformedTagError) as ei:
        parse_tag("TITLE Something", line_no=2)
    assert ei.value.line_no == 2


def test_empty_key():
    with pytest.raises(MalformedTagError):
        parse_tag(":value")


@pytest.mark.parametrize(
    "payload, key",
    [
        ("BPM:fast", "BPM"),
        ("BPM:0", "BPM"),
        ("BPM:-120", "BPM"),
        ("GAP:-5", "GAP"),
        ("GAP:12.5", "GAP"),
        ("YEAR:nineteen", "YEAR"),
        ("RELATIVE:maybe", "RELATIVE"),
    ],
)
def test_bad_values_raise(payload, key):
    with pytest.raises(TagValueError) as ei:
        parse_tag(payload, line_no=7)
    assert ei.value.key == key
    assert ei.value.raw == payload.split(":", 1)[1]
    assert ei.value.line_no == 7
    assert "line 7" in str(ei.value)


def test_extra_tag_types():
    types = {**DEFAULT_TAG_TYPES, "RATING": TagType.INT}
    assert parse_tag("RATING:4", types).value == 4
    with pytest.raises(TagValueError):
        parse_tag("RATING:good", types)
