from __future__ import annotations


class UsdxError(Exception):
    pass


class IoError(UsdxError):
    """Reading or decoding a song file failed (not found, permissions, bad bytes)."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class ParseError(UsdxError, ValueError):
    """
    Base of every parse failure. `kind` names the variant so callers that
    prefer a single `except ParseError` can still branch on it.
    """

    kind = "parse"

    def __init__(self, message: str, line_no: int | None = None):
        super().__init__(message)
        self.message = message
        self.line_no = line_no

    def __str__(self) -> str:
        if self.line_no is None:
            return self.message
        return f"line {self.line_no}: {self.message}"


class UnrecognizedLineError(ParseError):
    kind = "unrecognized_line"

    def __init__(self, line: str, line_no: int | None = None):
        super().__init__(f"Unrecognized line: {line!r}", line_no)
        self.line = line


class MalformedTagError(ParseError):
    kind = "malformed_tag"

    def __init__(self, payload: str, line_no: int | None = None):
        super().__init__(f"Malformed tag (expected #KEY:VALUE): #{payload}", line_no)
        self.payload = payload


class TagValueError(ParseError):
    kind = "tag_value"

    def __init__(self, key: str, raw: str, line_no: int | None = None, reason: str = ""):
        msg = f"Invalid value for #{key}: {raw!r}"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg, line_no)
        self.key = key
        self.raw = raw


class IncompleteNoteLineError(ParseError):
    kind = "incomplete_note_line"

    def __init__(self, line: str, line_no: int | None = None):
        super().__init__(f"Incomplete note line: {line!r}", line_no)
        self.line = line


class NoteFieldError(ParseError):
    kind = "note_field"

    def __init__(self, field: str, token: str, line_no: int | None = None):
        super().__init__(f"Invalid {field}: {token!r}", line_no)
        self.field = field
        self.token = token


class MissingRequiredTagError(ParseError):
    kind = "missing_required_tag"

    def __init__(self, missing: tuple[str, ...], line_no: int | None = None):
        super().__init__("Missing required tag(s): " + ", ".join(f"#{k}" for k in missing), line_no)
        self.missing = missing


class EmptySongError(ParseError):
    kind = "empty_song"

    def __init__(self, line_no: int | None = None):
        super().__init__("Song has no notes", line_no)
