from __future__ import annotations

import json

from .classify import DEFAULT_SIGILS, LINE_BREAK_SIGIL
from .model import LineBreak, Note, Song

_KIND_SIGIL = {kind: sigil for sigil, kind in DEFAULT_SIGILS.items()}


def _fmt_event(e: Note | LineBreak) -> str:
    if isinstance(e, LineBreak):
        if e.next_beat is None:
            return f"{LINE_BREAK_SIGIL} {e.beat}"
        return f"{LINE_BREAK_SIGIL} {e.beat} {e.next_beat}"
    return f"{_KIND_SIGIL[e.kind]} {e.start} {e.duration} {e.pitch} {e.text}"


def export_txt(song: Song) -> str:
    """
    Serialize back to USDX text. Beats are always written absolute, so
    #RELATIVE is dropped. Raw tag values are written as they were read.
    """
    out: list[str] = []
    for key, value in song.tags.items():
        if key == "RELATIVE":
            continue
        tag = song.raw_tags.get(key)
        out.append(f"#{key}:{tag.raw if tag is not None else value}")

    with_markers = song.is_duet or any(v.index != 1 for v in song.voices)
    for v in song.voices:
        if with_markers:
            out.append(f"P{v.index}")
        out.extend(_fmt_event(e) for e in v.events)
    out.append("E")
    return "\n".join(out) + "\n"


def export_json(song: Song) -> str:
    voices = []
    for v in song.voices:
        events = []
        for e in v.events:
            if isinstance(e, LineBreak):
                events.append({"type": "line_break", "beat": e.beat, "next_beat": e.next_beat})
            else:
                events.append(
                    {
                        "type": "note",
                        "kind": e.kind.value,
                        "start": e.start,
                        "duration": e.duration,
                        "pitch": e.pitch,
                        "text": e.text,
                    }
                )
        voices.append({"index": v.index, "events": events})

    return json.dumps({"tags": dict(song.tags), "voices": voices}, ensure_ascii=False, indent=2)
