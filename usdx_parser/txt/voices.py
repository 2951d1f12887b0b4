from __future__ import annotations

import logging

from .model import Event, VoiceTrack

logger = logging.getLogger(__name__)


class VoiceSplitter:
    """
    Routes events to per-voice tracks. Voice 1 is implicit until a `P<n>`
    marker switches voices; tracks are reported in first-seen order.
    """

    def __init__(self) -> None:
        self.current = 1
        self._events: dict[int, list[Event]] = {}

    def switch(self, index: int) -> None:
        if index != self.current:
            logger.debug("Switching to voice P%s", index)
        self.current = index
        self._events.setdefault(index, [])

    def append(self, event: Event) -> None:
        self._events.setdefault(self.current, []).append(event)

    def tracks(self) -> tuple[VoiceTrack, ...]:
        if not self._events:
            return (VoiceTrack(index=1),)
        return tuple(VoiceTrack(index=i, events=tuple(ev)) for i, ev in self._events.items())
