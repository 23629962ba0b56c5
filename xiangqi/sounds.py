"""Sound effects for game events, played through a pluggable callback."""

from __future__ import annotations

from enum import Enum
from typing import Callable, Optional

__all__ = ["Sound", "SoundPlayer"]


class Sound(Enum):
    """Game events that have a sound, valued by their resource file name."""

    WIN = "WinSound.wav"
    SELECT = "selectChess.wav"
    MOVE = "moveChess.wav"
    EAT = "eatChess.wav"
    BACK = "backChess.wav"
    GENERAL = "generalSound.wav"

    @property
    def resource(self) -> str:
        """Resource path of the sound file."""
        return f"sound/{self.value}"


class SoundPlayer:
    """Dispatches sound events to a callback; silent when there is none."""

    def __init__(self, callback: Optional[Callable[[Sound], object]] = None) -> None:
        self.callback = callback

    def play(self, sound: Sound) -> bool:
        """Play ``sound``; return whether anything was there to play it."""
        if not isinstance(sound, Sound):
            raise TypeError(f"not a sound: {sound!r}")
        if self.callback is None:
            return False
        self.callback(sound)
        return True