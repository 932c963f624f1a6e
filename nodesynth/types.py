"""Plain data shared by the synthesis engine."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class MidiInfo:
    """A key currently held on the MIDI input."""

    key_index: int = 0
    velocity: int = 0  # between 0 and 255
    rising_edge: bool = False  # only true on the first frame the key is held


@dataclass
class AudioInfos:
    """Format of the audio stream being generated."""

    sample_rate: int = 0
    channels: int = 0


@dataclass
class MidiPlayerSettings:
    """User-facing player settings."""

    use_keyboard_as_input: bool = True
    split_buffer_graph: bool = False


@dataclass
class Timer:
    """Counts down ``duration`` and fires each time it runs out."""

    duration: float
    _counter: float = field(default=0.0, init=False, repr=False)

    def update(self, delta_time: float) -> bool:
        """Advance by ``delta_time``; return True and rearm when the timer expires."""
        self._counter -= delta_time
        if self._counter <= 0.0:
            self._counter = self.duration
            return True
        return False