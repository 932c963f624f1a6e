"""Components that produce a signal: constants, key pitch, oscillators, SoundFonts."""

from __future__ import annotations

import math
import random
from collections.abc import Sequence
from enum import IntEnum
from typing import Protocol

from .components import AudioComponent
from .types import AudioInfos, MidiInfo

_A4_FREQUENCY = 440.0
_A4_KEY = 69
_SEMITONE_RATIO = 2.0 ** (1.0 / 12.0)


class OscType(IntEnum):
    SINE = 0
    SQUARE = 1
    TRIANGLE = 2
    SAW_DIG = 3
    WHITE_NOISE = 4
    PINK_NOISE = 5
    BROWNIAN_NOISE = 6


def piano_key_frequency(key_id: int) -> float:
    """Equal-tempered frequency of MIDI key ``key_id``, with A4 (key 69) at 440 Hz."""
    return _A4_FREQUENCY * _SEMITONE_RATIO ** (key_id - _A4_KEY)


class Number(AudioComponent):
    """Outputs a constant value."""

    component_name = "Number"
    input_count = 0

    def __init__(self, number: float = 0.0) -> None:
        super().__init__()
        self.number = number

    def process(
        self,
        audio_infos: AudioInfos,
        key_pressed: Sequence[MidiInfo],
        current_key: int = 0,
    ) -> float:
        return float(self.number)


class KeyboardFrequency(AudioComponent):
    """Outputs the pitch of the key being processed."""

    component_name = "KeyboardFrequency"
    input_count = 0

    def process(
        self,
        audio_infos: AudioInfos,
        key_pressed: Sequence[MidiInfo],
        current_key: int = 0,
    ) -> float:
        if not key_pressed:
            return 0.0
        return piano_key_frequency(key_pressed[current_key].key_index)


class Oscillator(AudioComponent):
    """Periodic waveform or noise generator driven by the shared audio clock."""

    class Inputs(IntEnum):
        FREQUENCY = 0
        PHASE = 1

    component_name = "Oscillator"
    input_count = 2

    def __init__(
        self,
        osc_type: OscType = OscType.SINE,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__()
        self.osc_type = osc_type
        self._rng = rng if rng is not None else random.Random()
        self._pink_b0 = 0.0
        self._pink_b1 = 0.0
        self._pink_b2 = 0.0
        self._brown_last = 0.0

    def process(
        self,
        audio_infos: AudioInfos,
        key_pressed: Sequence[MidiInfo],
        current_key: int = 0,
    ) -> float:
        if not self.inputs[self.Inputs.FREQUENCY]:
            return 0.0

        frequency = self.get_inputs_value(
            self.Inputs.FREQUENCY, audio_infos, key_pressed, current_key
        )
        phase = self.get_inputs_value(
            self.Inputs.PHASE, audio_infos, key_pressed, current_key
        )
        return self.osc(frequency, math.pi * phase, AudioComponent.time, self.osc_type)

    def white_noise(self) -> float:
        """A uniform sample in [-1, 1]."""
        return 2.0 * self._rng.random() - 1.0

    def osc(self, hertz: float, phase: float, time: float, osc_type: OscType) -> float:
        """Sample the waveform ``osc_type`` of frequency ``hertz`` at ``time``."""
        t = hertz * 2.0 * math.pi * time + phase

        if osc_type is OscType.SINE:
            return math.sin(t)
        if osc_type is OscType.SQUARE:
            return 1.0 if math.sin(t) > 0 else -1.0
        if osc_type is OscType.TRIANGLE:
            return math.asin(math.sin(t)) * (2.0 / math.pi)
        if osc_type is OscType.SAW_DIG:
            period = 1.0 / hertz if hertz else math.inf
            return (2.0 / math.pi) * (
                hertz * math.pi * math.fmod(time, period) - math.pi / 2.0
            )
        if osc_type is OscType.WHITE_NOISE:
            return self.white_noise()
        if osc_type is OscType.PINK_NOISE:
            white = self.white_noise()
            self._pink_b0 = 0.99765 * self._pink_b0 + white * 0.0990460
            self._pink_b1 = 0.96300 * self._pink_b1 + white * 0.2965164
            self._pink_b2 = 0.57000 * self._pink_b2 + white * 1.0526913
            # Scaled down: the raw filter output is far too loud.
            return (self._pink_b0 + self._pink_b1 + self._pink_b2 + white * 0.1848) / 20.0
        if osc_type is OscType.BROWNIAN_NOISE:
            white = self.white_noise()
            self._brown_last = min(1.0, max(-1.0, self._brown_last + white * 0.02))
            return self._brown_last
        return 0.0


class Synthesizer(Protocol):
    """A sample-based synthesizer a SoundFontPlayer can drive."""

    def note_on(self, preset_index: int, key: int, velocity: float) -> None: ...

    def note_off(self, preset_index: int, key: int) -> None: ...

    def render(self) -> float: ...


class SoundFontPlayer(AudioComponent):
    """Plays held keys through a SoundFont synthesizer."""

    component_name = "SoundFontPlayer"
    input_count = 0

    def __init__(self, synth: Synthesizer | None = None) -> None:
        super().__init__()
        self.synth = synth
        self.notes_on: set[int] = set()

    def process(
        self,
        audio_infos: AudioInfos,
        key_pressed: Sequence[MidiInfo],
        current_key: int = 0,
    ) -> float:
        # The synthesizer mixes every note itself, so only render once per frame.
        if current_key != 0 or self.synth is None:
            return 0.0

        self.add_notes(key_pressed)
        self.remove_notes(key_pressed)
        return float(self.synth.render())

    def add_notes(self, key_pressed: Sequence[MidiInfo]) -> None:
        """Start every held key that is not yet sounding."""
        if self.synth is None:
            return
        for key in key_pressed:
            if key.key_index not in self.notes_on:
                self.notes_on.add(key.key_index)
                self.synth.note_on(0, key.key_index, key.velocity / 255.0)

    def remove_notes(self, key_pressed: Sequence[MidiInfo]) -> None:
        """Stop every sounding note whose key is no longer held."""
        if self.synth is None:
            return
        held = {key.key_index for key in key_pressed}
        for note in sorted(self.notes_on - held):
            self.synth.note_off(0, note)
            self.notes_on.discard(note)