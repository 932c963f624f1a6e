"""Components that shape or combine other signals."""

from __future__ import annotations

import dataclasses
import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import IntEnum

from .components import AudioComponent
from .envelope import EnvelopeADSR, Phase
from .types import AudioInfos, MidiInfo


def _clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


@dataclass
class _EnvelopeInfo:
    id: int
    envelope: EnvelopeADSR
    info: MidiInfo = field(default_factory=MidiInfo)
    played_this_frame: bool = False


class ADSR(AudioComponent):
    """Applies one envelope per triggered note, keeping released notes ringing."""

    class Inputs(IntEnum):
        INPUT = 0
        TRIGGER = 1

    component_name = "ADSR"
    input_count = 2

    def __init__(self) -> None:
        super().__init__()
        self.reference = EnvelopeADSR()
        self.envelopes: list[_EnvelopeInfo] = []

    def _new_envelope(self) -> EnvelopeADSR:
        return dataclasses.replace(
            self.reference, control_points=list(self.reference.control_points)
        )

    def process(
        self,
        audio_infos: AudioInfos,
        key_pressed: Sequence[MidiInfo],
        current_key: int = 0,
    ) -> float:
        if not self.inputs:
            return 0.0

        input_value = self.get_inputs_value(
            self.Inputs.INPUT, audio_infos, key_pressed, current_key
        )
        trigger_value = self.get_inputs_value(
            self.Inputs.TRIGGER, audio_infos, key_pressed, current_key
        )

        if current_key == 0:
            for envelope_info in self.envelopes:
                envelope_info.played_this_frame = False

        envelope_index = (
            key_pressed[current_key].key_index if key_pressed else int(trigger_value)
        )

        if envelope_index != 0 and trigger_value != 0.0:
            if not any(e.id == envelope_index for e in self.envelopes):
                info = (
                    dataclasses.replace(key_pressed[current_key])
                    if key_pressed
                    else MidiInfo()
                )
                self.envelopes.append(
                    _EnvelopeInfo(id=envelope_index, envelope=self._new_envelope(), info=info)
                )

        time = AudioComponent.time
        value = 0.0

        if trigger_value != 0.0:
            for envelope_info in self.envelopes:
                if envelope_info.id == envelope_index:
                    value += input_value * envelope_info.envelope.get_amplitude(time, True)
                    envelope_info.played_this_frame = True
                    break

        if not key_pressed or current_key == len(key_pressed) - 1:
            for envelope_info in self.envelopes:
                if envelope_info.played_this_frame:
                    continue
                # The released key is gone from key_pressed: run the input branch
                # again as if only that key were still held.
                release_keys = [envelope_info.info] if envelope_info.info.key_index != 0 else []
                release_input = self.get_inputs_value(
                    self.Inputs.INPUT, audio_infos, release_keys, 0
                )
                value += envelope_info.envelope.get_amplitude(time, False) * release_input

        self.envelopes = [
            e for e in self.envelopes if e.envelope.phase is not Phase.INACTIVE
        ]
        return value


class CombFilter(AudioComponent):
    """Feedback comb filter with a delay length given in samples."""

    class Inputs(IntEnum):
        INPUT = 0
        DELAY_SAMPLES = 1
        FEEDBACK = 2

    component_name = "CombFilter"
    input_count = 3

    def __init__(self) -> None:
        super().__init__()
        self.delay_buffer: list[float] = []
        self.buffer_index = 0

    def process(
        self,
        audio_infos: AudioInfos,
        key_pressed: Sequence[MidiInfo],
        current_key: int = 0,
    ) -> float:
        delay_samples = int(
            self.get_inputs_value(
                self.Inputs.DELAY_SAMPLES, audio_infos, key_pressed, current_key
            )
        )
        feedback = _clamp(
            self.get_inputs_value(self.Inputs.FEEDBACK, audio_infos, key_pressed, current_key),
            0.0,
            1.0,
        )
        input_value = self.get_inputs_value(
            self.Inputs.INPUT, audio_infos, key_pressed, current_key
        )

        if delay_samples > 0 and delay_samples != len(self.delay_buffer):
            if delay_samples < len(self.delay_buffer):
                del self.delay_buffer[delay_samples:]
            else:
                self.delay_buffer.extend([0.0] * (delay_samples - len(self.delay_buffer)))
            if self.buffer_index >= len(self.delay_buffer):
                self.buffer_index = 0

        if not self.delay_buffer:
            return 0.0

        # Several held notes share one delay line: only the first advances it.
        if current_key == 0:
            self.buffer_index = (self.buffer_index + 1) % len(self.delay_buffer)
            output = input_value + feedback * self.delay_buffer[self.buffer_index]
            self.delay_buffer[self.buffer_index] = output
            return output

        self.delay_buffer[self.buffer_index] += input_value
        return input_value


class _StateVariableFilter(AudioComponent):
    class Inputs(IntEnum):
        INPUT = 0
        CUTOFF = 1
        RESONANCE = 2

    input_count = 3

    def __init__(self) -> None:
        super().__init__()
        self.low = 0.0
        self.band = 0.0

    def _step(
        self,
        audio_infos: AudioInfos,
        key_pressed: Sequence[MidiInfo],
        current_key: int,
    ) -> float:
        """Advance the filter one sample and return its high-pass output."""
        cutoff = _clamp(
            self.get_inputs_value(self.Inputs.CUTOFF, audio_infos, key_pressed, current_key),
            0.01,
            0.99,
        )
        resonance = _clamp(
            self.get_inputs_value(self.Inputs.RESONANCE, audio_infos, key_pressed, current_key),
            0.0,
            0.95,
        )
        input_value = self.get_inputs_value(
            self.Inputs.INPUT, audio_infos, key_pressed, current_key
        )

        high = input_value - self.low - (1.0 - resonance) * self.band
        self.band += cutoff * high
        self.low += cutoff * self.band
        return high


class LowPassFilter(_StateVariableFilter):
    """Resonant state-variable low-pass filter."""

    component_name = "LowPassFilter"

    def process(
        self,
        audio_infos: AudioInfos,
        key_pressed: Sequence[MidiInfo],
        current_key: int = 0,
    ) -> float:
        self._step(audio_infos, key_pressed, current_key)
        return self.low


class HighPassFilter(_StateVariableFilter):
    """Resonant state-variable high-pass filter."""

    component_name = "HighPassFilter"

    def process(
        self,
        audio_infos: AudioInfos,
        key_pressed: Sequence[MidiInfo],
        current_key: int = 0,
    ) -> float:
        return self._step(audio_infos, key_pressed, current_key)


class Multiplier(AudioComponent):
    """Product of its two inputs."""

    class Inputs(IntEnum):
        INPUT_A = 0
        INPUT_B = 1

    component_name = "Multiplier"
    input_count = 2

    def process(
        self,
        audio_infos: AudioInfos,
        key_pressed: Sequence[MidiInfo],
        current_key: int = 0,
    ) -> float:
        value_a = self.get_inputs_value(self.Inputs.INPUT_A, audio_infos, key_pressed, current_key)
        value_b = self.get_inputs_value(self.Inputs.INPUT_B, audio_infos, key_pressed, current_key)
        return value_a * value_b


class Overdrive(AudioComponent):
    """Soft clipping through tanh, scaled by the drive input."""

    class Inputs(IntEnum):
        INPUT = 0
        DRIVE = 1

    component_name = "Overdrive"
    input_count = 2

    def process(
        self,
        audio_infos: AudioInfos,
        key_pressed: Sequence[MidiInfo],
        current_key: int = 0,
    ) -> float:
        input_value = self.get_inputs_value(self.Inputs.INPUT, audio_infos, key_pressed, current_key)
        drive = self.get_inputs_value(self.Inputs.DRIVE, audio_infos, key_pressed, current_key)
        return math.tanh(input_value * drive)