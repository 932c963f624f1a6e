"""ADSR envelope shaped by quadratic Bezier curves."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class Phase(Enum):
    ATTACK = auto()
    DECAY = auto()
    SUSTAIN = auto()
    RELEASE = auto()
    INACTIVE = auto()
    RETRIGGER = auto()


@dataclass(frozen=True)
class Vec2:
    x: float = 0.0
    y: float = 0.0


def default_control_points() -> list[Vec2]:
    """The eight control points of a fresh envelope."""
    return [
        Vec2(0.0, 0.0),  # static 0
        Vec2(1.0, 0.0),  # ctrl 0
        Vec2(1.0, 1.0),  # static 1 | attack
        Vec2(2.0, 1.0),  # ctrl 1
        Vec2(2.0, 0.8),  # static 2 | decay
        Vec2(3.0, 0.8),  # static 3 | sustain
        Vec2(3.0, 0.0),  # ctrl 2
        Vec2(4.0, 0.0),  # static 4 | release
    ]


def _inverse_lerp(a: float, b: float, value: float) -> float:
    return (value - a) / (b - a)


def _bezier_quadratic(p0: Vec2, p1: Vec2, p2: Vec2, t: float) -> Vec2:
    u = 1.0 - t
    return Vec2(
        u * u * p0.x + 2.0 * u * t * p1.x + t * t * p2.x,
        u * u * p0.y + 2.0 * u * t * p1.y + t * t * p2.y,
    )


@dataclass
class EnvelopeADSR:
    """State of one note's envelope, advanced by sampling it over time."""

    key_index: int = 0
    trigger_off_time: float = 0.0
    trigger_on_time: float = 0.0
    note_on: bool = False
    retrigger: bool = False
    amplitude_before_retrigger: float = 0.0
    amplitude_at_off_trigger: float = 0.0
    phase: Phase = Phase.INACTIVE
    amplitude: float = 0.0
    control_points: list[Vec2] = field(default_factory=default_control_points)

    @property
    def _release_duration(self) -> float:
        cp = self.control_points
        return cp[7].x - cp[5].x

    def get_amplitude(self, time: float, note_pressed: bool) -> float:
        """Return the envelope amplitude at ``time`` given the key state."""
        if note_pressed and not self.note_on:
            self.trigger_on_time = time
            self.note_on = True
        elif not note_pressed and self.note_on:
            self.trigger_off_time = time
            self.note_on = False

        if self.trigger_on_time == 0.0:
            return 0.0

        cp = self.control_points
        life_time = time - self.trigger_on_time
        new_phase = self._phase_at(time)

        if new_phase is Phase.RETRIGGER and self.phase is Phase.RELEASE:
            self.amplitude_before_retrigger = self.amplitude
        elif new_phase is Phase.RELEASE and self.phase is not Phase.RELEASE:
            self.amplitude_at_off_trigger = self.amplitude

        self.phase = new_phase

        if new_phase is Phase.ATTACK:
            point = _bezier_quadratic(
                cp[0], cp[1], cp[2], _inverse_lerp(cp[0].x, cp[2].x, life_time)
            )
            self.amplitude = point.y
        elif new_phase is Phase.DECAY:
            self.retrigger = False
            point = _bezier_quadratic(
                cp[2], cp[3], cp[4], _inverse_lerp(cp[2].x, cp[4].x, life_time)
            )
            self.amplitude = point.y
        elif new_phase is Phase.SUSTAIN:
            self.amplitude = cp[4].y
        elif new_phase is Phase.RELEASE:
            start = Vec2(cp[5].x, self.amplitude_at_off_trigger)
            point = _bezier_quadratic(
                start,
                cp[6],
                cp[7],
                _inverse_lerp(0.0, self._release_duration, time - self.trigger_off_time),
            )
            self.amplitude = point.y
        elif new_phase is Phase.INACTIVE:
            self.amplitude = 0.0
            self.trigger_on_time = 0.0
            self.trigger_off_time = 0.0
            self.amplitude_at_off_trigger = 0.0
        else:
            before = self.amplitude_before_retrigger
            self.amplitude = (life_time / cp[2].x) * (cp[2].y - before) + before

        if self.amplitude <= 0.0001:
            self.amplitude = 0.0

        return self.amplitude

    def _phase_at(self, time: float) -> Phase:
        if not self.note_on:
            if time - self.trigger_off_time <= self._release_duration:
                return Phase.RELEASE
            return Phase.INACTIVE

        cp = self.control_points
        life_time = time - self.trigger_on_time

        if (
            self.trigger_off_time != 0.0
            and self.trigger_on_time != 0.0
            and self.trigger_on_time - self.trigger_off_time < self._release_duration
            and life_time <= cp[2].x
        ):
            return Phase.RETRIGGER

        if life_time <= cp[2].x:
            return Phase.ATTACK
        if life_time <= cp[4].x:
            return Phase.DECAY
        return Phase.SUSTAIN