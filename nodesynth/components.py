"""Audio component graph: the base node type and the master output."""

from __future__ import annotations

import itertools
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, MutableSequence, Sequence
from enum import IntEnum
from typing import ClassVar

from .types import AudioInfos, MidiInfo

logger = logging.getLogger(__name__)


def combine_inputs(*args: Iterable[AudioComponent]) -> list[AudioComponent]:
    """Gather several component sequences into one list, last pushed first."""
    result: list[AudioComponent] = []
    for sequence in args:
        for component in sequence:
            result.insert(0, component)
    return result


def clear_all(*args: MutableSequence) -> None:
    """Empty every given sequence."""
    for sequence in args:
        sequence.clear()


class AudioComponent(ABC):
    """A node of the audio graph, pulling samples from its inputs."""

    component_name: ClassVar[str] = "AudioComponent"
    input_count: ClassVar[int] = 0

    # Shared audio clock, advanced by the audio engine.
    time: ClassVar[float] = 0.0

    _ids: ClassVar[itertools.count] = itertools.count(1)

    def __init__(self) -> None:
        self.id: int = next(AudioComponent._ids)
        self.inputs: list[list[AudioComponent]] = [[] for _ in range(self.input_count)]

    def __repr__(self) -> str:
        return f"<{self.component_name} {self.id}>"

    @abstractmethod
    def process(
        self,
        audio_infos: AudioInfos,
        key_pressed: Sequence[MidiInfo],
        current_key: int = 0,
    ) -> float:
        """Produce one sample for the key at ``current_key``."""

    def get_inputs(self) -> list[AudioComponent]:
        """All components plugged into any input, last plugged first."""
        return combine_inputs(*self.inputs)

    def clear_inputs(self) -> None:
        clear_all(*self.inputs)

    def add_input(self, index: int, new_input: AudioComponent) -> None:
        if not 0 <= index < len(self.inputs):
            raise IndexError(
                f"input index {index} out of range for {self.component_name} "
                f"with {len(self.inputs)} inputs"
            )
        self.inputs[index].append(new_input)

    def remove_input(self, component: AudioComponent) -> bool:
        """Unplug every occurrence of ``component``; return whether any was found."""
        removed = False
        for plugged in self.inputs:
            kept = [c for c in plugged if c is not component]
            if len(kept) != len(plugged):
                removed = True
                plugged[:] = kept
        return removed

    def get_inputs_value(
        self,
        index: int,
        audio_infos: AudioInfos,
        key_pressed: Sequence[MidiInfo],
        current_key: int = 0,
    ) -> float:
        """Sum of the samples of all components plugged into input ``index``."""
        if not 0 <= index < len(self.inputs):
            raise IndexError(
                f"input index {index} out of range for {self.component_name} "
                f"with {len(self.inputs)} inputs"
            )
        return sum(
            (c.process(audio_infos, key_pressed, current_key) for c in self.inputs[index]),
            0.0,
        )

    def id_is_direct_child(self, component_id: int) -> bool:
        return any(c.id == component_id for c in self.get_inputs())

    def remove_component_from_branch(
        self,
        component: AudioComponent,
        delete_component: bool,
        depth: int = 0,
    ) -> None:
        """Unplug ``component`` everywhere below this one.

        When ``delete_component`` is set the component is also detached from
        its own inputs, as it leaves the graph for good.
        """
        for child in self.get_inputs():
            child.remove_component_from_branch(component, delete_component, depth + 1)
        self.remove_input(component)
        if delete_component and depth == 0:
            component.clear_inputs()

    def get_audio_component(self, component_id: int) -> AudioComponent | None:
        """Depth-first search of this branch for a component by id."""
        if self.id == component_id:
            return self
        for plugged in self.inputs:
            for child in plugged:
                found = child.get_audio_component(component_id)
                if found is not None:
                    return found
        return None

    def id_exists(self, component_id: int) -> bool:
        return self.get_audio_component(component_id) is not None


class Master(AudioComponent):
    """Root of an instrument's graph; mixes its input for every held key."""

    class Inputs(IntEnum):
        INPUT = 0

    component_name = "Master"
    input_count = 1

    def __init__(self) -> None:
        super().__init__()
        self._show_warning = True

    def process(
        self,
        audio_infos: AudioInfos,
        key_pressed: Sequence[MidiInfo],
        current_key: int = 0,
    ) -> float:
        if not self.inputs:
            if self._show_warning:
                self._show_warning = False
                logger.warning("No input plugged to master.")
            return 0.0

        self._show_warning = True

        value = 0.0
        for component in self.inputs[self.Inputs.INPUT]:
            for key in range(max(1, len(key_pressed))):
                value += component.process(audio_infos, key_pressed, key)
        return value

    def delete_component_and_inputs(self, component: AudioComponent) -> None:
        """Remove ``component`` and, first, every input of it still in the graph."""
        while True:
            child = next(
                (c for c in component.get_inputs() if self.id_exists(c.id)), None
            )
            if child is None:
                break
            self.delete_component_and_inputs(child)
        self.remove_component_from_branch(component, True)

    def close(self) -> None:
        """Tear down the whole graph below this master."""
        # Collect ids first: deleting one child may already remove another
        # that was also plugged into it.
        ids = {c.id for c in self.get_inputs()}
        for component_id in ids:
            component = self.get_audio_component(component_id)
            if component is not None:
                self.delete_component_and_inputs(component)

    def __enter__(self) -> Master:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()