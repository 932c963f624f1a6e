"""Editor-side nodes that describe an instrument's audio graph."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, ClassVar, Protocol

from .components import AudioComponent, Master
from .effects import ADSR, CombFilter, HighPassFilter, LowPassFilter, Multiplier, Overdrive
from .envelope import Vec2, default_control_points
from .generators import Number, Oscillator, OscType

MASTER_NODE_ID = 1
INVALID_ID = 0


class IDManager(Protocol):
    """Hands out unique identifiers for nodes and pins."""

    def get_id(self) -> int: ...


class PinKind(Enum):
    OUTPUT = "output"
    INPUT = "input"


class PinMode(Enum):
    LINK = "link"
    SLIDER = "slider"


class NodeType(IntEnum):
    NODE = 0
    MASTER = 1
    NUMBER = 2
    OSC = 3
    ADSR = 4
    KEYBOARD_FREQUENCY = 5
    MULTIPLIER = 6
    LOW_PASS = 7
    COMB_FILTER = 8


@dataclass
class Pin:
    """A connection point on a node.

    ``input_id`` maps an input pin to an input of the audio component; output
    pins carry -1.
    """

    id: int = 1
    name: str = ""
    kind: PinKind = PinKind.INPUT
    input_id: int = -1
    mode: PinMode = PinMode.LINK
    slider_value: float | None = None
    node: Node | None = field(default=None, repr=False, compare=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "kind": self.kind.value,
            "input_id": self.input_id,
            "mode": self.mode.value,
            "slider_value": self.slider_value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Pin:
        return cls(
            id=int(data["id"]),
            name=str(data["name"]),
            kind=PinKind(data["kind"]),
            input_id=int(data["input_id"]),
            mode=PinMode(data["mode"]),
            slider_value=data.get("slider_value"),
        )


def _new_id(id_manager: IDManager | None) -> int:
    return id_manager.get_id() if id_manager is not None else INVALID_ID


class Node:
    """A node of the editor graph, bound to at most one audio component."""

    default_name: ClassVar[str] = ""
    node_type: ClassVar[NodeType] = NodeType.NODE
    input_pins: ClassVar[tuple[tuple[str, int], ...]] = ()
    output_pins: ClassVar[tuple[str, ...]] = ()

    _registry: ClassVar[dict[str, type[Node]]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        Node._registry[cls.__name__] = cls

    def __init__(self, id_manager: IDManager | None = None) -> None:
        self.id = _new_id(id_manager)
        self.name = self.default_name
        self.type = self.node_type
        self.hidden = False
        self.audio_component_id = INVALID_ID
        self.audio_component: AudioComponent | None = None
        self.inputs = [
            self._create_pin(id_manager, name, PinKind.INPUT, input_id)
            for name, input_id in self.input_pins
        ]
        self.outputs = [
            self._create_pin(id_manager, name, PinKind.OUTPUT)
            for name in self.output_pins
        ]

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id} {self.name!r}>"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.id == other.id

    __hash__ = None  # type: ignore[assignment]

    def _create_pin(
        self,
        id_manager: IDManager | None,
        name: str,
        kind: PinKind,
        input_id: int = -1,
    ) -> Pin:
        return Pin(
            id=_new_id(id_manager),
            name=name,
            kind=kind,
            input_id=int(input_id),
            node=self,
        )

    def assign_to_audio_component(self, component: AudioComponent) -> None:
        """Copy this node's settings onto its audio component."""

    def matches(self, component: AudioComponent) -> bool:
        """Whether ``component`` is this node's component with the same settings."""
        return component.id == self.audio_component_id

    def get_input_index_from_pin_id(self, pin_id: int) -> int | None:
        """One-based position of the input pin ``pin_id``, or None if absent."""
        for index, pin in enumerate(self.inputs, start=1):
            if pin.id == pin_id:
                return index
        return None

    def init_pins_id(self, id_manager: IDManager) -> None:
        """Give every pin a fresh identifier, inputs first."""
        for pin in (*self.inputs, *self.outputs):
            pin.id = id_manager.get_id()

    def update_pins_node_pointer(self) -> None:
        for pin in (*self.inputs, *self.outputs):
            pin.node = self

    def clear_audio_component(self) -> None:
        self.audio_component = None
        self.audio_component_id = INVALID_ID

    def _extra_fields(self) -> dict[str, Any]:
        return {}

    def _load_extra(self, data: dict[str, Any]) -> None:
        pass

    def to_dict(self) -> dict[str, Any]:
        """Serializable description of this node and its pins."""
        data: dict[str, Any] = {
            "node_class": type(self).__name__,
            "node_id": self.id,
            "node_name": self.name,
            "node_type": int(self.type),
            "node_inputs": [pin.to_dict() for pin in self.inputs],
            "node_outputs": [pin.to_dict() for pin in self.outputs],
            "node_hidden": self.hidden,
        }
        data.update(self._extra_fields())
        return data


Node._registry["Node"] = Node


def _require(component: AudioComponent, kind: type) -> Any:
    if not isinstance(component, kind):
        raise TypeError(
            f"expected a {kind.__name__} component, got {type(component).__name__}"
        )
    return component


class MasterNode(Node):
    default_name = "Master"
    node_type = NodeType.MASTER
    input_pins = (("> input", Master.Inputs.INPUT),)


class NumberNode(Node):
    default_name = "Number"
    node_type = NodeType.NUMBER
    output_pins = ("output >",)

    def __init__(self, id_manager: IDManager | None = None) -> None:
        super().__init__(id_manager)
        self.value = 0.0

    def assign_to_audio_component(self, component: AudioComponent) -> None:
        _require(component, Number).number = self.value

    def matches(self, component: AudioComponent) -> bool:
        number = _require(component, Number)
        return super().matches(component) and number.number == self.value

    def _extra_fields(self) -> dict[str, Any]:
        return {"number_value": self.value}

    def _load_extra(self, data: dict[str, Any]) -> None:
        self.value = float(data["number_value"])


class OscNode(Node):
    default_name = "Osc"
    node_type = NodeType.OSC
    input_pins = (
        ("> freq", Oscillator.Inputs.FREQUENCY),
        ("> phase", Oscillator.Inputs.PHASE),
    )
    output_pins = ("output >",)

    def __init__(self, id_manager: IDManager | None = None) -> None:
        super().__init__(id_manager)
        self.osc_type = OscType.SINE

    def assign_to_audio_component(self, component: AudioComponent) -> None:
        _require(component, Oscillator).osc_type = self.osc_type

    def matches(self, component: AudioComponent) -> bool:
        oscillator = _require(component, Oscillator)
        return super().matches(component) and oscillator.osc_type == self.osc_type

    def _extra_fields(self) -> dict[str, Any]:
        return {"osc_type": int(self.osc_type)}

    def _load_extra(self, data: dict[str, Any]) -> None:
        self.osc_type = OscType(int(data["osc_type"]))


class ADSRNode(Node):
    default_name = "ADSR"
    node_type = NodeType.ADSR
    input_pins = (
        ("> input", ADSR.Inputs.INPUT),
        ("> trigger", ADSR.Inputs.TRIGGER),
    )
    output_pins = ("output >",)

    def __init__(self, id_manager: IDManager | None = None) -> None:
        super().__init__(id_manager)
        self.control_points: list[Vec2] = default_control_points()

    def assign_to_audio_component(self, component: AudioComponent) -> None:
        adsr = _require(component, ADSR)
        adsr.reference.control_points = list(self.control_points)
        for envelope_info in adsr.envelopes:
            envelope_info.envelope.control_points = list(self.control_points)

    def matches(self, component: AudioComponent) -> bool:
        adsr = _require(component, ADSR)
        points_match = list(self.control_points) == list(adsr.reference.control_points)
        return super().matches(component) and points_match

    def _extra_fields(self) -> dict[str, Any]:
        return {"control_points": [[p.x, p.y] for p in self.control_points]}

    def _load_extra(self, data: dict[str, Any]) -> None:
        self.control_points = [Vec2(float(x), float(y)) for x, y in data["control_points"]]


class KeyboardFrequencyNode(Node):
    default_name = "Keyboard Frequency"
    node_type = NodeType.KEYBOARD_FREQUENCY
    output_pins = ("frequency >",)


class MultNode(Node):
    default_name = "Multiplier"
    node_type = NodeType.MULTIPLIER
    input_pins = (
        ("> input A", Multiplier.Inputs.INPUT_A),
        ("> input B", Multiplier.Inputs.INPUT_B),
    )
    output_pins = ("output >",)


class LowPassFilterNode(Node):
    default_name = "Low Pass Filter"
    node_type = NodeType.LOW_PASS
    input_pins = (
        ("> input", LowPassFilter.Inputs.INPUT),
        ("> cutoff", LowPassFilter.Inputs.CUTOFF),
        ("> resonance", LowPassFilter.Inputs.RESONANCE),
    )
    output_pins = ("output >",)


class HighPassFilterNode(Node):
    default_name = "High Pass Filter"
    input_pins = (
        ("> input", HighPassFilter.Inputs.INPUT),
        ("> cutoff", HighPassFilter.Inputs.CUTOFF),
        ("> resonance", HighPassFilter.Inputs.RESONANCE),
    )
    output_pins = ("output >",)


class CombFilterNode(Node):
    default_name = "Comb Filter"
    node_type = NodeType.COMB_FILTER
    input_pins = (
        ("> input", CombFilter.Inputs.INPUT),
        ("> delay samples", CombFilter.Inputs.DELAY_SAMPLES),
        ("> feedback", CombFilter.Inputs.FEEDBACK),
    )
    output_pins = ("output >",)


class OverdriveNode(Node):
    default_name = "Overdrive"
    input_pins = (
        ("> input", Overdrive.Inputs.INPUT),
        ("> drive", Overdrive.Inputs.DRIVE),
    )
    output_pins = ("output >",)


def node_from_dict(data: dict[str, Any]) -> Node:
    """Rebuild a node from the output of :meth:`Node.to_dict`."""
    class_name = data.get("node_class")
    try:
        cls = Node._registry[class_name]  # type: ignore[index]
    except KeyError:
        raise ValueError(f"unknown node class: {class_name!r}") from None

    node = cls()
    node.id = int(data["node_id"])
    node.name = str(data["node_name"])
    node.type = NodeType(int(data["node_type"]))
    node.hidden = bool(data["node_hidden"])
    node.inputs = [Pin.from_dict(pin) for pin in data["node_inputs"]]
    node.outputs = [Pin.from_dict(pin) for pin in data["node_outputs"]]
    node.update_pins_node_pointer()
    node._load_extra(data)
    return node