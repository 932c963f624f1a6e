import itertools
import json

import pytest

from nodesynth.effects import ADSR
from nodesynth.envelope import Vec2, default_control_points
from nodesynth.generators import Number, Oscillator, OscType
from nodesynth.nodes import (
    INVALID_ID,
    ADSRNode,
    CombFilterNode,
    HighPassFilterNode,
    KeyboardFrequencyNode,
    LowPassFilterNode,
    MasterNode,
    MultNode,
    Node,
    NodeType,
    NumberNode,
    OscNode,
    OverdriveNode,
    PinKind,
    PinMode,
    node_from_dict,
)
from nodesynth.types import AudioInfos, MidiInfo


class FakeIDManager:
    def __init__(self, start=1):
        self._ids = itertools.count(start)

    def get_id(self):
        return next(self._ids)


ALL_NODE_CLASSES = [
    Node,
    MasterNode,
    NumberNode,
    OscNode,
    ADSRNode,
    KeyboardFrequencyNode,
    MultNode,
    LowPassFilterNode,
    HighPassFilterNode,
    CombFilterNode,
    OverdriveNode,
]


def test_master_node_ids_allocated_node_first_then_pins():
    node = MasterNode(FakeIDManager())
    assert node.id == 1
    assert node.name == "Master"
    assert node.type is NodeType.MASTER
    assert [p.id for p in node.inputs] == [2]
    assert node.inputs[0].name == "> input"
    assert node.inputs[0].kind is PinKind.INPUT
    assert node.inputs[0].input_id == 0
    assert node.outputs == []


def test_nodes_without_id_manager_get_invalid_ids():
    node = OscNode()
    assert node.id == INVALID_ID
    assert all(p.id == INVALID_ID for p in node.inputs + node.outputs)


def test_osc_node_pins():
    node = OscNode(FakeIDManager())
    assert [p.name for p in node.inputs] == ["> freq", "> phase"]
    assert [p.input_id for p in node.inputs] == [0, 1]
    assert [p.name for p in node.outputs] == ["output >"]
    assert node.outputs[0].input_id == -1
    assert node.outputs[0].kind is PinKind.OUTPUT
    assert all(p.mode is PinMode.LINK for p in node.inputs)
    assert node.osc_type is OscType.SINE


def test_pin_names_of_other_nodes():
    assert [p.name for p in CombFilterNode().inputs] == [
        "> input",
        "> delay samples",
        "> feedback",
    ]
    assert [p.name for p in KeyboardFrequencyNode().outputs] == ["frequency >"]
    assert KeyboardFrequencyNode().name == "Keyboard Frequency"
    assert [p.input_id for p in LowPassFilterNode().inputs] == [0, 1, 2]


def test_nodes_that_keep_the_base_type():
    assert HighPassFilterNode().type is NodeType.NODE
    assert OverdriveNode().type is NodeType.NODE
    assert CombFilterNode().type is NodeType.COMB_FILTER


def test_pins_point_to_their_node():
    node = MultNode(FakeIDManager())
    assert all(p.node is node for p in node.inputs + node.outputs)


def test_input_index_from_pin_id_is_one_based():
    node = LowPassFilterNode(FakeIDManager())
    ids = [p.id for p in node.inputs]
    assert [node.get_input_index_from_pin_id(i) for i in ids] == [1, 2, 3]
    assert node.get_input_index_from_pin_id(node.outputs[0].id) is None


def test_init_pins_id_assigns_fresh_unique_ids():
    node = ADSRNode(FakeIDManager())
    node.init_pins_id(FakeIDManager(start=100))
    ids = [p.id for p in node.inputs + node.outputs]
    assert ids == [100, 101, 102]


def test_update_pins_node_pointer():
    node = MultNode()
    for pin in node.inputs + node.outputs:
        pin.node = None
    node.update_pins_node_pointer()
    assert all(p.node is node for p in node.inputs + node.outputs)


def test_clear_audio_component():
    node = NumberNode()
    component = Number()
    node.audio_component = component
    node.audio_component_id = component.id
    node.clear_audio_component()
    assert node.audio_component is None
    assert node.audio_component_id == INVALID_ID


def test_equality_is_by_id():
    manager = FakeIDManager()
    a = NumberNode(manager)
    b = OscNode(manager)
    assert a != b
    b.id = a.id
    assert a == b


def test_base_matches_on_component_id():
    node = MultNode()
    component = Number()
    assert not node.matches(component)
    node.audio_component_id = component.id
    assert node.matches(component)


def test_number_node_assign_and_match():
    node = NumberNode()
    node.value = 0.5
    component = Number()
    node.audio_component_id = component.id
    assert not node.matches(component)
    node.assign_to_audio_component(component)
    assert component.number == 0.5
    assert node.matches(component)


def test_number_node_rejects_wrong_component():
    with pytest.raises(TypeError):
        NumberNode().assign_to_audio_component(Oscillator())
    with pytest.raises(TypeError):
        NumberNode().matches(Oscillator())


def test_osc_node_assign_and_match():
    node = OscNode()
    node.osc_type = OscType.TRIANGLE
    component = Oscillator()
    node.audio_component_id = component.id
    assert not node.matches(component)
    node.assign_to_audio_component(component)
    assert component.osc_type is OscType.TRIANGLE
    assert node.matches(component)


def test_adsr_node_assigns_points_to_reference_and_envelopes():
    adsr = ADSR()
    adsr.add_input(ADSR.Inputs.INPUT, Number(1.0))
    adsr.add_input(ADSR.Inputs.TRIGGER, Number(1.0))
    adsr.process(AudioInfos(), [MidiInfo(60, 100, True)], 0)

    node = ADSRNode()
    node.control_points[4] = Vec2(2.0, 0.5)
    node.audio_component_id = adsr.id
    assert not node.matches(adsr)

    node.assign_to_audio_component(adsr)
    assert adsr.reference.control_points == node.control_points
    assert all(e.envelope.control_points == node.control_points for e in adsr.envelopes)
    assert node.matches(adsr)


def test_adsr_node_default_points():
    assert ADSRNode().control_points == default_control_points()


@pytest.mark.parametrize("cls", ALL_NODE_CLASSES)
def test_dict_round_trip(cls):
    node = cls(FakeIDManager())
    node.hidden = True
    data = json.loads(json.dumps(node.to_dict()))
    restored = node_from_dict(data)
    assert type(restored) is cls
    assert restored.to_dict() == node.to_dict()
    assert all(p.node is restored for p in restored.inputs + restored.outputs)


def test_round_trip_keeps_node_settings():
    number = NumberNode(FakeIDManager())
    number.value = 0.25
    osc = OscNode(FakeIDManager())
    osc.osc_type = OscType.PINK_NOISE
    adsr = ADSRNode(FakeIDManager())
    adsr.control_points[1] = Vec2(0.5, 0.5)

    assert node_from_dict(number.to_dict()).value == 0.25
    assert node_from_dict(osc.to_dict()).osc_type is OscType.PINK_NOISE
    assert node_from_dict(adsr.to_dict()).control_points == adsr.control_points


def test_to_dict_keys():
    data = NumberNode(FakeIDManager()).to_dict()
    assert data["node_class"] == "NumberNode"
    assert data["node_name"] == "Number"
    assert data["node_type"] == int(NodeType.NUMBER)
    assert data["node_id"] == 1
    assert data["number_value"] == 0.0


def test_node_from_dict_unknown_class():
    data = NumberNode().to_dict()
    data["node_class"] = "NoSuchNode"
    with pytest.raises(ValueError):
        node_from_dict(data)