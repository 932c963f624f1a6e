import logging

import pytest

from nodesynth.components import (
    AudioComponent,
    Master,
    clear_all,
    combine_inputs,
)
from nodesynth.types import AudioInfos, MidiInfo

INFOS = AudioInfos(sample_rate=44100, channels=2)


class Constant(AudioComponent):
    component_name = "Constant"

    def __init__(self, value=0.0):
        super().__init__()
        self.value = value

    def process(self, audio_infos, key_pressed, current_key=0):
        return self.value


class Sum(AudioComponent):
    component_name = "Sum"
    input_count = 2

    def process(self, audio_infos, key_pressed, current_key=0):
        return self.get_inputs_value(0, audio_infos, key_pressed, current_key) + \
            self.get_inputs_value(1, audio_infos, key_pressed, current_key)


class KeyRecorder(AudioComponent):
    component_name = "KeyRecorder"

    def __init__(self):
        super().__init__()
        self.calls = []

    def process(self, audio_infos, key_pressed, current_key=0):
        self.calls.append(current_key)
        return 1.0


def test_base_class_is_abstract():
    with pytest.raises(TypeError):
        AudioComponent()


def test_ids_are_unique_and_increasing():
    a, b, c = Constant(), Constant(), Master()
    assert a.id < b.id < c.id


def test_master_has_one_input():
    master = Master()
    assert master.inputs == [[]]
    assert Master.Inputs.INPUT == 0


def test_add_input_out_of_range():
    with pytest.raises(IndexError):
        Master().add_input(1, Constant())
    with pytest.raises(IndexError):
        Constant().add_input(0, Constant())


def test_get_inputs_value_sums_plugged_components():
    node = Sum()
    node.add_input(0, Constant(1.0))
    node.add_input(0, Constant(2.0))
    assert node.get_inputs_value(0, INFOS, []) == pytest.approx(3.0)
    assert node.get_inputs_value(1, INFOS, []) == 0.0
    with pytest.raises(IndexError):
        node.get_inputs_value(2, INFOS, [])


def test_get_inputs_is_last_plugged_first():
    master = Master()
    a, b, c = Constant(), Constant(), Constant()
    master.add_input(0, a)
    master.add_input(0, b)
    master.add_input(0, c)
    assert master.get_inputs() == [c, b, a]


def test_remove_input_removes_all_occurrences():
    master = Master()
    a, b = Constant(), Constant()
    master.add_input(0, a)
    master.add_input(0, a)
    master.add_input(0, b)
    assert master.remove_input(a) is True
    assert master.get_inputs() == [b]
    assert master.remove_input(a) is False


def test_clear_inputs_keeps_slots():
    master = Master()
    master.add_input(0, Constant())
    master.add_input(0, Constant())
    master.clear_inputs()
    assert master.inputs == [[]]


def test_id_is_direct_child():
    master = Master()
    mid = Sum()
    leaf = Constant()
    master.add_input(0, mid)
    mid.add_input(0, leaf)
    assert master.id_is_direct_child(mid.id)
    assert not master.id_is_direct_child(leaf.id)


def test_get_audio_component_searches_depth():
    master = Master()
    mid = Sum()
    leaf = Constant()
    master.add_input(0, mid)
    mid.add_input(1, leaf)
    assert master.get_audio_component(leaf.id) is leaf
    assert master.get_audio_component(master.id) is master
    assert master.get_audio_component(leaf.id + 1000) is None
    assert master.id_exists(mid.id)
    assert not mid.id_exists(master.id)


def test_remove_component_from_branch_everywhere():
    master = Master()
    mid = Sum()
    shared = Constant()
    master.add_input(0, mid)
    master.add_input(0, shared)
    mid.add_input(0, shared)
    master.remove_component_from_branch(shared, False)
    assert not master.id_exists(shared.id)
    assert mid.get_inputs() == []


def test_remove_component_with_delete_detaches_it():
    master = Master()
    mid = Sum()
    leaf = Constant()
    master.add_input(0, mid)
    mid.add_input(0, leaf)
    master.remove_component_from_branch(mid, True)
    assert master.get_inputs() == []
    assert mid.get_inputs() == []


def test_master_processes_once_without_keys():
    master = Master()
    recorder = KeyRecorder()
    master.add_input(0, recorder)
    assert master.process(INFOS, []) == 1.0
    assert recorder.calls == [0]


def test_master_processes_each_key():
    master = Master()
    recorder = KeyRecorder()
    master.add_input(0, recorder)
    keys = [MidiInfo(60, 100, True), MidiInfo(64, 100, True), MidiInfo(67, 100, False)]
    assert master.process(INFOS, keys) == 3.0
    assert recorder.calls == [0, 1, 2]


def test_master_without_input_slot_warns_once(caplog):
    master = Master()
    master.inputs = []
    with caplog.at_level(logging.WARNING, logger="nodesynth.components"):
        assert master.process(INFOS, []) == 0.0
        assert master.process(INFOS, []) == 0.0
    warnings = [r for r in caplog.records if "No input plugged to master" in r.getMessage()]
    assert len(warnings) == 1


def test_close_handles_shared_child():
    master = Master()
    child1 = Sum()
    child2 = Constant()
    master.add_input(0, child1)
    master.add_input(0, child2)
    child1.add_input(0, child2)
    master.close()
    assert master.get_inputs() == []
    assert child1.get_inputs() == []


def test_delete_component_and_inputs_removes_subtree():
    master = Master()
    mid = Sum()
    leaf = Constant()
    other = Constant()
    master.add_input(0, mid)
    master.add_input(0, other)
    mid.add_input(0, leaf)
    master.delete_component_and_inputs(mid)
    assert master.get_inputs() == [other]
    assert not master.id_exists(leaf.id)


def test_master_context_manager_closes():
    with Master() as master:
        master.add_input(0, Constant())
    assert master.get_inputs() == []


def test_combine_inputs_order():
    a, b, c = Constant(), Constant(), Constant()
    assert combine_inputs([a, b], [c]) == [c, b, a]
    assert combine_inputs() == []


def test_clear_all_empties_sequences():
    first, second = [1, 2], [3]
    clear_all(first, second)
    assert first == [] and second == []