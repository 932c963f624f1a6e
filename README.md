# nodesynth

A small modular synthesizer engine. You build a sound as a graph of audio
components (oscillators, envelopes, filters, effects), plug the graph into a
`Master`, and pull samples from it one at a time while passing in the MIDI
keys currently held down.

It has no dependencies outside the standard library.

## Building a graph

Each component has numbered inputs, also named by its nested `Inputs` enum
(for example `Oscillator.Inputs.FREQUENCY`). Several components may be
plugged into the same input; their outputs are summed. `add_input` raises
`IndexError` for an input the component does not have.

```python
from nodesynth.types import AudioInfos, MidiInfo
from nodesynth.components import AudioComponent, Master
from nodesynth.generators import KeyboardFrequency, Number, Oscillator, OscType
from nodesynth.effects import ADSR

master = Master()

osc = Oscillator(OscType.SINE)
osc.add_input(Oscillator.Inputs.FREQUENCY, KeyboardFrequency())

adsr = ADSR()
adsr.add_input(ADSR.Inputs.INPUT, osc)
adsr.add_input(ADSR.Inputs.TRIGGER, Number(1.0))

master.add_input(Master.Inputs.INPUT, adsr)

infos = AudioInfos(sample_rate=44100, channels=2)
keys = [MidiInfo(key_index=69, velocity=200, rising_edge=True)]

samples = []
for n in range(1, 442):
    AudioComponent.time = n / infos.sample_rate
    samples.append(master.process(infos, keys, 0))
```

`AudioComponent.time` is the shared audio clock, in seconds. Oscillators and
envelopes read it, so advance it before pulling each sample. An envelope
treats a start time of exactly `0.0` as "not started", so keep the clock
above zero once notes are played.

`Master.process` runs its input once per held key (or once when no key is
held) and sums the results.

## Modules

- `nodesynth.types`: `MidiInfo` (key index, velocity 0–255, rising edge),
  `AudioInfos` (sample rate, channels), `MidiPlayerSettings` and `Timer`, a
  countdown whose `update(delta_time)` returns `True` and rearms each time it
  runs out.
- `nodesynth.envelope`: `EnvelopeADSR`, an attack/decay/sustain/release curve
  shaped by eight quadratic Bézier control points (`default_control_points()`),
  with its `Phase` and `Vec2` types. `get_amplitude(time, note_pressed)`
  advances it and returns the amplitude.
- `nodesynth.components`: the `AudioComponent` base class and `Master`, plus
  the helpers `combine_inputs` and `clear_all`.
- `nodesynth.generators`: `Number` (a constant), `KeyboardFrequency`
  (equal-tempered pitch of the current key, A4 = key 69 = 440 Hz; see
  `piano_key_frequency`), `Oscillator` (`OscType` sine, square, triangle,
  sawtooth, white, pink and brownian noise; pass a `random.Random` as `rng`
  for repeatable noise) and `SoundFontPlayer`.
- `nodesynth.effects`: `ADSR` (one envelope per key, keeping the release tail
  ringing after the key is let go), `LowPassFilter` and `HighPassFilter`
  (resonant state-variable filters; cutoff clamped to 0.01–0.99, resonance to
  0–0.95), `CombFilter` (delay in samples, feedback clamped to 0–1),
  `Multiplier` and `Overdrive` (`tanh(input * drive)`).
- `nodesynth.nodes`: editor-side nodes, described below.

## Editing the graph

`AudioComponent` offers `add_input`, `remove_input`, `get_inputs`,
`clear_inputs`, `get_audio_component`, `id_exists`, `id_is_direct_child` and
`remove_component_from_branch`. Every component gets a unique `id` when
created. `Master.delete_component_and_inputs` takes a component and the
inputs below it out of the graph, and `Master.close()` tears the whole graph
down; a `Master` can also be used as a context manager, closing on exit.

## SoundFont playback

`SoundFontPlayer` drives any object with `note_on(preset_index, key,
velocity)`, `note_off(preset_index, key)` and `render()` methods (the
`Synthesizer` protocol). It starts held keys, stops released ones and renders
one sample per frame. Without a synthesizer it outputs silence.

## Editor nodes

`nodesynth.nodes` describes the graph as an editor would show it. `Node` and
its subclasses (`MasterNode`, `NumberNode`, `OscNode`, `ADSRNode`,
`KeyboardFrequencyNode`, `MultNode`, `LowPassFilterNode`,
`HighPassFilterNode`, `CombFilterNode`, `OverdriveNode`) carry input and
output `Pin`s and their settings. Identifiers come from any object with a
`get_id()` method passed to the constructor; without one they are `0`.

- `assign_to_audio_component(component)` copies a node's settings (number
  value, oscillator type, ADSR control points) onto its audio component, and
  `matches(component)` checks that the component is the node's own and agrees
  with it. Both raise `TypeError` for a component of the wrong kind.
- `get_input_index_from_pin_id(pin_id)` gives the one-based position of an
  input pin, or `None`.
- `to_dict()` and `node_from_dict(data)` save a node to plain data and load
  it back; an unknown node class raises `ValueError`.

## What it does not do

nodesynth only computes samples. It does not open an audio device or stream
sound, read from MIDI devices, load SoundFont files, draw an editor, or keep
the editor nodes and the audio graph in step by itself; those are left to the
program that uses it.