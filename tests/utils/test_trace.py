from types import SimpleNamespace

import pytest

from pychip8.utils.trace import TraceRecorder


def _state(pc: int, **kwargs):
    defaults = {"v": [0] * 16, "i": 0x0000, "dt": 0, "st": 0, "stack": []}
    defaults.update(kwargs)
    return SimpleNamespace(pc=pc, **defaults)


def test_trace_recorder_overwrites_old_entries():
    recorder = TraceRecorder(capacity=2)

    recorder.record_step(_state(0x200), 0x6001, mnemonic="LD V0, 0x01")
    recorder.record_step(_state(0x202, i=0x300), 0xA300, mnemonic="LD I, 0x300")
    recorder.record_step(_state(0x204, stack=[0x206]), 0xF00A, mnemonic="LD V0, K", waiting=True, note="blocked")

    lines = list(recorder.format_entries())
    assert len(recorder) == 2
    assert len(lines) == 2
    assert "pc=0202" in lines[0]
    assert "I=0300" in lines[0]
    assert "pc=0204" in lines[1]
    assert "SP=1" in lines[1]
    assert "flags=KEYWAIT,blocked" in lines[1]


def test_trace_recorder_handles_missing_opcode():
    recorder = TraceRecorder(1)
    recorder.record_step(_state(0x200, v=[0xAB] + [0] * 15, dt=3), None)

    entry = recorder.last_entry()
    assert entry is not None
    assert entry.v[0] == 0xAB
    lines = recorder.format_entries()
    assert "opcode=----" in lines[0]
    assert "DT=03" in lines[0]
    assert "flags=-" in lines[0]


def test_trace_recorder_limit_returns_most_recent():
    recorder = TraceRecorder(4)
    for index in range(4):
        recorder.record_step(_state(0x200 + index * 2), 0x0000)

    lines = recorder.format_entries(limit=1)
    assert len(lines) == 1
    assert "pc=0206" in lines[0]


def test_trace_recorder_requires_capacity():
    with pytest.raises(ValueError):
        TraceRecorder(0)
