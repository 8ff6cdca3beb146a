# test_bridge_sim.py
"""
Integration tests for the bridge_sim package.
Feeds textual records through the bridge and checks decisions, aging and the table dump.
"""

from datetime import UTC, datetime, timedelta
import io
import sys

import pytest

from bridge_sim import Broadcast, ForwardTo, Ignored, LearningBridge, NoTarget, RecordRejected
from bridge_sim.main import main, run

A = "00:1A:2B:3C:4D:5E"
B = "01:1A:2B:3C:4D:5E"
C = "02:1A:2B:3C:4D:5E"


class FakeClock:
    """テスト用に手動で進める時計です。"""

    def __init__(self) -> None:
        self.now = datetime(2025, 10, 6, 17, 36, 28, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += timedelta(seconds=seconds)


def _bridge() -> tuple[LearningBridge, FakeClock]:
    clock = FakeClock()
    return LearningBridge("TestBridge", clock=clock), clock


def test_end_to_end_scenario():
    bridge, _ = _bridge()
    output: list[str] = []
    lines = [
        f"{A},1000,{B}\n",
        f"{C},2000,{B}\n",
        "stop\n",
        f"{B},3000,{A}\n",
    ]

    summary = run(lines, bridge, output.append)

    assert summary.processed == 2
    assert summary.stopped
    assert "[FILTERING DECISION] No port to broadcast to" in output[0]
    assert "Broadcasting frame to all ports: 1000 " in output[1]
    assert [entry.mac for entry in bridge.mac_table.entries()] == [A, C]
    # stop 以降のレコードは処理されない
    assert bridge.lookup(B) is None


def test_decisions_returned_by_process_record():
    bridge, _ = _bridge()
    assert bridge.process_record(f"{A},1000,{B}").decision == NoTarget()
    assert bridge.process_record(f"{C},2000,{B}").decision == Broadcast((1000,))
    assert bridge.process_record(f"{C},2000,{A}").decision == ForwardTo(1000)
    assert bridge.process_record(f"{C},2000,{C}").decision == Ignored()


def test_end_of_input_without_stop():
    bridge, _ = _bridge()
    summary = run([f"{A},1000,{B}"], bridge, lambda text: None)
    assert summary.processed == 1
    assert not summary.stopped


def test_malformed_records_are_skipped_silently():
    bridge, _ = _bridge()
    output: list[str] = []
    lines = [
        "",
        "hello",
        f"{A.lower()},1000,{B}",
        f"{A};1000,{B}",
        f"{A},0000,{B}",
        f"{A},10a0,{B}",
        f"{A},1000,{B} ",
        f"{A},1000,{B}\r\n",
    ]

    summary = run(lines, bridge, output.append)

    assert summary.rejected == 7
    assert summary.processed == 1
    assert len(output) == 1
    assert len(bridge.mac_table) == 1


def test_rejected_record_leaves_table_untouched():
    bridge, _ = _bridge()
    bridge.process_record(f"{A},1000,{B}")
    result = bridge.process_record(f"{C},2000,zz:1A:2B:3C:4D:5E")
    assert isinstance(result, RecordRejected)
    assert "receiver" in result.reason
    assert [entry.mac for entry in bridge.mac_table.entries()] == [A]


def test_decision_uses_table_before_aging():
    bridge, clock = _bridge()
    bridge.process_record(f"{A},1000,{B}")
    bridge.process_record(f"{C},2000,{B}")
    clock.advance(301)

    result = bridge.process_record(f"{C},2000,{A}")

    # A はこのラウンドの転送判断には使われ、その後に削除される
    assert result.decision == ForwardTo(1000)
    assert [entry.mac for entry in result.evicted] == [A]
    assert bridge.lookup(A) is None
    assert f"removed 1 old entity::MAC: {A}" in result.render()


def test_output_contains_table_dump_in_insertion_order():
    bridge, _ = _bridge()
    bridge.process_record(f"{A},1000,{B}")
    result = bridge.process_record(f"{C},2000,{B}")
    text = result.render()

    assert "[MAINTENANCE] Cleaning MAC table: removing stale entries older than 300 seconds." in text
    assert "[MAINTENANCE RESULT] MAC table updated | Timestamp: Mon Oct  6 17:36:28 2025" in text
    assert "[MAC TABLE STATE] | Timestamp: Mon Oct  6 17:36:28 2025" in text
    assert text.index(f"MAC: {A} | Port: 1000") < text.index(f"MAC: {C} | Port: 2000")


def test_banner_and_event_log():
    bridge, _ = _bridge()
    assert "Initializing Store-and-Forward Algorithm" in bridge.banner()
    assert bridge.show_event_log() == "<no events>"

    bridge.process_record(f"{A},1000,{B}")
    bridge.process_record(f"{A},2000,{B}")
    bridge.process_record("garbage")
    log_out = bridge.show_event_log()

    assert f"[17:36:28] Learned {A} on port 1000" in log_out
    assert f"{A} moved from port 1000 to port 2000" in log_out
    assert "Record discarded" in bridge.show_event_log(limit=1)

    bridge.clear_mac_table()
    assert len(bridge.mac_table) == 0
    assert "MAC address table cleared" in bridge.show_event_log(limit=1)


def test_event_log_is_bounded():
    clock = FakeClock()
    bridge = LearningBridge("TestBridge", clock=clock, event_log_limit=50)
    for _ in range(1000):
        bridge.process_record(f"{A},1000,{B}")

    assert len(bridge.event_log) == 50
    assert len(bridge.show_event_log().splitlines()) == 50
    assert len(bridge.show_event_log(limit=5).splitlines()) == 5

    with pytest.raises(ValueError):
        LearningBridge(event_log_limit=0)


def test_each_eviction_reports_two_maintenance_lines():
    bridge, clock = _bridge()
    bridge.process_record(f"{A},1000,{B}")
    bridge.process_record(f"{C},2000,{B}")
    clock.advance(301)

    result = bridge.process_record(f"{B},3000,{A}")

    assert result.maintenance[:4] == [
        "[MAINTENANCE] Cleaning MAC table: removing old entities.",
        f"[MAINTENANCE] Cleaning MAC table: removed 1 old entity::MAC: {A}",
        "[MAINTENANCE] Cleaning MAC table: removing old entities.",
        f"[MAINTENANCE] Cleaning MAC table: removed 1 old entity::MAC: {C}",
    ]


def test_main_skips_undecodable_stdin_line(monkeypatch, capsys):
    data = (
        f"{A},1000,{B}\n".encode()
        + b"\xff\xfe" * 20
        + b"\n"
        + f"{C},2000,{B}\nstop\n".encode()
    )
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(data), encoding="utf-8"))

    assert main() == 0

    out = capsys.readouterr().out
    assert "[BRIDGE MODULE] Initializing Store-and-Forward Algorithm..." in out
    assert "[FILTERING DECISION] No port to broadcast to" in out
    assert "Broadcasting frame to all ports: 1000 " in out
    assert f"MAC: {C} | Port: 2000" in out


def test_main_ends_at_end_of_input(monkeypatch, capsys):
    data = f"{A},1000,{B}\n".encode()
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(data), encoding="utf-8"))

    assert main() == 0
    assert f"MAC: {A} | Port: 1000" in capsys.readouterr().out
