"""Frame learning, filtering and aging for the store-and-forward bridge."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, TYPE_CHECKING

from bridge_sim.modules.forwarding import Decision, decide
from bridge_sim.modules.mac_table import MacTableEntry
from bridge_sim.utils import format_ctime

__all__ = ["ProcessingResult", "process_frame"]

if TYPE_CHECKING:  # pragma: no cover - 型チェック専用
    from bridge_sim.bridge_core import LearningBridge
    from bridge_sim.modules.records import Frame


@dataclass
class ProcessingResult:
    """1 レコード分の処理結果です。"""

    decision: Decision
    evicted: List[MacTableEntry]
    maintenance: List[str]
    table_state: str

    def render(self) -> str:
        return "\n".join(
            [self.decision.describe(), *self.maintenance, "", self.table_state, ""]
        )


def _maintenance_lines(bridge: "LearningBridge", evicted: List[MacTableEntry]) -> List[str]:
    lines: List[str] = []
    for entry in evicted:
        lines.append("[MAINTENANCE] Cleaning MAC table: removing old entities.")
        lines.append(
            f"[MAINTENANCE] Cleaning MAC table: removed 1 old entity::MAC: {entry.mac}"
        )
    if len(bridge.mac_table) == 0:
        lines.append("[MAINTENANCE] MAC table is empty after cleaning.")
    seconds = int(bridge.mac_table.aging_time.total_seconds())
    lines.append(
        "[MAINTENANCE] Cleaning MAC table: removing stale entries "
        f"older than {seconds} seconds."
    )
    timestamp = format_ctime(bridge.mac_table.now())
    lines.append(f"[MAINTENANCE RESULT] MAC table updated | Timestamp: {timestamp}")
    return lines


def process_frame(bridge: "LearningBridge", frame: "Frame") -> ProcessingResult:
    """送信元を学習し、転送判断を行ってからエージングを実行します。"""

    table = bridge.mac_table
    table.learn(frame.src_mac, frame.port)

    # エージング前のテーブルで判断する
    decision = decide(frame.src_mac, frame.port, frame.dst_mac, table.entries())
    bridge._log(
        f"Frame {frame.src_mac} -> {frame.dst_mac} on port {frame.port}: "
        f"{type(decision).__name__}"
    )

    evicted = table.sweep()
    return ProcessingResult(
        decision=decision,
        evicted=evicted,
        maintenance=_maintenance_lines(bridge, evicted),
        table_state=table.render(),
    )
