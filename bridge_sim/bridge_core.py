"""Core state of the store-and-forward learning bridge simulator."""

from __future__ import annotations

from collections import deque
from datetime import UTC, datetime, timedelta
from typing import Callable, Deque, Optional, Union

from bridge_sim.modules.mac_table import DEFAULT_AGING_TIME, MacTable, MacTableEntry
from bridge_sim.modules.records import Frame, RecordRejected, parse_record
from bridge_sim.services.frame_processing import ProcessingResult
from bridge_sim.services.frame_processing import process_frame as process_frame_service
from bridge_sim.utils import format_ctime, format_timestamp

EVENT_LOG_LIMIT = 500


class LearningBridge:
    """MAC アドレスを学習して転送先を決めるブリッジのモデルです。"""

    def __init__(
        self,
        name: str = "Bridge1",
        aging_time: timedelta = DEFAULT_AGING_TIME,
        clock: Optional[Callable[[], datetime]] = None,
        event_log_limit: int = EVENT_LOG_LIMIT,
    ) -> None:
        if event_log_limit <= 0:
            raise ValueError("event log limit must be positive")
        self.name = name
        self._clock = clock or (lambda: datetime.now(UTC))
        # 古いイベントから捨てる
        self.event_log: Deque[str] = deque(maxlen=event_log_limit)
        self.mac_table = MacTable(aging_time=aging_time, clock=self._clock, log=self._log)

    # ------------------------------------------------------------------
    # 運用ヘルパー
    # ------------------------------------------------------------------
    def process_frame(self, frame: Frame) -> ProcessingResult:
        return process_frame_service(self, frame)

    def process_record(self, line: str) -> Union[ProcessingResult, RecordRejected]:
        """テキストレコードを検証し、正しければフレームとして処理します。"""

        parsed = parse_record(line)
        if isinstance(parsed, RecordRejected):
            self._log(f"Record discarded ({parsed.reason})")
            return parsed
        return self.process_frame(parsed)

    def lookup(self, mac: str) -> Optional[MacTableEntry]:
        return self.mac_table.lookup(mac)

    # ------------------------------------------------------------------
    # show コマンド用ヘルパー
    # ------------------------------------------------------------------
    def banner(self) -> str:
        return (
            "[BRIDGE MODULE] Initializing Store-and-Forward Algorithm...\n"
            f"[BRIDGE MODULE] Learning Table Initialized | Timestamp: {format_ctime(self._clock())}"
        )

    def show_mac_address_table(self) -> str:
        return self.mac_table.render()

    def show_event_log(self, limit: Optional[int] = None) -> str:
        if limit is None:
            events = list(self.event_log)
        else:
            events = list(self.event_log)[-limit:]
        return "\n".join(events) if events else "<no events>"

    # ------------------------------------------------------------------
    # メンテナンスヘルパー
    # ------------------------------------------------------------------
    def clear_mac_table(self) -> None:
        self.mac_table.clear()

    def _log(self, message: str) -> None:
        timestamp = format_timestamp(self._clock())
        self.event_log.append(f"[{timestamp}] {message}")


__all__ = [
    "DEFAULT_AGING_TIME",
    "EVENT_LOG_LIMIT",
    "Frame",
    "MacTableEntry",
    "RecordRejected",
    "LearningBridge",
]
