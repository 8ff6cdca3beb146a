"""MAC address table management for the store-and-forward bridge simulator."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import UTC, datetime, timedelta
from typing import Callable, Dict, List, Optional, Tuple

from bridge_sim.utils import format_ctime, is_valid_mac

__all__ = ["DEFAULT_AGING_TIME", "TABLE_RULE", "MacTableEntry", "MacTable"]

DEFAULT_AGING_TIME = timedelta(seconds=300)
TABLE_RULE = "-" * 73


@dataclass(frozen=True)
class MacTableEntry:
    """学習済みの MAC アドレスとポートの対応を表現します。"""

    mac: str
    port: int
    last_seen: datetime

    def is_expired(self, now: datetime, aging_time: timedelta) -> bool:
        # ちょうど aging_time の経過は期限切れとみなさない
        return now - self.last_seen > aging_time


class MacTable:
    """挿入順を保持する MAC アドレステーブルです。

    テーブルを変更できるのは :meth:`learn`、:meth:`sweep`、:meth:`clear`
    だけで、転送判断には :meth:`entries` のスナップショットを渡します。
    """

    def __init__(
        self,
        aging_time: timedelta = DEFAULT_AGING_TIME,
        clock: Optional[Callable[[], datetime]] = None,
        log: Optional[Callable[[str], None]] = None,
    ) -> None:
        if aging_time <= timedelta(0):
            raise ValueError("aging time must be positive")
        self.aging_time = aging_time
        self._clock = clock or (lambda: datetime.now(UTC))
        self._log = log or (lambda message: None)
        self._entries: Dict[str, MacTableEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, mac: object) -> bool:
        return mac in self._entries

    def now(self) -> datetime:
        return self._clock()

    def entries(self) -> Tuple[MacTableEntry, ...]:
        return tuple(self._entries.values())

    def lookup(self, mac: str) -> Optional[MacTableEntry]:
        return self._entries.get(mac)

    def learn(self, mac: str, port: int) -> MacTableEntry:
        if not is_valid_mac(mac):
            raise ValueError(f"invalid MAC address: {mac}")
        if port <= 0:
            raise ValueError("ports must be positive integers")
        now = self.now()
        entry = self._entries.get(mac)
        if entry is None:
            entry = MacTableEntry(mac=mac, port=port, last_seen=now)
            self._log(f"Learned {mac} on port {port}")
        else:
            # 既存キーへの再代入なので表示順は変わらない
            last_seen = max(entry.last_seen, now)
            if entry.port != port:
                self._log(f"{mac} moved from port {entry.port} to port {port}")
                entry = replace(entry, port=port, last_seen=last_seen)
            else:
                entry = replace(entry, last_seen=last_seen)
        self._entries[mac] = entry
        return entry

    def sweep(self, now: Optional[datetime] = None) -> List[MacTableEntry]:
        """期限切れのエントリを削除し、削除したエントリを返します。"""

        if now is None:
            now = self.now()
        evicted = [
            entry
            for entry in self._entries.values()
            if entry.is_expired(now, self.aging_time)
        ]
        for entry in evicted:
            del self._entries[entry.mac]
            self._log(f"Aged out {entry.mac} from MAC table")
        return evicted

    def clear(self) -> None:
        self._entries.clear()
        self._log("MAC address table cleared")

    def render(self, now: Optional[datetime] = None) -> str:
        if now is None:
            now = self.now()
        lines = [
            f"[MAC TABLE STATE] | Timestamp: {format_ctime(now)}",
            TABLE_RULE,
        ]
        for entry in self._entries.values():
            lines.append(
                f"MAC: {entry.mac} | Port: {entry.port} | "
                f"Timestamp: {format_ctime(entry.last_seen)}"
            )
        lines.append(TABLE_RULE)
        return "\n".join(lines)
