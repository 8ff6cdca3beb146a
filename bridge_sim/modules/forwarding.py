"""Filtering and forwarding decisions for the store-and-forward bridge."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

from bridge_sim.modules.mac_table import MacTableEntry

__all__ = ["Ignored", "ForwardTo", "Broadcast", "NoTarget", "Decision", "decide"]

DECISION_PREFIX = "[FILTERING DECISION] "


@dataclass(frozen=True)
class Ignored:
    """送信元と宛先が同じフレームです。"""

    def describe(self) -> str:
        return (
            f"{DECISION_PREFIX}Frame ignored: "
            "source and destination MAC addresses identical."
        )


@dataclass(frozen=True)
class ForwardTo:
    """宛先を学習済みのポートへ転送します。"""

    port: int

    def describe(self) -> str:
        return f"{DECISION_PREFIX}Forwarding frame to port {self.port}"


@dataclass(frozen=True)
class Broadcast:
    """宛先不明のため受信ポート以外へフラッディングします。"""

    ports: Tuple[int, ...]

    def describe(self) -> str:
        listed = "".join(f"{port} " for port in self.ports)
        return (
            f"{DECISION_PREFIX}Destination MAC not found. "
            f"Broadcasting frame to all ports: {listed}"
        )


@dataclass(frozen=True)
class NoTarget:
    """テーブルに送信元しか存在しない場合の判断です。"""

    def describe(self) -> str:
        return f"{DECISION_PREFIX}No port to broadcast to"


Decision = Union[Ignored, ForwardTo, Broadcast, NoTarget]


def decide(
    sender: str,
    ingress_port: int,
    receiver: str,
    entries: Sequence[MacTableEntry],
) -> Decision:
    """フレームの転送先を決定します。

    ``entries`` はエージング前のテーブルを挿入順に並べたものです。

    * 送信元と宛先が同じなら :class:`Ignored` を返し、テーブルは参照しません。
    * エントリが 1 件以下なら宛先を比較する前に :class:`NoTarget` を返します。
    * 最初に一致したエントリのポートへ :class:`ForwardTo` を返します。
      受信ポートと同じポートでも抑制しません。
    * 一致しなければ受信ポートを除いた全ポートへ :class:`Broadcast` します。
    """

    if sender == receiver:
        return Ignored()
    if len(entries) <= 1:
        return NoTarget()

    candidates: List[int] = []
    for entry in entries:
        if entry.mac == receiver:
            return ForwardTo(entry.port)
        candidates.append(entry.port)
    return Broadcast(tuple(port for port in candidates if port != ingress_port))
