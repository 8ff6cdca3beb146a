"""Entry point feeding ``sender,port,receiver`` records from stdin to the bridge."""

from __future__ import annotations

from dataclasses import dataclass
import sys
from typing import Callable, Iterable

try:  # pragma: no cover - 環境依存
    import readline  # noqa: F401  input() の行編集を有効にする
except ImportError:  # pragma: no cover - Windows 想定
    pass

from bridge_sim.bridge_core import LearningBridge
from bridge_sim.modules.records import STOP_SENTINEL, RecordRejected


@dataclass
class RunSummary:
    """入力ループの集計です。"""

    processed: int = 0
    rejected: int = 0
    stopped: bool = False


def run(
    lines: Iterable[str],
    bridge: LearningBridge,
    write: Callable[[str], None] = print,
) -> RunSummary:
    """Process records until ``stop`` or the end of ``lines``.

    Malformed records are skipped without output and without touching the
    MAC table.
    """

    summary = RunSummary()
    for raw in lines:
        line = raw.rstrip("\r\n")
        if line == STOP_SENTINEL:
            summary.stopped = True
            break
        result = bridge.process_record(line)
        if isinstance(result, RecordRejected):
            summary.rejected += 1
            continue
        summary.processed += 1
        write(result.render())
    return summary


def _stdin_lines() -> Iterable[str]:
    # 読み取りエラーは置換文字になり、検証で破棄される
    sys.stdin.reconfigure(errors="replace")
    while True:
        try:
            yield input()
        except EOFError:
            return


def main() -> int:
    bridge = LearningBridge()
    print(bridge.banner())
    print()
    run(_stdin_lines(), bridge)
    return 0


if __name__ == "__main__":  # pragma: no cover - 手動実行用エントリポイント
    sys.exit(main())
