"""Store-and-forward learning bridge simulator package."""

from bridge_sim.bridge_core import LearningBridge
from bridge_sim.modules.forwarding import Broadcast, ForwardTo, Ignored, NoTarget, decide
from bridge_sim.modules.mac_table import MacTable, MacTableEntry
from bridge_sim.modules.records import Frame, RecordRejected, parse_record

__all__ = [
    "LearningBridge",
    "MacTable",
    "MacTableEntry",
    "Frame",
    "RecordRejected",
    "parse_record",
    "decide",
    "Ignored",
    "ForwardTo",
    "Broadcast",
    "NoTarget",
]
