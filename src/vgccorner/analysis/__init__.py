"""Battle log analysis."""
from .errors import AnalysisError, LogTooLargeError
from .models import (
    BattleSummary, FaintAction, KeyMoment, MomentType, Move, MoveAction,
    OtherAction, Player, PlayerStats, Significance, Stats, SwitchAction, Turn,
)
from .parser import BattleLogParser, parse_showdown_log

__all__ = [
    "AnalysisError",
    "LogTooLargeError",
    "BattleSummary",
    "FaintAction",
    "KeyMoment",
    "MomentType",
    "Move",
    "MoveAction",
    "OtherAction",
    "Player",
    "PlayerStats",
    "Significance",
    "Stats",
    "SwitchAction",
    "Turn",
    "BattleLogParser",
    "parse_showdown_log",
]
