"""Storage payloads for analyzed battles.

These functions only shape rows. Writing them is up to the storage layer,
which keeps one row in ``battles``, one in ``battle_analysis`` and one per
key moment in ``key_moments``.
"""
from typing import Any, Optional

from .models import BattleSummary


def battle_record(
    summary: BattleSummary,
    battle_log: Optional[str] = None,
    is_private: bool = False,
) -> dict[str, Any]:
    """Row for the ``battles`` table."""
    return {
        "id": summary.id,
        "format": summary.format,
        "timestamp": summary.started_at,
        "duration_sec": summary.duration_sec,
        "winner": summary.winner,
        "player1_id": summary.player1.name,
        "player2_id": summary.player2.name,
        "battle_log": battle_log,
        "is_private": is_private,
    }


def analysis_record(summary: BattleSummary) -> dict[str, Any]:
    """Row for the ``battle_analysis`` table."""
    stats = summary.stats
    return {
        "battle_id": summary.id,
        "total_turns": stats.total_turns,
        "avg_damage_per_turn": stats.avg_damage_per_turn,
        "avg_heal_per_turn": stats.avg_heal_per_turn,
        "moves_used_count": stats.moves_used_count,
        "switches_count": stats.switches_count,
        "super_effective_moves": stats.super_effective_moves,
        "not_very_effective_moves": stats.not_very_effective_moves,
        "critical_hits": stats.critical_hits,
        "player1_damage_dealt": stats.player1.damage_dealt,
        "player1_damage_taken": stats.player1.damage_taken,
        "player1_healing_done": stats.player1.healing_done,
        "player2_damage_dealt": stats.player2.damage_dealt,
        "player2_damage_taken": stats.player2.damage_taken,
        "player2_healing_done": stats.player2.healing_done,
    }


def key_moment_records(summary: BattleSummary) -> list[dict[str, Any]]:
    """Rows for the ``key_moments`` table, in battle order."""
    return [
        {
            "battle_id": summary.id,
            "turn_number": moment.turn_number,
            "moment_type": moment.moment_type.value,
            "description": moment.description,
            "significance": moment.significance.value,
        }
        for moment in summary.key_moments
    ]


def to_payload(
    summary: BattleSummary,
    battle_log: Optional[str] = None,
    is_private: bool = False,
) -> dict[str, Any]:
    """Bundle every row produced for one battle."""
    return {
        "battle": battle_record(summary, battle_log=battle_log, is_private=is_private),
        "analysis": analysis_record(summary),
        "key_moments": key_moment_records(summary),
    }
