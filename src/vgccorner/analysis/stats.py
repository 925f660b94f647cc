"""Aggregate statistics accumulated during a parse."""
from collections import defaultdict
from dataclasses import dataclass, field

from .models import PLAYER1, PLAYER2, PlayerStats, Stats


@dataclass
class PlayerTotals:
    damage_dealt: float = 0.0
    damage_taken: float = 0.0
    healing_done: float = 0.0

    def freeze(self) -> PlayerStats:
        return PlayerStats(
            damage_dealt=round(self.damage_dealt, 2),
            damage_taken=round(self.damage_taken, 2),
            healing_done=round(self.healing_done, 2),
        )


@dataclass
class StatsAggregator:
    """Running counters for a single battle."""
    move_frequency: dict[str, int] = field(default_factory=lambda: defaultdict(int))
    moves_used: int = 0
    switches: int = 0
    super_effective: int = 0
    not_very_effective: int = 0
    critical_hits: int = 0
    players: dict[str, PlayerTotals] = field(
        default_factory=lambda: {PLAYER1: PlayerTotals(), PLAYER2: PlayerTotals()}
    )

    def add_move(self, move_id: str) -> None:
        self.move_frequency[move_id] += 1
        self.moves_used += 1

    def add_switch(self) -> None:
        self.switches += 1

    def add_damage(self, target: str, amount: float) -> None:
        """Attribute damage to the side whose combatant lost health.

        The opposing side is credited with dealing it. Sides other than
        the two player slots are not tracked.
        """
        if amount <= 0 or target not in self.players:
            return
        self.players[target].damage_taken += amount
        self.players[opponent(target)].damage_dealt += amount

    def add_heal(self, target: str, amount: float) -> None:
        if amount <= 0 or target not in self.players:
            return
        self.players[target].healing_done += amount

    def build(self, total_turns: int) -> Stats:
        """Freeze the counters, computing per-turn averages."""
        total_damage = sum(p.damage_dealt for p in self.players.values())
        total_heal = sum(p.healing_done for p in self.players.values())

        if total_turns > 0:
            avg_damage = total_damage / total_turns
            avg_heal = total_heal / total_turns
        else:
            avg_damage = 0.0
            avg_heal = 0.0

        return Stats(
            total_turns=total_turns,
            move_frequency=dict(self.move_frequency),
            moves_used_count=self.moves_used,
            switches_count=self.switches,
            super_effective_moves=self.super_effective,
            not_very_effective_moves=self.not_very_effective,
            critical_hits=self.critical_hits,
            player1=self.players[PLAYER1].freeze(),
            player2=self.players[PLAYER2].freeze(),
            avg_damage_per_turn=round(avg_damage, 2),
            avg_heal_per_turn=round(avg_heal, 2),
        )


def opponent(slot: str) -> str:
    return PLAYER2 if slot == PLAYER1 else PLAYER1
