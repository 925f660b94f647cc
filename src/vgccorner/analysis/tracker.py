"""Per-parse battle state."""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from .assembler import TurnAssembler
from .moments import KeyMomentDetector
from .models import PLAYER1, PLAYER2, Player
from .protocol import clean_name
from .stats import StatsAggregator

# 9999-12-31T23:59:59Z
MAX_TIMESTAMP = 253402300799


@dataclass
class SideState:
    """What is known about one player slot."""
    name: str = ""
    rating: Optional[int] = None
    losses: int = 0
    team: list[str] = field(default_factory=list)

    def freeze(self, fallback_name: str = "") -> Player:
        return Player(
            name=self.name or fallback_name,
            losses=self.losses,
            rating=self.rating,
            team=tuple(self.team),
        )


@dataclass
class BattleTracker:
    """Mutable state owned by exactly one parse call."""
    big_hit_threshold: float = 50.0

    sides: dict[str, SideState] = field(
        default_factory=lambda: {PLAYER1: SideState(), PLAYER2: SideState()}
    )
    join_names: list[str] = field(default_factory=list)
    format: str = ""
    generation: Optional[int] = None
    game_type: str = ""
    rated: bool = False
    winner_name: Optional[str] = None
    finished: bool = False
    started_at: Optional[datetime] = None
    first_timestamp: Optional[int] = None
    last_timestamp: Optional[int] = None

    # Active combatant name per position ("p1a" -> "Pikachu")
    active: dict[str, str] = field(default_factory=dict)
    # Last known health fraction per combatant ("player2: Blastoise" -> 0.65)
    health: dict[str, float] = field(default_factory=dict)
    # Combatants whose last hit took them from full health to zero
    knocked_from_full: set[str] = field(default_factory=set)
    # Most recent move action against each slot, as an index into the open turn
    recent_move: dict[str, int] = field(default_factory=dict)
    last_move: Optional[int] = None

    turns: TurnAssembler = field(default_factory=TurnAssembler)
    stats: StatsAggregator = field(default_factory=StatsAggregator)
    moments: KeyMomentDetector = field(init=False)

    def __post_init__(self):
        self.moments = KeyMomentDetector(big_hit_threshold=self.big_hit_threshold)

    def side(self, slot: str) -> Optional[SideState]:
        return self.sides.get(slot)

    def bind_name(self, slot: str, name: str) -> bool:
        """Bind a display name to a slot unless one is already bound."""
        side = self.sides.get(slot)
        if side is None or side.name or not name:
            return False
        side.name = name
        return True

    def add_join(self, name: str) -> None:
        if name and name not in self.join_names:
            self.join_names.append(name)

    def resolve_players(self) -> tuple[Player, Player]:
        """Freeze both players, filling missing names from join announcements."""
        bound = {s.name for s in self.sides.values() if s.name}
        candidates = [n for n in self.join_names if n not in bound]

        players = []
        for slot in (PLAYER1, PLAYER2):
            side = self.sides[slot]
            fallback = ""
            if not side.name and candidates:
                fallback = candidates.pop(0)
            players.append(side.freeze(fallback))
        return players[0], players[1]

    def resolve_winner(self, player1: Player, player2: Player) -> str:
        """Map the announced winner name onto a slot, or "" if it matches neither."""
        if not self.winner_name:
            return ""
        if player1.name and self.winner_name == clean_name(player1.name):
            return PLAYER1
        if player2.name and self.winner_name == clean_name(player2.name):
            return PLAYER2
        return ""

    def combatant_key(self, slot: str, name: str) -> str:
        return f"{slot}: {name}"

    def set_health(self, slot: str, name: str, fraction: float) -> float:
        """Record a combatant's health, returning the previous fraction."""
        key = self.combatant_key(slot, name)
        previous = self.health.get(key, 1.0)
        self.health[key] = fraction
        return previous

    def open_turn(self, declared: Optional[int] = None) -> int:
        # Move references point into the closing turn's buffer
        self.recent_move.clear()
        self.last_move = None
        return self.turns.open_turn(declared)

    def note_timestamp(self, stamp: int) -> None:
        if not 0 <= stamp <= MAX_TIMESTAMP:
            raise ValueError(f"Timestamp out of range: {stamp}")
        if self.first_timestamp is None:
            self.first_timestamp = stamp
            self.started_at = datetime.fromtimestamp(stamp, tz=timezone.utc)
        self.last_timestamp = stamp

    @property
    def duration_sec(self) -> int:
        if self.first_timestamp is None or self.last_timestamp is None:
            return 0
        return max(0, self.last_timestamp - self.first_timestamp)
