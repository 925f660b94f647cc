"""Data models for analyzed battles."""
import re
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Annotated, Any, Literal, Mapping, Optional, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PlainSerializer

PLAYER1 = "player1"
PLAYER2 = "player2"


def to_move_id(name: str) -> str:
    """Derive a move identifier from its display name ("Thunder Wave" -> "thunder-wave")."""
    name = name.lower().replace("'", "").replace("’", "")
    return re.sub(r"[^a-z0-9]+", "-", name).strip("-")


class Significance(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _SIGNIFICANCE_ORDER.index(self)

    def __lt__(self, other):
        if not isinstance(other, Significance):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Significance):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Significance):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Significance):
            return NotImplemented
        return self.rank >= other.rank


_SIGNIFICANCE_ORDER = [Significance.LOW, Significance.MEDIUM, Significance.HIGH]


class MomentType(str, Enum):
    KO = "KO"
    CRITICAL_HIT = "CRITICAL_HIT"
    BIG_HIT = "BIG_HIT"


class Effectiveness(str, Enum):
    SUPER_EFFECTIVE = "super_effective"
    RESISTED = "resisted"


class Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


def _read_only(value: Mapping) -> Mapping:
    return MappingProxyType(dict(value))


def _as_dict(value: Mapping) -> dict:
    return dict(value)


# Mappings on frozen models are exposed read-only and dumped as plain dicts
MoveCounts = Annotated[
    Mapping[str, int],
    AfterValidator(_read_only),
    PlainSerializer(_as_dict, return_type=dict[str, int]),
]
Metadata = Annotated[
    Mapping[str, Any],
    AfterValidator(_read_only),
    PlainSerializer(_as_dict, return_type=dict[str, Any]),
]


class Move(Frozen):
    """A move reference."""
    id: str
    name: str

    @classmethod
    def from_name(cls, name: str) -> "Move":
        return cls(id=to_move_id(name), name=name)


class MoveAction(Frozen):
    kind: Literal["move"] = "move"
    player: str
    action_type: str = "move"
    move: Move
    user: str = ""
    target: str = ""
    effectiveness: Optional[Effectiveness] = None
    critical: bool = False
    damage: float = 0.0  # HP percentage points removed from the target


class SwitchAction(Frozen):
    kind: Literal["switch"] = "switch"
    player: str
    action_type: str = "switch"
    switch_to: str
    forced: bool = False


class FaintAction(Frozen):
    kind: Literal["faint"] = "faint"
    player: str
    action_type: str = "faint"
    combatant: str


class OtherAction(Frozen):
    """A protocol line with no dedicated handler, kept verbatim."""
    kind: Literal["other"] = "other"
    player: str = ""
    action_type: str
    details: tuple[str, ...] = ()


Action = Annotated[
    Union[MoveAction, SwitchAction, FaintAction, OtherAction],
    Field(discriminator="kind"),
]


class Turn(Frozen):
    number: int
    actions: tuple[Action, ...] = ()


class Player(Frozen):
    name: str = ""
    losses: int = 0
    rating: Optional[int] = None
    team: tuple[str, ...] = ()


class PlayerStats(Frozen):
    """Per-player totals, in HP percentage points."""
    damage_dealt: float = 0.0
    damage_taken: float = 0.0
    healing_done: float = 0.0


class Stats(Frozen):
    total_turns: int = 0
    move_frequency: MoveCounts = Field(default_factory=dict, validate_default=True)
    moves_used_count: int = 0
    switches_count: int = 0
    super_effective_moves: int = 0
    not_very_effective_moves: int = 0
    critical_hits: int = 0
    player1: PlayerStats = PlayerStats()
    player2: PlayerStats = PlayerStats()
    avg_damage_per_turn: float = 0.0
    avg_heal_per_turn: float = 0.0


class KeyMoment(Frozen):
    turn_number: int
    moment_type: MomentType
    description: str
    significance: Significance


class BattleSummary(Frozen):
    """A fully analyzed battle."""
    id: str
    format: str = ""
    player1: Player = Player()
    player2: Player = Player()
    turns: tuple[Turn, ...] = ()
    winner: str = ""  # "player1", "player2" or "" when undetermined
    stats: Stats = Stats()
    key_moments: tuple[KeyMoment, ...] = ()

    generation: Optional[int] = None
    game_type: str = ""
    rated: bool = False
    started_at: Optional[datetime] = None
    duration_sec: int = 0
    metadata: Metadata = Field(default_factory=dict, validate_default=True)

    def player(self, slot: str) -> Player:
        """Return the player record for a slot designator."""
        return self.player2 if slot == PLAYER2 else self.player1

    @property
    def winner_name(self) -> str:
        if not self.winner:
            return ""
        return self.player(self.winner).name
