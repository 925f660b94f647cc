"""Tokenizer for the Showdown battle protocol."""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional


class MessageKind(str, Enum):
    PLAYER = "player"
    JOIN = "join"
    TIER = "tier"
    START = "start"
    TURN = "turn"
    SWITCH = "switch"
    MOVE = "move"
    SUPER_EFFECTIVE = "-supereffective"
    RESISTED = "-resisted"
    CRIT = "-crit"
    DAMAGE = "-damage"
    HEAL = "-heal"
    FAINT = "faint"
    UPKEEP = "upkeep"
    WIN = "win"
    TIE = "tie"
    TIMESTAMP = "t:"
    GEN = "gen"
    GAMETYPE = "gametype"
    RATED = "rated"
    POKE = "poke"
    INFO = "info"  # Known, but nothing to record
    UNKNOWN = "unknown"

    @classmethod
    def from_tag(cls, tag: str) -> "MessageKind":
        """Map a raw message tag to its kind."""
        return TAG_KINDS.get(tag, cls.UNKNOWN)


TAG_KINDS = {
    "player": MessageKind.PLAYER,
    "j": MessageKind.JOIN,
    "J": MessageKind.JOIN,
    "join": MessageKind.JOIN,
    "tier": MessageKind.TIER,
    "start": MessageKind.START,
    "turn": MessageKind.TURN,
    "switch": MessageKind.SWITCH,
    "drag": MessageKind.SWITCH,
    "move": MessageKind.MOVE,
    "-supereffective": MessageKind.SUPER_EFFECTIVE,
    "-resisted": MessageKind.RESISTED,
    "-crit": MessageKind.CRIT,
    "-damage": MessageKind.DAMAGE,
    "-heal": MessageKind.HEAL,
    "faint": MessageKind.FAINT,
    "upkeep": MessageKind.UPKEEP,
    "win": MessageKind.WIN,
    "tie": MessageKind.TIE,
    "t:": MessageKind.TIMESTAMP,
    "gen": MessageKind.GEN,
    "gametype": MessageKind.GAMETYPE,
    "rated": MessageKind.RATED,
    "poke": MessageKind.POKE,
}

# Room chatter and pre-battle setup lines
for _tag in (
    "html", "uhtml", "uhtmlchange", "raw", "c", "c:", "chat", "l", "L", "leave",
    "n", "N", "title", "rule", "clearpoke", "teampreview", "teamsize",
    "inactive", "inactiveoff", "seed", "badge", "debug", "bigerror", "error",
):
    TAG_KINDS[_tag] = MessageKind.INFO

SIDE_PATTERN = re.compile(r"^(p\d+)([a-z]?)$")

SLOT_NAMES = {"p1": "player1", "p2": "player2"}

# Glyphs prefixed to names in join announcements (player star, room ranks)
NAME_MARKERS = "☆★ +%@*#&~^$"


@dataclass(frozen=True)
class LogLine:
    """A single tokenized protocol line."""
    kind: MessageKind
    tag: str
    fields: tuple[str, ...]

    def field(self, index: int, default: str = "") -> str:
        """Return a field by index, or a default when it is missing."""
        if index < len(self.fields):
            return self.fields[index]
        return default


class LogTokens:
    """Lazy, restartable view of a raw log as protocol lines."""

    def __init__(self, raw: str):
        self._raw = raw or ""

    def __iter__(self) -> Iterator[LogLine]:
        for line in self._raw.splitlines():
            token = tokenize_line(line)
            if token is not None:
                yield token


def tokenize_line(line: str) -> Optional[LogLine]:
    """Split one raw line, or return None when it carries no protocol meaning."""
    line = line.strip()
    if not line.startswith("|"):
        return None

    parts = line.split("|")[1:]
    tag = parts[0].strip()
    if not tag:
        return None

    return LogLine(
        kind=MessageKind.from_tag(tag),
        tag=tag,
        fields=tuple(parts[1:]),
    )


def tokenize(raw: str) -> LogTokens:
    return LogTokens(raw)


def split_pokemon(token: str) -> tuple[str, str]:
    """Split a pokemon reference like ``p2a: Blastoise`` into position and name."""
    position, sep, name = token.partition(":")
    if not sep:
        return token.strip(), ""
    return position.strip(), name.strip()


def side_of(position: str) -> str:
    """Return the side token (``p1``) of a position (``p1a``)."""
    if match := SIDE_PATTERN.match(position.strip()):
        return match.group(1)
    return position.strip()


def is_side_token(token: str) -> bool:
    """True for side or pokemon references (``p1``, ``p2a: Blastoise``)."""
    position, _ = split_pokemon(token)
    return SIDE_PATTERN.match(position) is not None


def slot_of(token: str) -> str:
    """Map a pokemon reference or side token to its player slot.

    Sides other than p1/p2 fall back to the raw side token.
    """
    position, _ = split_pokemon(token)
    side = side_of(position)
    return SLOT_NAMES.get(side, side)


def parse_health(condition: str) -> Optional[float]:
    """Parse an HP condition (``65/100``, ``0 fnt``, ``30/100 par``) to a fraction."""
    value = condition.strip().split(" ")[0]
    if not value:
        return None
    if "/" not in value:
        return 0.0 if value == "0" else None

    current, _, maximum = value.partition("/")
    current_hp = float(current)
    max_hp = float(maximum)
    if max_hp <= 0:
        return None
    return max(0.0, min(1.0, current_hp / max_hp))


def clean_name(name: str) -> str:
    """Strip marker glyphs that prefix join-style name announcements."""
    return name.strip().lstrip(NAME_MARKERS).strip()
