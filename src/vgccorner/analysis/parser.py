"""Parser and analysis engine for Pokemon Showdown battle logs."""
import logging
import uuid
from typing import Any, Callable, Optional

from vgccorner.config import AnalysisConfig
from .errors import LogTooLargeError
from .models import (
    BattleSummary, Effectiveness, FaintAction, Move, MoveAction,
    OtherAction, SwitchAction,
)
from .protocol import (
    LogLine, MessageKind, clean_name, is_side_token, parse_health,
    slot_of, split_pokemon, tokenize,
)
from .tracker import BattleTracker

logger = logging.getLogger(__name__)

Handler = Callable[[BattleTracker, LogLine], None]


class BattleLogParser:
    """Turns a raw battle log into a BattleSummary.

    The parser holds configuration only. Every call to ``parse`` builds
    its own BattleTracker, so one instance can be shared freely.
    """

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()
        self._handlers: dict[MessageKind, Handler] = {
            MessageKind.PLAYER: self._on_player,
            MessageKind.JOIN: self._on_join,
            MessageKind.TIER: self._on_tier,
            MessageKind.START: self._ignore,
            MessageKind.TURN: self._on_turn,
            MessageKind.SWITCH: self._on_switch,
            MessageKind.MOVE: self._on_move,
            MessageKind.SUPER_EFFECTIVE: self._on_super_effective,
            MessageKind.RESISTED: self._on_resisted,
            MessageKind.CRIT: self._on_crit,
            MessageKind.DAMAGE: self._on_damage,
            MessageKind.HEAL: self._on_heal,
            MessageKind.FAINT: self._on_faint,
            MessageKind.UPKEEP: self._ignore,
            MessageKind.WIN: self._on_win,
            MessageKind.TIE: self._on_tie,
            MessageKind.TIMESTAMP: self._on_timestamp,
            MessageKind.GEN: self._on_gen,
            MessageKind.GAMETYPE: self._on_gametype,
            MessageKind.RATED: self._on_rated,
            MessageKind.POKE: self._on_poke,
            MessageKind.INFO: self._ignore,
            MessageKind.UNKNOWN: self._on_unknown,
        }

    def parse(self, raw_log: str, metadata: Optional[dict[str, Any]] = None) -> BattleSummary:
        """Parse a raw battle log.

        Args:
            raw_log: The log text, one protocol message per line
            metadata: Caller-owned values copied onto the summary untouched

        Returns:
            BattleSummary, possibly empty for unstructured input

        Raises:
            LogTooLargeError: If the log exceeds ``max_log_bytes``
        """
        raw_log = raw_log or ""
        size = len(raw_log.encode("utf-8", errors="surrogatepass"))
        if size > self.config.max_log_bytes:
            raise LogTooLargeError(size, self.config.max_log_bytes)

        state = BattleTracker(big_hit_threshold=self.config.big_hit_threshold)

        for line in tokenize(raw_log):
            self._process_line(state, line)
            if state.finished:
                break

        return self._assemble(state, metadata)

    def _process_line(self, state: BattleTracker, line: LogLine) -> None:
        """Dispatch a single line to its handler."""
        handler = self._handlers[line.kind]
        try:
            handler(state, line)
        except (ValueError, IndexError) as e:
            logger.debug(f"Skipping malformed |{line.tag}| line: {e}")

    def _assemble(self, state: BattleTracker, metadata: Optional[dict[str, Any]]) -> BattleSummary:
        turns = state.turns.finish()
        player1, player2 = state.resolve_players()

        summary = BattleSummary(
            id=str(uuid.uuid4()),
            format=state.format,
            player1=player1,
            player2=player2,
            turns=tuple(turns),
            winner=state.resolve_winner(player1, player2),
            stats=state.stats.build(len(turns)),
            key_moments=tuple(state.moments.moments),
            generation=state.generation,
            game_type=state.game_type,
            rated=state.rated,
            started_at=state.started_at,
            duration_sec=state.duration_sec,
            metadata=dict(metadata or {}),
        )
        logger.debug(
            f"Parsed battle {summary.id}: {len(summary.turns)} turns, "
            f"{len(summary.key_moments)} key moments"
        )
        return summary

    # Players and battle metadata

    def _on_player(self, state: BattleTracker, line: LogLine) -> None:
        slot = slot_of(line.field(0))
        name = line.field(1).strip()
        side = state.side(slot)
        if side is None or not name:
            return

        state.bind_name(slot, name)
        rating = line.field(3).strip()
        if side.name == name and side.rating is None and rating.isdigit():
            side.rating = int(rating)

    def _on_join(self, state: BattleTracker, line: LogLine) -> None:
        state.add_join(clean_name(line.field(0)))

    def _on_tier(self, state: BattleTracker, line: LogLine) -> None:
        if not state.format:
            state.format = line.field(0).strip()

    def _on_timestamp(self, state: BattleTracker, line: LogLine) -> None:
        state.note_timestamp(int(line.field(0).strip()))

    def _on_gen(self, state: BattleTracker, line: LogLine) -> None:
        state.generation = int(line.field(0).strip())

    def _on_gametype(self, state: BattleTracker, line: LogLine) -> None:
        state.game_type = line.field(0).strip()

    def _on_rated(self, state: BattleTracker, line: LogLine) -> None:
        state.rated = True

    def _on_poke(self, state: BattleTracker, line: LogLine) -> None:
        side = state.side(slot_of(line.field(0)))
        species = line.field(1).split(",")[0].strip()
        if side is not None and species:
            side.team.append(species)

    def _ignore(self, state: BattleTracker, line: LogLine) -> None:
        pass

    # Turn flow

    def _on_turn(self, state: BattleTracker, line: LogLine) -> None:
        value = line.field(0).strip()
        if not value.isdigit():
            logger.debug(f"Ignoring turn marker with no number: {value!r}")
            return
        declared = int(value)
        if not state.turns.advances(declared):
            logger.debug(f"Ignoring repeated turn marker {declared}")
            return
        state.open_turn(declared)

    def _on_win(self, state: BattleTracker, line: LogLine) -> None:
        state.winner_name = clean_name(line.field(0))
        state.finished = True

    def _on_tie(self, state: BattleTracker, line: LogLine) -> None:
        state.finished = True

    # Actions

    def _on_switch(self, state: BattleTracker, line: LogLine) -> None:
        position, nickname = _pokemon(line)
        slot = slot_of(position)
        species = line.field(1).split(",")[0].strip() or nickname

        state.active[position] = nickname
        health = parse_health(line.field(2))
        if health is not None:
            state.set_health(slot, nickname, health)

        state.turns.record(SwitchAction(
            player=slot,
            switch_to=species,
            forced=line.tag == "drag",
        ))
        state.stats.add_switch()

    def _on_move(self, state: BattleTracker, line: LogLine) -> None:
        position, user = _pokemon(line, state.active)
        move_name = line.field(1).strip()
        if not move_name:
            raise ValueError("move line without a move name")

        target_token = line.field(2)
        target = split_pokemon(target_token)[1] if is_side_token(target_token) else ""

        action = MoveAction(
            player=slot_of(position),
            move=Move.from_name(move_name),
            user=user,
            target=target,
        )
        index = state.turns.record(action)
        state.last_move = index
        if target:
            state.recent_move[slot_of(target_token)] = index
        state.stats.add_move(action.move.id)

    def _on_faint(self, state: BattleTracker, line: LogLine) -> None:
        position, name = _pokemon(line, state.active)
        slot = slot_of(position)

        side = state.side(slot)
        if side is not None:
            side.losses += 1

        from_full = state.combatant_key(slot, name) in state.knocked_from_full
        state.set_health(slot, name, 0.0)
        state.turns.record(FaintAction(player=slot, combatant=name))
        state.moments.on_faint(state.turns.turn_number, slot, name, from_full=from_full)

    def _on_unknown(self, state: BattleTracker, line: LogLine) -> None:
        if not state.turns.is_open:
            return
        token = line.field(0)
        state.turns.record(OtherAction(
            player=slot_of(token) if is_side_token(token) else "",
            action_type=line.tag,
            details=line.fields,
        ))

    # Modifiers on the most recent move

    def _on_super_effective(self, state: BattleTracker, line: LogLine) -> None:
        state.stats.super_effective += 1
        self._annotate_move(state, line.field(0), effectiveness=Effectiveness.SUPER_EFFECTIVE)

    def _on_resisted(self, state: BattleTracker, line: LogLine) -> None:
        state.stats.not_very_effective += 1
        self._annotate_move(state, line.field(0), effectiveness=Effectiveness.RESISTED)

    def _on_crit(self, state: BattleTracker, line: LogLine) -> None:
        position, name = _pokemon(line, state.active)
        state.stats.critical_hits += 1
        self._annotate_move(state, line.field(0), critical=True)
        state.moments.on_crit(state.turns.turn_number, slot_of(position), name)

    def _on_damage(self, state: BattleTracker, line: LogLine) -> None:
        position, name = _pokemon(line, state.active)
        slot = slot_of(position)
        health = parse_health(line.field(1))
        if health is None:
            return

        previous = state.set_health(slot, name, health)
        amount = (previous - health) * 100
        if amount <= 0:
            return

        key = state.combatant_key(slot, name)
        if health == 0.0 and previous >= 1.0:
            state.knocked_from_full.add(key)
        else:
            state.knocked_from_full.discard(key)

        state.stats.add_damage(slot, amount)
        if not _is_indirect(line):
            move = self._recent_move(state, line.field(0))
            if move is not None:
                self._annotate_move(state, line.field(0), damage=round(move.damage + amount, 2))
        state.moments.on_damage(state.turns.turn_number, slot, name, amount, health)

    def _on_heal(self, state: BattleTracker, line: LogLine) -> None:
        position, name = _pokemon(line, state.active)
        slot = slot_of(position)
        health = parse_health(line.field(1))
        if health is None:
            return

        previous = state.set_health(slot, name, health)
        state.stats.add_heal(slot, (health - previous) * 100)

    def _recent_move_index(self, state: BattleTracker, token: str) -> Optional[int]:
        """Index of the most recent move against the side named by ``token``."""
        return state.recent_move.get(slot_of(token), state.last_move)

    def _recent_move(self, state: BattleTracker, token: str) -> Optional[MoveAction]:
        index = self._recent_move_index(state, token)
        if index is None:
            return None
        action = state.turns.get(index)
        return action if isinstance(action, MoveAction) else None

    def _annotate_move(self, state: BattleTracker, token: str, **outcome) -> None:
        """Record an outcome on the move that caused this modifier line."""
        move = self._recent_move(state, token)
        if move is None:
            return
        state.turns.replace(self._recent_move_index(state, token), move.model_copy(update=outcome))


def _pokemon(line: LogLine, active: Optional[dict[str, str]] = None) -> tuple[str, str]:
    """Position and name of the pokemon in a line's first field.

    A bare position (``p2a``) resolves to whoever is active there.
    """
    position, name = split_pokemon(line.field(0))
    if position and not name and active:
        name = active.get(position, "")
    if not position or not name:
        raise ValueError(f"expected a pokemon reference, got {line.field(0)!r}")
    return position, name


def _is_indirect(line: LogLine) -> bool:
    """True for damage from a source other than the last move (hazards, recoil, items)."""
    return any(f.strip().startswith("[from]") for f in line.fields[2:])


def parse_showdown_log(
    raw_log: str,
    metadata: Optional[dict[str, Any]] = None,
    config: Optional[AnalysisConfig] = None,
) -> BattleSummary:
    """Parse a raw Showdown battle log into a BattleSummary."""
    return BattleLogParser(config).parse(raw_log, metadata)
