"""Tests for the battle log parser."""
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from vgccorner.analysis import (
    BattleLogParser, BattleSummary, FaintAction, LogTooLargeError, MomentType,
    MoveAction, OtherAction, Significance, SwitchAction, parse_showdown_log,
)
from vgccorner.analysis.protocol import MessageKind
from vgccorner.config import AnalysisConfig


def all_actions(summary):
    return [action for turn in summary.turns for action in turn.actions]


def test_parse_basic_battle(sample_log):
    summary = parse_showdown_log(sample_log)

    assert summary.id
    assert summary.format == "[Gen 9] VGC 2025 Reg H (Bo3)"
    assert summary.player1.name == "Player1"
    assert summary.player2.name == "Player2"
    assert summary.winner == "player2"
    assert summary.winner_name == "Player2"
    assert len(summary.turns) == 5

def test_turns_are_numbered_from_one(sample_log):
    summary = parse_showdown_log(sample_log)

    assert [t.number for t in summary.turns] == [1, 2, 3, 4, 5]
    assert summary.stats.total_turns == len(summary.turns)

def test_pre_turn_switches_attach_to_turn_one(sample_log):
    summary = parse_showdown_log(sample_log)

    first = summary.turns[0].actions
    assert [a.action_type for a in first] == ["switch", "switch", "move", "move"]
    assert first[0].player == "player1"
    assert first[0].switch_to == "Pikachu"
    assert first[1].player == "player2"
    assert first[1].switch_to == "Blastoise"

def test_actions_carry_player_slots(sample_log):
    summary = parse_showdown_log(sample_log)

    for action in all_actions(summary):
        assert action.player in ("player1", "player2")
        assert action.action_type

def test_move_parsing(sample_log):
    summary = parse_showdown_log(sample_log)

    move = summary.turns[0].actions[2]
    assert isinstance(move, MoveAction)
    assert move.move.id == "thunderbolt"
    assert move.move.name == "Thunderbolt"
    assert move.user == "Pikachu"
    assert move.target == "Blastoise"

def test_move_outcome_annotations(sample_log):
    summary = parse_showdown_log(sample_log)

    thunderbolt, hydro_pump = summary.turns[0].actions[2:4]
    assert thunderbolt.effectiveness == "super_effective"
    assert thunderbolt.damage == pytest.approx(35.0)
    assert hydro_pump.effectiveness == "super_effective"
    assert hydro_pump.damage == pytest.approx(70.0)

    flamethrower = summary.turns[3].actions[0]
    assert flamethrower.move.id == "flamethrower"
    assert flamethrower.effectiveness == "resisted"

def test_unknown_lines_inside_turns_are_kept(sample_log):
    summary = parse_showdown_log(sample_log)

    other = summary.turns[1].actions[-1]
    assert isinstance(other, OtherAction)
    assert other.action_type == "-singleturn"
    assert other.player == "player2"
    assert other.details == ("p2a: Blastoise", "Protect")

def test_stats(sample_log):
    stats = parse_showdown_log(sample_log).stats

    assert stats.move_frequency["waterfall"] == 2
    assert stats.move_frequency["hydro-pump"] == 1
    assert stats.move_frequency["thunder-wave"] == 1
    assert stats.moves_used_count == 9
    assert stats.switches_count == 4
    assert stats.super_effective_moves == 5
    assert stats.not_very_effective_moves == 1
    assert stats.critical_hits == 0

def test_damage_is_attributed_to_the_damaged_side(sample_log):
    stats = parse_showdown_log(sample_log).stats

    # Blastoise went 100 -> 65 -> 60 -> 30 -> 20
    assert stats.player2.damage_taken == pytest.approx(80.0)
    assert stats.player1.damage_dealt == pytest.approx(80.0)
    # Pikachu 100 -> 30, Charizard 100 -> 40 -> 0, Pikachu 30 -> 0
    assert stats.player1.damage_taken == pytest.approx(200.0)
    assert stats.player2.damage_dealt == pytest.approx(200.0)
    assert stats.avg_damage_per_turn == pytest.approx(56.0)
    assert stats.avg_heal_per_turn == 0.0

def test_faints_count_losses_and_key_moments(sample_log):
    summary = parse_showdown_log(sample_log)

    assert summary.player1.losses == 2
    assert summary.player2.losses == 0

    kos = [m for m in summary.key_moments if m.moment_type == MomentType.KO]
    assert [m.turn_number for m in kos] == [4, 5]
    assert all(m.significance == Significance.HIGH for m in kos)
    assert "Charizard" in kos[0].description

    faints = [a for a in all_actions(summary) if isinstance(a, FaintAction)]
    assert [f.combatant for f in faints] == ["Charizard", "Pikachu"]

def test_big_hits_are_key_moments(sample_log):
    summary = parse_showdown_log(sample_log)

    big_hits = [m for m in summary.key_moments if m.moment_type == MomentType.BIG_HIT]
    assert [m.turn_number for m in big_hits] == [1, 3]
    assert all(m.significance == Significance.MEDIUM for m in big_hits)

def test_battle_metadata(sample_log):
    summary = parse_showdown_log(sample_log)

    assert summary.generation == 9
    assert summary.game_type == "doubles"
    assert summary.rated is True
    assert summary.started_at == datetime.fromtimestamp(1763188046, tz=timezone.utc)
    assert summary.duration_sec == 0
    assert summary.player1.rating == 1487
    assert summary.player2.rating == 1398
    assert summary.player1.team == ("Pikachu", "Charizard")
    assert summary.player2.team == ("Blastoise", "Dragonite")

def test_knockout_scenario(knockout_log):
    summary = parse_showdown_log(knockout_log)

    assert summary.player1.name == "Alice"
    assert summary.player2.name == "Bob"
    assert summary.player2.losses == 1
    assert summary.winner == "player1"
    assert len(summary.turns) == 2

    assert len(summary.key_moments) == 1
    moment = summary.key_moments[0]
    assert moment.moment_type == MomentType.KO
    assert moment.significance == Significance.HIGH
    assert moment.turn_number == 2
    assert "from full health" in moment.description

def test_minimal_log(minimal_log):
    summary = parse_showdown_log(minimal_log)

    assert summary.player1.name == "Player1"
    assert summary.player2.name == "Player2"
    assert summary.winner == "player1"
    assert summary.stats.move_frequency == {"tackle": 1}

def test_empty_log():
    summary = parse_showdown_log("")

    assert summary is not None
    assert summary.id
    assert summary.turns == ()
    assert summary.winner == ""
    assert summary.player1.name == ""
    assert summary.player2.name == ""
    assert summary.player1.losses == 0
    assert summary.stats.total_turns == 0
    assert summary.stats.avg_damage_per_turn == 0.0
    assert summary.key_moments == ()

def test_malformed_log():
    summary = parse_showdown_log(
        "this is not a valid showdown log\n"
        "it has no pipe delimiters\n"
        "and no proper structure"
    )

    assert summary.turns == ()
    assert summary.stats.total_turns == 0
    assert summary.winner == ""

def test_lines_with_missing_fields_are_skipped():
    log = """|player|p1|Alice
|player|p2|Bob
|turn|1
|move|
|move|p1a: Pikachu|
|-damage|p2a: Squirtle|abc/100
|switch|
|faint
|t:|not-a-number
|gen|nine
|move|p1a: Pikachu|Tackle|p2a: Squirtle
|turn|2
|win|Bob"""
    summary = parse_showdown_log(log)

    assert len(summary.turns) == 2
    assert [a.action_type for a in summary.turns[0].actions] == ["move"]
    assert summary.generation is None
    assert summary.winner == "player2"

def test_same_log_twice_gets_new_ids(sample_log):
    first = parse_showdown_log(sample_log)
    second = parse_showdown_log(sample_log)

    assert first.id != second.id
    assert first.model_dump(exclude={"id"}) == second.model_dump(exclude={"id"})

def test_repeated_move_frequency():
    log = "|turn|1\n" + "\n".join(
        f"|move|p1a: Pikachu|Thunder Wave|p2a: Squirtle\n|turn|{n}" for n in range(2, 6)
    )
    summary = parse_showdown_log(log)

    assert summary.stats.move_frequency["thunder-wave"] == 4

def test_no_win_marker_leaves_winner_empty():
    log = """|player|p1|Alice
|player|p2|Bob
|turn|1
|-damage|p2a: Squirtle|10/100
|turn|2"""
    summary = parse_showdown_log(log)

    assert summary.winner == ""
    assert len(summary.turns) == 2

def test_win_for_unknown_name_leaves_winner_empty():
    summary = parse_showdown_log("|player|p1|Alice\n|player|p2|Bob\n|turn|1\n|win|Carol")
    assert summary.winner == ""

def test_tie_ends_battle_without_winner():
    summary = parse_showdown_log("|player|p1|Alice\n|player|p2|Bob\n|turn|1\n|tie\n|turn|2")

    assert summary.winner == ""
    assert len(summary.turns) == 1

def test_lines_after_win_are_ignored():
    log = "|player|p1|Alice\n|player|p2|Bob\n|turn|1\n|win|Alice\n|turn|2\n|move|p1a: A|Tackle|p2a: B"
    summary = parse_showdown_log(log)

    assert len(summary.turns) == 1
    assert summary.stats.moves_used_count == 0

def test_first_player_declaration_wins():
    log = "|player|p1|Alice|1|1500\n|player|p1|Mallory|2|1600\n|player|p2|Bob"
    summary = parse_showdown_log(log)

    assert summary.player1.name == "Alice"
    assert summary.player1.rating == 1500

def test_join_names_fill_missing_declarations():
    summary = parse_showdown_log("|j|☆Ash\n|j|☆Misty\n|turn|1")

    assert summary.player1.name == "Ash"
    assert summary.player2.name == "Misty"

def test_declared_names_take_precedence_over_joins():
    summary = parse_showdown_log("|j|☆Ash\n|j|☆Misty\n|player|p2|Ash\n|turn|1")

    assert summary.player1.name == "Misty"
    assert summary.player2.name == "Ash"

def test_winner_matches_join_names():
    summary = parse_showdown_log("|j|☆Ash\n|j|☆Misty\n|turn|1\n|win|Misty")
    assert summary.winner == "player2"

def test_undeclared_side_uses_raw_token():
    log = "|turn|1\n|move|p3a: Ghost|Shadow Ball|p1a: Pikachu\n|faint|p3a: Ghost"
    summary = parse_showdown_log(log)

    move, faint = summary.turns[0].actions
    assert move.player == "p3"
    assert faint.player == "p3"
    assert summary.player1.losses == 0
    assert summary.player2.losses == 0

def test_turn_numbers_stay_contiguous():
    summary = parse_showdown_log("|turn|1\n|turn|3\n|turn|7")
    assert [t.number for t in summary.turns] == [1, 2, 3]

def test_repeated_turn_marker_keeps_the_open_turn():
    log = """|turn|1
|move|p1a: Pikachu|Thunderbolt|p2a: Squirtle
|turn|1
|move|p2a: Squirtle|Tackle|p1a: Pikachu"""
    summary = parse_showdown_log(log)

    assert len(summary.turns) == 1
    assert len(summary.turns[0].actions) == 2
    assert summary.stats.total_turns == 1

def test_turn_marker_without_number_is_ignored():
    log = """|turn|1
|move|p1a: Pikachu|Thunderbolt|p2a: Squirtle
|turn|abc
|turn|
|move|p2a: Squirtle|Tackle|p1a: Pikachu
|-damage|p1a: Pikachu|40/100"""
    summary = parse_showdown_log(log)

    assert [(t.number, len(t.actions)) for t in summary.turns] == [(1, 2)]
    assert summary.stats.avg_damage_per_turn == 60.0

def test_stale_turn_marker_after_a_jump_is_ignored():
    summary = parse_showdown_log("|turn|1\n|turn|5\n|turn|3\n|turn|5\n|turn|6")
    assert [t.number for t in summary.turns] == [1, 2, 3]

def test_upkeep_does_not_close_a_turn():
    log = "|turn|1\n|move|p1a: A|Tackle|p2a: B\n|upkeep\n|move|p2a: B|Tackle|p1a: A"
    summary = parse_showdown_log(log)

    assert len(summary.turns) == 1
    assert len(summary.turns[0].actions) == 2

def test_pre_turn_actions_without_turns_are_kept():
    summary = parse_showdown_log("|switch|p1a: Pikachu|Pikachu, L50|100/100")

    assert len(summary.turns) == 1
    assert isinstance(summary.turns[0].actions[0], SwitchAction)
    assert summary.stats.total_turns == 1

def test_unknown_lines_outside_turns_are_ignored():
    summary = parse_showdown_log("|-singleturn|p2a: Blastoise|Protect\n|turn|1")
    assert summary.turns[0].actions == ()

def test_forced_switch():
    summary = parse_showdown_log("|turn|1\n|drag|p2a: Dragonite|Dragonite, L50|100/100")

    switch = summary.turns[0].actions[0]
    assert switch.switch_to == "Dragonite"
    assert switch.forced is True

def test_critical_hit():
    log = """|turn|1
|move|p1a: Pikachu|Thunderbolt|p2a: Blastoise
|-crit|p2a: Blastoise
|-damage|p2a: Blastoise|80/100"""
    summary = parse_showdown_log(log)

    assert summary.stats.critical_hits == 1
    assert summary.turns[0].actions[0].critical is True
    assert summary.turns[0].actions[0].damage == pytest.approx(20.0)
    crit = summary.key_moments[0]
    assert crit.moment_type == MomentType.CRITICAL_HIT
    assert crit.significance == Significance.MEDIUM

def test_healing_is_credited_to_healed_side():
    log = """|turn|1
|move|p2a: Blastoise|Tackle|p1a: Snorlax
|-damage|p1a: Snorlax|50/100
|-heal|p1a: Snorlax|80/100|[from] item: Leftovers
|turn|2"""
    stats = parse_showdown_log(log).stats

    assert stats.player1.healing_done == pytest.approx(30.0)
    assert stats.player2.healing_done == 0.0
    assert stats.avg_heal_per_turn == pytest.approx(15.0)

def test_indirect_damage_does_not_annotate_move():
    log = """|turn|1
|move|p1a: Pikachu|Thunderbolt|p2a: Blastoise
|-damage|p2a: Blastoise|90/100
|-damage|p2a: Blastoise|78/100|[from] Stealth Rock"""
    summary = parse_showdown_log(log)

    assert summary.turns[0].actions[0].damage == pytest.approx(10.0)
    assert summary.stats.player2.damage_taken == pytest.approx(22.0)

def test_switch_health_is_tracked():
    log = """|turn|1
|switch|p1a: Pikachu|Pikachu, L50|30/100
|-damage|p1a: Pikachu|10/100"""
    stats = parse_showdown_log(log).stats

    assert stats.player1.damage_taken == pytest.approx(20.0)

def test_metadata_is_passed_through():
    metadata = {"format": "override", "is_private": True}
    summary = parse_showdown_log("|turn|1", metadata=metadata)

    assert summary.metadata == metadata
    assert summary.format == ""

def test_summary_is_immutable(sample_log):
    summary = parse_showdown_log(sample_log)

    with pytest.raises(ValidationError):
        summary.winner = "player1"

def test_summary_mappings_are_read_only(sample_log):
    metadata = {"source": "upload"}
    summary = parse_showdown_log(sample_log, metadata=metadata)

    with pytest.raises(TypeError):
        summary.stats.move_frequency["waterfall"] = 99
    with pytest.raises(TypeError):
        summary.metadata["source"] = "changed"

    metadata["source"] = "changed"

    assert summary.stats.move_frequency["waterfall"] == 2
    assert summary.metadata["source"] == "upload"

def test_summary_dumps_mappings_as_dicts(sample_log):
    summary = parse_showdown_log(sample_log, metadata={"source": "upload"})
    dumped = summary.model_dump()

    assert type(dumped["metadata"]) is dict
    assert type(dumped["stats"]["move_frequency"]) is dict
    restored = BattleSummary.model_validate_json(summary.model_dump_json())
    assert restored.model_dump() == dumped

def test_oversized_log_raises():
    parser = BattleLogParser(AnalysisConfig(max_log_bytes=16))

    with pytest.raises(LogTooLargeError) as exc_info:
        parser.parse("|turn|1\n" * 10)

    assert exc_info.value.limit == 16

def test_every_message_kind_has_a_handler():
    parser = BattleLogParser()
    assert set(parser._handlers) == set(MessageKind)

def test_parser_can_be_shared_between_threads(sample_log):
    parser = BattleLogParser()

    with ThreadPoolExecutor(max_workers=4) as pool:
        summaries = list(pool.map(parser.parse, [sample_log] * 8))

    assert len({s.id for s in summaries}) == 8
    dumps = [s.model_dump(exclude={"id"}) for s in summaries]
    assert all(d == dumps[0] for d in dumps)

def test_bare_position_resolves_to_active_combatant():
    log = """|player|p1|Alice
|player|p2|Bob
|switch|p2a: Squirtle|Squirtle, L50|100/100
|turn|1
|faint|p2a"""
    summary = parse_showdown_log(log)

    faint = summary.turns[0].actions[-1]
    assert faint.combatant == "Squirtle"
    assert summary.player2.losses == 1
