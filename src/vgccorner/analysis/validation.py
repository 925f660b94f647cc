"""Consistency checks for analyzed battles."""
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List

from pydantic import ValidationError

from .models import PLAYER1, PLAYER2, BattleSummary

logger = logging.getLogger(__name__)

VALID_WINNERS = {"", PLAYER1, PLAYER2}

@dataclass
class ValidationResult:
    """Result of validating a single summary."""
    battle_id: str
    valid: bool
    errors: List[str]
    warnings: List[str]

@dataclass
class ValidationReport:
    """Aggregate validation report."""
    total_battles: int
    valid_battles: int
    invalid_battles: int
    error_counts: dict[str, int]
    warning_counts: dict[str, int]

class SummaryValidator:
    """Validator for battle summaries."""

    def __init__(self, min_turns: int = 3, max_turns: int = 200):
        self.min_turns = min_turns
        self.max_turns = max_turns

    def validate(self, summary: BattleSummary) -> ValidationResult:
        """Validate a single summary."""
        errors = []
        warnings = []

        if not summary.id:
            errors.append("missing_battle_id")

        if summary.stats.total_turns != len(summary.turns):
            errors.append("total_turns_mismatch")

        for i, turn in enumerate(summary.turns):
            expected_turn = i + 1
            if turn.number != expected_turn:
                errors.append(f"turn_mismatch_{i}")
                break

        if summary.winner not in VALID_WINNERS:
            errors.append("invalid_winner")

        for slot in (PLAYER1, PLAYER2):
            player = summary.player(slot)
            if player.team and player.losses > len(player.team):
                errors.append(f"losses_exceed_team_{slot}")

        if len(summary.turns) < self.min_turns:
            warnings.append("too_few_turns")

        if len(summary.turns) > self.max_turns:
            warnings.append("too_many_turns")

        if not summary.winner:
            warnings.append("no_winner")

        if not summary.player1.name or not summary.player2.name:
            warnings.append("missing_player_name")

        if summary.turns and summary.stats.moves_used_count == 0:
            warnings.append("no_moves")

        return ValidationResult(
            battle_id=summary.id,
            valid=len(errors) == 0,
            errors=errors,
            warnings=warnings,
        )

    def validate_file(self, path: Path) -> ValidationReport:
        """Validate all summaries in a JSONL file."""
        results = []

        with open(path, encoding="utf-8") as f:
            for line_no, line in enumerate(f, 1):
                if not line.strip():
                    continue
                try:
                    summary = BattleSummary.model_validate_json(line)
                except (ValidationError, json.JSONDecodeError) as e:
                    logger.warning(f"Unreadable summary on line {line_no} of {path}: {e}")
                    results.append(ValidationResult(
                        battle_id="unknown",
                        valid=False,
                        errors=["parse_error"],
                        warnings=[],
                    ))
                    continue
                results.append(self.validate(summary))

        error_counts: dict[str, int] = {}
        warning_counts: dict[str, int] = {}

        for r in results:
            for e in r.errors:
                error_counts[e] = error_counts.get(e, 0) + 1
            for w in r.warnings:
                warning_counts[w] = warning_counts.get(w, 0) + 1

        return ValidationReport(
            total_battles=len(results),
            valid_battles=sum(1 for r in results if r.valid),
            invalid_battles=sum(1 for r in results if not r.valid),
            error_counts=error_counts,
            warning_counts=warning_counts,
        )
