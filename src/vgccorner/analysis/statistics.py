"""Statistics across many analyzed battles."""
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from pydantic import ValidationError

from .models import BattleSummary

logger = logging.getLogger(__name__)

@dataclass
class DatasetStatistics:
    """Statistics about a collection of battles."""
    total_battles: int = 0
    total_turns: int = 0
    total_moves: int = 0
    total_switches: int = 0
    skipped_records: int = 0

    # Distributions
    turns_per_battle: List[int] = field(default_factory=list)
    move_counts: Dict[str, int] = field(default_factory=dict)
    format_counts: Dict[str, int] = field(default_factory=dict)
    moment_counts: Dict[str, int] = field(default_factory=dict)
    win_by_player: Dict[str, int] = field(default_factory=dict)

    @property
    def avg_turns(self) -> float:
        if not self.turns_per_battle:
            return 0.0
        return sum(self.turns_per_battle) / len(self.turns_per_battle)

    @property
    def unique_moves(self) -> int:
        return len(self.move_counts)

    def to_dict(self) -> dict:
        return {
            "total_battles": self.total_battles,
            "total_turns": self.total_turns,
            "total_moves": self.total_moves,
            "total_switches": self.total_switches,
            "skipped_records": self.skipped_records,
            "avg_turns": self.avg_turns,
            "unique_moves": self.unique_moves,
            "win_by_player": self.win_by_player,
            "formats": self.format_counts,
            "key_moments": self.moment_counts,
            "top_moves": sorted(self.move_counts.items(), key=lambda x: -x[1])[:20],
        }

class StatisticsCollector:
    """Collect statistics from battle summaries."""

    def __init__(self):
        self.stats = DatasetStatistics()

    def process_battle(self, summary: BattleSummary) -> None:
        """Fold a single summary into the running totals."""
        self.stats.total_battles += 1
        self.stats.total_turns += summary.stats.total_turns
        self.stats.turns_per_battle.append(summary.stats.total_turns)
        self.stats.total_moves += summary.stats.moves_used_count
        self.stats.total_switches += summary.stats.switches_count

        if summary.winner:
            self.stats.win_by_player[summary.winner] = self.stats.win_by_player.get(summary.winner, 0) + 1

        label = summary.format or "unknown"
        self.stats.format_counts[label] = self.stats.format_counts.get(label, 0) + 1

        for move_id, count in summary.stats.move_frequency.items():
            self.stats.move_counts[move_id] = self.stats.move_counts.get(move_id, 0) + count

        for moment in summary.key_moments:
            key = moment.moment_type.value
            self.stats.moment_counts[key] = self.stats.moment_counts.get(key, 0) + 1

    def process_file(self, path: Path) -> DatasetStatistics:
        """Process all summaries in a JSONL file."""
        with open(path, encoding="utf-8") as f:
            for line in f:
                if not line.strip():
                    continue
                try:
                    summary = BattleSummary.model_validate_json(line)
                except (ValidationError, json.JSONDecodeError) as e:
                    logger.warning(f"Skipping unreadable summary in {path}: {e}")
                    self.stats.skipped_records += 1
                    continue
                self.process_battle(summary)
        return self.stats

    def save_report(self, path: Path) -> None:
        """Save statistics report to JSON."""
        path.write_text(json.dumps(self.stats.to_dict(), indent=2))
