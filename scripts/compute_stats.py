#!/usr/bin/env python
"""Compute statistics across analyzed battles."""
import argparse
from pathlib import Path

from vgccorner.analysis.statistics import StatisticsCollector

def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("input", help="Battle summaries JSONL")
    parser.add_argument("--output", help="Output JSON file")
    args = parser.parse_args()

    collector = StatisticsCollector()
    stats = collector.process_file(Path(args.input))

    print(f"\n=== Battle Statistics ===")
    print(f"Total battles: {stats.total_battles}")
    print(f"Total turns: {stats.total_turns}")
    print(f"Average turns per battle: {stats.avg_turns:.1f}")
    print(f"Unique moves: {stats.unique_moves}")
    if stats.skipped_records:
        print(f"Skipped records: {stats.skipped_records}")

    print(f"\nWins by slot:")
    for slot, count in sorted(stats.win_by_player.items()):
        print(f"  {slot}: {count}")

    print(f"\nTop 10 Moves:")
    for move, count in sorted(stats.move_counts.items(), key=lambda x: -x[1])[:10]:
        print(f"  {move}: {count}")

    print(f"\nKey moments:")
    for moment_type, count in sorted(stats.moment_counts.items(), key=lambda x: -x[1]):
        print(f"  {moment_type}: {count}")

    if args.output:
        collector.save_report(Path(args.output))
        print(f"\nSaved full report to {args.output}")

if __name__ == "__main__":
    main()
