#!/usr/bin/env python
"""Validate analyzed battle summaries."""
import argparse
from pathlib import Path

from vgccorner.analysis.validation import SummaryValidator

def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("input", help="Battle summaries JSONL")
    parser.add_argument("--min-turns", type=int, default=3)
    parser.add_argument("--max-turns", type=int, default=200)
    args = parser.parse_args()

    validator = SummaryValidator(min_turns=args.min_turns, max_turns=args.max_turns)
    report = validator.validate_file(Path(args.input))

    print(f"\n=== Validation Report ===")
    print(f"Total battles: {report.total_battles}")
    if report.total_battles:
        print(f"Valid battles: {report.valid_battles} ({100*report.valid_battles/report.total_battles:.1f}%)")
    print(f"Invalid battles: {report.invalid_battles}")

    if report.error_counts:
        print(f"\nErrors:")
        for error, count in sorted(report.error_counts.items(), key=lambda x: -x[1]):
            print(f"  {error}: {count}")

    if report.warning_counts:
        print(f"\nWarnings:")
        for warning, count in sorted(report.warning_counts.items(), key=lambda x: -x[1]):
            print(f"  {warning}: {count}")

if __name__ == "__main__":
    main()
