#!/usr/bin/env python
"""Analyze downloaded replays into battle summaries."""
import argparse
import json
import logging
from pathlib import Path
from tqdm import tqdm

from dotenv import load_dotenv

from vgccorner.analysis import BattleLogParser, LogTooLargeError

def main():
    load_dotenv()

    parser = argparse.ArgumentParser()
    parser.add_argument("input", help="Replays JSONL file")
    parser.add_argument("--output", help="Output JSONL file")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger("parse_replays")

    input_path = Path(args.input)
    output_path = Path(args.output) if args.output else input_path.with_suffix(".summaries.jsonl")

    battle_parser = BattleLogParser()
    success = 0
    failed = 0

    with open(input_path, encoding="utf-8") as f_in, open(output_path, "w", encoding="utf-8") as f_out:
        for line in tqdm(f_in, desc="Parsing"):
            if not line.strip():
                continue
            replay = json.loads(line)
            metadata = {
                "replay_id": replay.get("id"),
                "format": replay.get("format"),
                "is_private": bool(replay.get("private", False)),
            }
            try:
                summary = battle_parser.parse(replay.get("log", ""), metadata=metadata)
            except LogTooLargeError as e:
                logger.warning(f"Skipping {replay.get('id', 'unknown')}: {e}")
                failed += 1
                continue

            f_out.write(summary.model_dump_json() + "\n")
            success += 1

    print(f"Parsed {success} battles, {failed} failed")

if __name__ == "__main__":
    main()
