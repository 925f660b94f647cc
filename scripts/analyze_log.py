#!/usr/bin/env python
"""Analyze a single battle log file or replay and print the summary as JSON."""
import argparse
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

from vgccorner.analysis import parse_showdown_log
from vgccorner.analysis.records import to_payload
from vgccorner.data.replays import ReplayClient

def main():
    load_dotenv()

    parser = argparse.ArgumentParser(description="Analyze a Showdown battle log")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", help="Path to a raw battle log")
    source.add_argument("--replay", help="Replay ID or replay URL")
    parser.add_argument("--private", action="store_true", help="Mark the battle as private")
    parser.add_argument("--records", action="store_true", help="Print storage rows instead of the summary")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)

    if args.file:
        raw_log = Path(args.file).read_text(encoding="utf-8")
        metadata = {"source": args.file}
    else:
        replay = ReplayClient().get_replay(args.replay)
        raw_log = replay.get("log", "")
        metadata = {"replay_id": replay.get("id"), "format": replay.get("format")}
    metadata["is_private"] = args.private

    summary = parse_showdown_log(raw_log, metadata=metadata)

    if args.records:
        payload = to_payload(summary, battle_log=raw_log, is_private=args.private)
        print(json.dumps(payload, indent=2, default=str))
    else:
        print(summary.model_dump_json(indent=2))

if __name__ == "__main__":
    main()
