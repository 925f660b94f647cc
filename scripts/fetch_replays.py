#!/usr/bin/env python
"""Fetch a list of replays into a JSONL file for parse_replays.py."""
import argparse
import json
import logging
from pathlib import Path

from dotenv import load_dotenv
from tqdm import tqdm

from vgccorner.config import config
from vgccorner.data.replays import ReplayClient, ReplayClientConfig

def main():
    load_dotenv()

    parser = argparse.ArgumentParser(description="Fetch Pokemon Showdown replays by ID or URL")
    parser.add_argument("references", help="Text file with one replay ID or URL per line")
    parser.add_argument("--output", default=f"{config.data.raw_data_dir}/replays.jsonl", help="Output JSONL file")
    parser.add_argument("--delay", type=float, default=config.data.replay_delay, help="Seconds between requests")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)

    references = [
        line.strip() for line in Path(args.references).read_text(encoding="utf-8").splitlines()
        if line.strip() and not line.startswith("#")
    ]

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    client = ReplayClient(ReplayClientConfig(delay=args.delay))
    fetched = 0
    with open(output_path, "a", encoding="utf-8") as f:
        for replay in tqdm(client.fetch_replays(references), total=len(references), desc="Fetching"):
            f.write(json.dumps(replay) + "\n")
            fetched += 1

    print(f"Fetched {fetched}/{len(references)} replays to {output_path}")

if __name__ == "__main__":
    main()
