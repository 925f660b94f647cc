"""Fetch battle logs from the Pokemon Showdown replay server."""
import time
import logging
from typing import Iterable, Iterator, Optional
from dataclasses import dataclass

import requests

logger = logging.getLogger(__name__)

REPLAY_BASE_URL = "https://replay.pokemonshowdown.com"


@dataclass
class ReplayClientConfig:
    base_url: str = REPLAY_BASE_URL
    timeout: float = 10.0
    # Pause between fetches in a batch
    delay: float = 1.0


def replay_id_from(reference: str, base_url: str = REPLAY_BASE_URL) -> str:
    """Extract a replay ID from an ID or a replay page URL.

    "https://replay.pokemonshowdown.com/gen9vgc2025regh-123?p2" -> "gen9vgc2025regh-123"
    """
    reference = reference.strip()
    if reference.startswith(base_url):
        reference = reference[len(base_url):]
    reference = reference.split("?")[0].split("#")[0].strip("/")
    if reference.endswith(".json") or reference.endswith(".log"):
        reference = reference.rsplit(".", 1)[0]
    return reference


class ReplayClient:
    """Looks up single replays by ID or URL."""

    def __init__(self, config: Optional[ReplayClientConfig] = None):
        self.config = config or ReplayClientConfig()
        self.session = requests.Session()

    def get_replay(self, reference: str) -> dict:
        """Fetch one replay, including its battle log.

        Args:
            reference: Replay ID (e.g. "gen9vgc2025regh-12345678") or replay URL

        Returns:
            Replay data with "id", "format", "players" and "log" keys

        Raises:
            ValueError: if no replay ID can be read from ``reference``
            requests.HTTPError: if the server rejects the lookup
        """
        replay_id = replay_id_from(reference, self.config.base_url)
        if not replay_id:
            raise ValueError(f"Not a replay reference: {reference!r}")

        url = f"{self.config.base_url}/{replay_id}.json"
        response = self.session.get(url, timeout=self.config.timeout)
        response.raise_for_status()
        return response.json()

    def fetch_replays(self, references: Iterable[str]) -> Iterator[dict]:
        """Yield each replay that can be fetched, logging the ones that can't."""
        for i, reference in enumerate(references):
            if i and self.config.delay > 0:
                time.sleep(self.config.delay)
            try:
                yield self.get_replay(reference)
            except (requests.RequestException, ValueError) as e:
                logger.warning(f"Skipping replay {reference!r}: {e}")
