"""Detection of notable battle events."""
from .models import KeyMoment, MomentType, Significance


class KeyMomentDetector:
    """Collects key moments as events are dispatched."""

    def __init__(self, big_hit_threshold: float = 50.0):
        self.big_hit_threshold = big_hit_threshold
        self.moments: list[KeyMoment] = []

    def on_faint(self, turn: int, player: str, combatant: str, from_full: bool = False) -> KeyMoment:
        """Record a knockout."""
        if from_full:
            description = f"{combatant} ({player}) was knocked out from full health"
        else:
            description = f"{combatant} ({player}) was knocked out"
        return self._add(turn, MomentType.KO, description, Significance.HIGH)

    def on_crit(self, turn: int, player: str, combatant: str) -> KeyMoment:
        description = f"Critical hit on {combatant} ({player})"
        return self._add(turn, MomentType.CRITICAL_HIT, description, Significance.MEDIUM)

    def on_damage(self, turn: int, player: str, combatant: str, amount: float, remaining: float) -> None:
        """Record a large hit that left its target standing."""
        if remaining <= 0.0 or amount < self.big_hit_threshold:
            return
        description = f"{combatant} ({player}) lost {amount:.0f}% HP in one hit"
        self._add(turn, MomentType.BIG_HIT, description, Significance.MEDIUM)

    def _add(self, turn: int, moment_type: MomentType, description: str,
             significance: Significance) -> KeyMoment:
        moment = KeyMoment(
            turn_number=turn,
            moment_type=moment_type,
            description=description,
            significance=significance,
        )
        self.moments.append(moment)
        return moment
