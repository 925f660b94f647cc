"""Assemble recorded actions into numbered turns."""
import logging
from typing import Optional

from .models import Action, Turn

logger = logging.getLogger(__name__)


class TurnAssembler:
    """Buffers actions into the open turn and closes turns on boundaries.

    Turns are numbered contiguously from 1. Actions recorded before the
    first boundary are held and become the first actions of turn 1. A
    boundary only advances when its declared number is above every number
    declared so far.
    """

    def __init__(self):
        self.turns: list[Turn] = []
        self.current: Optional[int] = None
        self._actions: list[Action] = []
        self.last_declared = 0

    @property
    def is_open(self) -> bool:
        return self.current is not None

    @property
    def turn_number(self) -> int:
        """Number of the turn the next action will land in."""
        if self.current is not None:
            return self.current
        return len(self.turns) + 1

    def advances(self, declared: int) -> bool:
        """Whether a boundary declaring this number opens a new turn."""
        return declared > self.last_declared

    def open_turn(self, declared: Optional[int] = None) -> int:
        """Close the open turn, if any, and open the next one."""
        self.close_turn()
        number = len(self.turns) + 1
        if declared is not None and declared != number:
            logger.debug(f"Turn marker declared {declared}, numbering it {number}")
        if declared is not None:
            self.last_declared = max(self.last_declared, declared)
        self.current = number
        return number

    def close_turn(self) -> None:
        if self.current is None:
            return
        self.turns.append(Turn(number=self.current, actions=tuple(self._actions)))
        self._actions = []
        self.current = None

    def record(self, action: Action) -> int:
        """Append an action to the open turn (or the pre-turn buffer)."""
        self._actions.append(action)
        return len(self._actions) - 1

    def get(self, index: int) -> Action:
        return self._actions[index]

    def replace(self, index: int, action: Action) -> None:
        self._actions[index] = action

    def finish(self) -> list[Turn]:
        """Close out the battle and return every turn."""
        if self.current is None and self._actions:
            self.current = len(self.turns) + 1
        self.close_turn()
        return self.turns
