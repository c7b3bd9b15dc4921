from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from gym_backgammon.envs.errors import InvariantViolation


@dataclass(frozen=True)
class DiceState:
    """
    values:    the rolled pair, or None before rolling
    remaining: face values still available this turn (4 copies for doubles)
    rolled:    whether the dice have been rolled this turn
    """
    values: Optional[Tuple[int, int]] = None
    remaining: Tuple[int, ...] = ()
    rolled: bool = False


def initial_dice_state():
    return DiceState()


def dice_pool(values):
    """Consumable pool derived from a rolled pair; doubles give four moves."""
    die1, die2 = values
    if die1 == die2:
        return (die1,) * 4
    return (die1, die2)


def roll_dice(rng=None):
    """
    Roll two dice. If they are doubles, we get 4 moves.

    rng is a numpy Generator; a fresh unseeded one is used when omitted.
    """
    if rng is None:
        rng = np.random.default_rng()
    die1 = int(rng.integers(1, 7))
    die2 = int(rng.integers(1, 7))
    return DiceState(values=(die1, die2), remaining=dice_pool((die1, die2)), rolled=True)


def use_die(dice, value):
    """Remove exactly one occurrence of value from the remaining pool."""
    if value not in dice.remaining:
        raise InvariantViolation(
            f"Die value {value} not available in remaining: {list(dice.remaining)}"
        )
    remaining = list(dice.remaining)
    remaining.remove(value)
    return DiceState(values=dice.values, remaining=tuple(remaining), rolled=dice.rolled)


def distinct_remaining(dice):
    # dict keeps first-seen order
    return list(dict.fromkeys(dice.remaining))


def is_doubles(dice):
    return dice.values is not None and dice.values[0] == dice.values[1]
