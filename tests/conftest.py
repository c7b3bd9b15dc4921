from dataclasses import replace

import numpy as np
import pytest

from gym_backgammon.envs.backgammon import CHECKERS_PER_PLAYER, MOVING, WHITE, GameState
from gym_backgammon.envs.dice import DiceState, dice_pool
from gym_backgammon.envs.forced_moves import get_required_moves


class ScriptedRng:
    """Stands in for a numpy Generator, returning preset die faces in order."""

    def __init__(self, values):
        self.values = list(values)

    def integers(self, low, high):
        return self.values.pop(0)


def build_state(white=None, black=None, bar_white=0, bar_black=0,
                current_player=WHITE, dice=(3, 4), remaining=None, phase=MOVING, **kwargs):
    """
    Build a GameState from {point: count} dicts. Checkers not placed on the
    board or bar are counted as borne off so every player still has 15.
    In the moving phase the required moves are exposed unless legal_moves
    is given.
    """
    white = white or {}
    black = black or {}
    points = np.zeros(24, dtype=np.int32)
    for point, count in white.items():
        points[point - 1] = count
    for point, count in black.items():
        points[point - 1] = -count

    if dice is None:
        dice_state = DiceState()
    else:
        dice_state = DiceState(
            values=tuple(dice),
            remaining=tuple(remaining) if remaining is not None else dice_pool(dice),
            rolled=True,
        )

    kwargs.setdefault('borne_off_white', CHECKERS_PER_PLAYER - sum(white.values()) - bar_white)
    kwargs.setdefault('borne_off_black', CHECKERS_PER_PLAYER - sum(black.values()) - bar_black)
    state = GameState(
        points=points,
        bar_white=bar_white,
        bar_black=bar_black,
        current_player=current_player,
        dice=dice_state,
        phase=phase,
        **kwargs,
    )
    if phase == MOVING and "legal_moves" not in kwargs:
        state = replace(state, legal_moves=tuple(get_required_moves(state)))
    return state


@pytest.fixture
def make_state():
    return build_state


@pytest.fixture
def scripted_rng():
    return ScriptedRng
