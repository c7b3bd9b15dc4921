"""
Forced move rules.

Backgammon requires maximal dice usage: both dice must be played if any
ordering allows it, and when only one die can be played it must be the
higher one. Move order changes what is playable afterwards, so the legal
set is found by searching every ordering of the remaining dice.
"""

import logging
from dataclasses import replace

from gym_backgammon.envs.backgammon import relocate_checker
from gym_backgammon.envs.dice import use_die
from gym_backgammon.envs.move_calculation import calculate_all_moves

logger = logging.getLogger(__name__)


def simulate_move(state, move):
    """
    Hypothetical successor after move: checker relocated, hit checker on the
    bar, die consumed. Turn history, selection and phase are left alone.
    """
    return replace(relocate_checker(state, move), dice=use_die(state.dice, move.die))


def _position_key(state):
    return (
        state.points.tobytes(),
        state.bar_white,
        state.bar_black,
        state.borne_off_white,
        state.borne_off_black,
        state.current_player,
        tuple(sorted(state.dice.remaining)),
    )


def _max_dice_usable(state, memo):
    if not state.dice.remaining:
        return 0

    key = _position_key(state)
    if key in memo:
        return memo[key]

    moves = calculate_all_moves(state)
    if not moves:
        memo[key] = 0
        return 0

    ceiling = len(state.dice.remaining)
    max_usable = 1  # At least one move is possible
    for move in moves:
        usable = 1 + _max_dice_usable(simulate_move(state, move), memo)
        if usable > max_usable:
            max_usable = usable
        if max_usable == ceiling:
            break

    memo[key] = max_usable
    return max_usable


def max_dice_usable(state):
    """Largest number of remaining dice that some sequence of moves can play."""
    return _max_dice_usable(state, {})


def can_use_both_dice(state):
    """True if some first move leaves a second move available."""
    for first_move in calculate_all_moves(state):
        if calculate_all_moves(simulate_move(state, first_move)):
            return True
    return False


def get_required_moves(state):
    """
    Single-step moves allowed under the forced move rules:
      1. Must use as many dice as possible
      2. If only one die can be used, must use the higher one
      3. Moves that prevent using the maximum number of dice are filtered out
    """
    all_moves = calculate_all_moves(state)
    if not all_moves or not state.dice.remaining:
        return []

    memo = {}
    max_dice = _max_dice_usable(state, memo)

    if max_dice == 1:
        highest_usable_die = max(move.die for move in all_moves)
        return [move for move in all_moves if move.die == highest_usable_die]

    required = [
        move for move in all_moves
        if 1 + _max_dice_usable(simulate_move(state, move), memo) == max_dice
    ]
    if not required:
        logger.warning(f"No move preserves {max_dice} dice usable, falling back to all {len(all_moves)} moves")
        return all_moves

    logger.debug(f"Required moves ({max_dice} dice usable): {required}")
    return required
