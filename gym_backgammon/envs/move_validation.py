import numpy as np

from gym_backgammon.envs.backgammon import (
    BAR,
    OFF,
    TOTAL_POINTS,
    WHITE,
    bar_entry_point,
    home_board,
    move_direction,
)


def is_blocked(points, point, player):
    """A point is blocked for player if it holds 2+ opponent checkers."""
    return points[point - 1] * player <= -2


def can_enter_from_bar(points, player, die):
    # White enters on 25-die (die 1 = point 24), Black on die (die 1 = point 1)
    return not is_blocked(points, bar_entry_point(player, die), player)


def can_bear_off(state, player):
    """All of player's checkers are in the home board and none on the bar."""
    if state.bar(player) > 0:
        return False
    start, end = home_board(player)
    owned = state.points * player > 0
    outside = np.concatenate((owned[:start - 1], owned[end:]))
    return not outside.any()


def distance_to_off(player, point):
    return point if player == WHITE else 25 - point


def _is_rearmost(state, player, point):
    """No own checker sits farther from off than the one on point."""
    owned = state.points * player > 0
    if player == WHITE:
        return not owned[point:].any()
    return not owned[:point - 1].any()


def is_valid_move(state, origin, destination, die):
    """
    Check whether the current player may move a checker from origin to
    destination using die. Returns a bool; illegal moves are ordinary data.
    """
    player = state.current_player
    points = state.points

    if die not in state.dice.remaining:
        return False

    # Checkers on the bar must enter first
    if state.bar(player) > 0 and origin != BAR:
        return False

    if origin == BAR:
        if state.bar(player) == 0 or destination == OFF:
            return False
        if destination != bar_entry_point(player, die):
            return False
        return can_enter_from_bar(points, player, die)

    if not 1 <= origin <= TOTAL_POINTS or points[origin - 1] * player <= 0:
        return False

    if destination == OFF:
        if not can_bear_off(state, player):
            return False
        distance = distance_to_off(player, origin)
        if die == distance:
            return True
        if die > distance:
            return _is_rearmost(state, player, origin)
        return False

    if destination != origin + move_direction(player) * die:
        return False
    if not 1 <= destination <= TOTAL_POINTS:
        return False
    return not is_blocked(points, destination, player)
