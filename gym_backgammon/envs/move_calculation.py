from gym_backgammon.envs.backgammon import (
    BAR,
    OFF,
    TOTAL_POINTS,
    WHITE,
    Move,
    bar_entry_point,
    move_direction,
)
from gym_backgammon.envs.dice import distinct_remaining
from gym_backgammon.envs.move_validation import is_valid_move


def is_hit(state, destination):
    """Landing on destination would hit a lone opposing checker."""
    if destination == OFF or not 1 <= destination <= TOTAL_POINTS:
        return False
    return state.points[destination - 1] * state.current_player == -1


def calculate_destination(origin, die, player):
    """
    Where a checker from origin lands with die: a point, OFF when it passes
    the player's edge of the board, or None when the step leaves the board
    on the other side.
    """
    if origin == BAR:
        return bar_entry_point(player, die)

    to = origin + move_direction(player) * die
    if player == WHITE and to < 1:
        return OFF
    if player != WHITE and to > TOTAL_POINTS:
        return OFF
    if not 1 <= to <= TOTAL_POINTS:
        return None
    return to


def calculate_valid_moves(state, origin):
    """All single-step moves from origin, one per reachable destination."""
    player = state.current_player

    if origin == BAR:
        if state.bar(player) == 0:
            return []
    else:
        if not 1 <= origin <= TOTAL_POINTS or state.points[origin - 1] * player <= 0:
            return []
        # A checker on the bar pins every board checker
        if state.bar(player) > 0:
            return []

    moves = []
    seen_destinations = set()
    for die in distinct_remaining(state.dice):
        to = calculate_destination(origin, die, player)
        if to is None or to in seen_destinations:
            continue
        if is_valid_move(state, origin, to, die):
            seen_destinations.add(to)
            moves.append(Move(origin, to, die, is_hit(state, to)))
    return moves


def calculate_all_moves(state):
    """Every single-step move for the current player."""
    if state.bar(state.current_player) > 0:
        return calculate_valid_moves(state, BAR)

    moves = []
    for point in state.owned_points(state.current_player):
        moves.extend(calculate_valid_moves(state, point))
    return moves
