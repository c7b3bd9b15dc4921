"""
Turn state machine.

Each handler maps one immutable GameState plus one action to a new
GameState. Actions arriving in the wrong phase return the state unchanged.

Phases:
    rolling  -> moving    roll with at least one legal move
    rolling  -> rolling   roll with no legal move (turn skipped)
    moving   -> rolling   dice used up, no playable dice left, or EndTurn
    moving   -> gameOver  the mover bears off the 15th checker
"""

import logging
import numbers
from dataclasses import replace

from gym_backgammon.envs.actions import (
    ALL_ACTIONS,
    ClearMessage,
    EndTurn,
    MakeMove,
    NewGame,
    RollDice,
    SelectPoint,
    UndoMove,
)
from gym_backgammon.envs.backgammon import (
    BAR,
    CHECKERS_PER_PLAYER,
    GAME_OVER,
    MOVING,
    ROLLING,
    opponent,
    player_name,
    relocate_checker,
    create_initial_state,
)
from gym_backgammon.envs.dice import initial_dice_state, roll_dice, use_die
from gym_backgammon.envs.forced_moves import get_required_moves
from gym_backgammon.envs.move_calculation import calculate_valid_moves

logger = logging.getLogger(__name__)


def _next_turn(state, message=None):
    """Hand the dice to the other player and forget this turn."""
    return replace(
        state,
        current_player=opponent(state.current_player),
        phase=ROLLING,
        dice=initial_dice_state(),
        selected=None,
        legal_moves=(),
        turn_moves=(),
        snapshot=None,
        message=message,
    )


def handle_roll_dice(state, action, rng=None):
    if state.phase != ROLLING:
        return state

    rolled = replace(state, dice=roll_dice(rng), phase=MOVING)
    required = get_required_moves(rolled)

    if not required:
        die1, die2 = rolled.dice.values
        name = player_name(state.current_player)
        logger.info(f"{name} rolled {die1}-{die2} with no legal move, skipping turn")
        return _next_turn(rolled, message=f"{name} rolled {die1}-{die2} and has no valid moves - turn skipped")

    return replace(
        rolled,
        legal_moves=tuple(required),
        turn_moves=(),
        selected=None,
        message=None,
        snapshot=rolled.take_snapshot(),
    )


def handle_select_point(state, action, rng=None):
    if state.phase != MOVING:
        return state

    point = action.point
    if isinstance(point, numbers.Integral):
        point = int(point)
    required = get_required_moves(state)

    # Deselect if selecting the same point again
    if state.selected == point:
        return replace(state, selected=None, legal_moves=tuple(required))

    player = state.current_player
    if point == BAR:
        if state.bar(player) == 0:
            return state
    else:
        if not isinstance(point, int) or not 1 <= point <= len(state.points):
            return state
        if state.points[point - 1] * player <= 0:
            return state
        if state.bar(player) > 0:
            return state

    point_moves = [move for move in calculate_valid_moves(state, point) if move in required]
    if not point_moves:
        return state

    return replace(state, selected=point, legal_moves=tuple(point_moves))


def handle_make_move(state, action, rng=None):
    if state.phase != MOVING:
        return state

    move = action.move
    if move not in state.legal_moves:
        logger.warning(f"Ignoring move {move}, not among {len(state.legal_moves)} legal moves")
        return state

    player = state.current_player
    moved = relocate_checker(state, move)
    moved = replace(
        moved,
        dice=use_die(state.dice, move.die),
        turn_moves=state.turn_moves + (move,),
        selected=None,
    )

    if moved.borne_off(player) == CHECKERS_PER_PLAYER:
        logger.info(f"{player_name(player)} bore off the last checker and wins")
        return replace(moved, phase=GAME_OVER, winner=player, legal_moves=(), snapshot=None)

    remaining_moves = get_required_moves(moved)
    if not moved.dice.remaining or not remaining_moves:
        # Same transition either way; only the dice-left-over case is reported
        stuck = bool(moved.dice.remaining)
        message = f"{player_name(player)} has no more valid moves" if stuck else None
        return _next_turn(moved, message=message)

    return replace(moved, legal_moves=tuple(remaining_moves))


def handle_end_turn(state, action, rng=None):
    if state.phase != MOVING:
        return state
    return _next_turn(state, message=state.message)


def handle_undo_move(state, action, rng=None):
    if state.phase != MOVING or not state.turn_moves or state.snapshot is None:
        return state

    snapshot = state.snapshot
    restored = replace(
        state,
        points=snapshot.points,
        bar_white=snapshot.bar_white,
        bar_black=snapshot.bar_black,
        borne_off_white=snapshot.borne_off_white,
        borne_off_black=snapshot.borne_off_black,
        dice=snapshot.dice,
        turn_moves=(),
        selected=None,
        snapshot=None,
    )
    return replace(restored, legal_moves=tuple(get_required_moves(restored)))


def handle_new_game(state, action, rng=None):
    return create_initial_state()


def handle_clear_message(state, action, rng=None):
    return replace(state, message=None)


ACTION_HANDLERS = {
    RollDice: handle_roll_dice,
    SelectPoint: handle_select_point,
    MakeMove: handle_make_move,
    EndTurn: handle_end_turn,
    UndoMove: handle_undo_move,
    NewGame: handle_new_game,
    ClearMessage: handle_clear_message,
}

_missing = set(ALL_ACTIONS) - set(ACTION_HANDLERS)
if _missing:
    raise ImportError(f"No handler for actions: {sorted(a.__name__ for a in _missing)}")


def apply_action(state, action, rng=None):
    """
    Return the state after applying action. rng is the numpy Generator used
    for dice rolls.
    """
    handler = ACTION_HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"Unknown action: {action!r}")
    return handler(state, action, rng)
