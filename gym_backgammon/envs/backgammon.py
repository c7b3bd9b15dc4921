'''
Backgammon Rules - Short:
    1. Setup: White has 2 on 24, 5 on 13, 3 on 8, 5 on 6. Black mirrors: 2 on 1, 5 on 12, 3 on 17, 5 on 19.
    2. Movement: White moves 24 -> 1 (home 1-6), Black moves 1 -> 24 (home 19-24), then both bear off.
    3. Turns: Roll 2 dice and move a checker by each value. Doubles are played four times.
    4. Blocking: A point with 2+ opposing checkers cannot be landed on. A lone opposing checker (blot) is hit and sent to the bar.
    5. Bar: Checkers on the bar must re-enter in the opponent's home board before any other move.
    6. Forced moves: Use both dice if any ordering allows it; if only one die can be used, use the higher one.
    7. Bearing Off: Once all your checkers are home, bear off with the exact roll, or a higher roll from the rearmost checker.
    8. Ending: The first player to bear off all 15 checkers wins.
'''

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple, Union

import numpy as np

from gym_backgammon.envs.dice import DiceState, dice_pool, initial_dice_state
from gym_backgammon.envs.errors import InvariantViolation

TOTAL_POINTS = 24
CHECKERS_PER_PLAYER = 15

WHITE = 1
BLACK = -1
PLAYER_NAMES = {WHITE: 'white', BLACK: 'black'}

BAR = 'bar'
OFF = 'off'

ROLLING = 'rolling'
MOVING = 'moving'
GAME_OVER = 'gameOver'
PHASES = (ROLLING, MOVING, GAME_OVER)

# (point, player, count); points are 1-indexed
INITIAL_SETUP = (
    (24, WHITE, 2),
    (13, WHITE, 5),
    (8, WHITE, 3),
    (6, WHITE, 5),
    (1, BLACK, 2),
    (12, BLACK, 5),
    (17, BLACK, 3),
    (19, BLACK, 5),
)

Origin = Union[int, str]
Destination = Union[int, str]


def opponent(player):
    return -player


def player_name(player):
    return PLAYER_NAMES[player]


def move_direction(player):
    """White moves from higher to lower points, Black from lower to higher."""
    return -1 if player == WHITE else 1


def home_board(player):
    """(start, end) of the six-point range a player bears off from."""
    return (1, 6) if player == WHITE else (19, 24)


def bar_entry_point(player, die):
    return 25 - die if player == WHITE else die


def make_points(points):
    """Read-only int32 copy of a 24-slot signed board."""
    board = np.array(points, dtype=np.int32)
    if board.shape != (TOTAL_POINTS,):
        raise ValueError(f"Board must have {TOTAL_POINTS} points, got shape {board.shape}")
    board.flags.writeable = False
    return board


def point_owner(points, point):
    """WHITE, BLACK or None for an empty point."""
    value = points[point - 1]
    if value > 0:
        return WHITE
    if value < 0:
        return BLACK
    return None


def point_count(points, point):
    return abs(int(points[point - 1]))


@dataclass(frozen=True)
class Move:
    """
    A single checker step.

    origin:      1-24, or BAR for re-entry
    destination: 1-24, or OFF for bearing off
    die:         the die value consumed
    hit:         True when landing on a lone opposing checker
    """
    origin: Origin
    destination: Destination
    die: int
    hit: bool = False


@dataclass(frozen=True, eq=False)
class TurnSnapshot:
    """Board and dice at the start of the current turn, kept for undo."""
    points: np.ndarray
    bar_white: int
    bar_black: int
    borne_off_white: int
    borne_off_black: int
    dice: DiceState


@dataclass(frozen=True, eq=False)
class GameState:
    """
    Immutable game state. points holds signed checker counts, index 0 is
    point 1: positive counts are White's checkers, negative counts Black's.
    """
    points: np.ndarray
    bar_white: int = 0
    bar_black: int = 0
    borne_off_white: int = 0
    borne_off_black: int = 0
    current_player: int = WHITE
    dice: DiceState = field(default_factory=initial_dice_state)
    phase: str = ROLLING
    winner: Optional[int] = None
    selected: Optional[Origin] = None
    legal_moves: Tuple[Move, ...] = ()
    turn_moves: Tuple[Move, ...] = ()
    message: Optional[str] = None
    snapshot: Optional[TurnSnapshot] = None

    def __post_init__(self):
        if not isinstance(self.points, np.ndarray) or self.points.flags.writeable:
            object.__setattr__(self, 'points', make_points(self.points))

    def bar(self, player):
        return self.bar_white if player == WHITE else self.bar_black

    def borne_off(self, player):
        return self.borne_off_white if player == WHITE else self.borne_off_black

    def on_board(self, player):
        """Number of player's checkers on the 24 points."""
        return int(np.abs(self.points[self.points * player > 0]).sum())

    def owned_points(self, player):
        """Ascending point numbers holding at least one of player's checkers."""
        return [int(i) + 1 for i in np.flatnonzero(self.points * player > 0)]

    def take_snapshot(self):
        return TurnSnapshot(
            points=make_points(self.points),
            bar_white=self.bar_white,
            bar_black=self.bar_black,
            borne_off_white=self.borne_off_white,
            borne_off_black=self.borne_off_black,
            dice=self.dice,
        )


def create_initial_points():
    points = np.zeros(TOTAL_POINTS, dtype=np.int32)
    for point, player, count in INITIAL_SETUP:
        points[point - 1] = player * count
    return make_points(points)


def create_initial_state():
    """Canonical starting layout, White to roll."""
    return GameState(points=create_initial_points())


def relocate_checker(state, move):
    """
    Move one of the current player's checkers as described by move.
    A hit sends the lone opposing checker to the bar. Dice are not touched.
    """
    player = state.current_player
    points = state.points.copy()
    bar = {WHITE: state.bar_white, BLACK: state.bar_black}
    borne_off = {WHITE: state.borne_off_white, BLACK: state.borne_off_black}

    # Remove checker from origin
    if move.origin == BAR:
        bar[player] -= 1
    else:
        points[move.origin - 1] -= player

    # Add checker to destination
    if move.destination == OFF:
        borne_off[player] += 1
    else:
        if move.hit:
            bar[opponent(player)] += 1
            points[move.destination - 1] = 0
        points[move.destination - 1] += player

    return replace(
        state,
        points=make_points(points),
        bar_white=bar[WHITE],
        bar_black=bar[BLACK],
        borne_off_white=borne_off[WHITE],
        borne_off_black=borne_off[BLACK],
    )


def check_invariants(state):
    """Raise InvariantViolation if state breaks any structural rule."""
    for player in (WHITE, BLACK):
        if state.bar(player) < 0 or state.borne_off(player) < 0:
            raise InvariantViolation(f"Negative bar or borne-off count for {player_name(player)}")
        total = state.on_board(player) + state.bar(player) + state.borne_off(player)
        if total != CHECKERS_PER_PLAYER:
            raise InvariantViolation(
                f"{player_name(player)} has {total} checkers, expected {CHECKERS_PER_PLAYER}"
            )

    if state.dice.rolled:
        pool = list(dice_pool(state.dice.values))
        for value in state.dice.remaining:
            if value not in pool:
                raise InvariantViolation(
                    f"Remaining dice {list(state.dice.remaining)} not drawn from roll {state.dice.values}"
                )
            pool.remove(value)
    elif state.dice.remaining:
        raise InvariantViolation("Dice remaining without a roll")

    if state.phase not in PHASES:
        raise InvariantViolation(f"Unknown phase {state.phase!r}")
    finished = [p for p in (WHITE, BLACK) if state.borne_off(p) == CHECKERS_PER_PLAYER]
    if state.phase == GAME_OVER:
        if state.winner not in finished:
            raise InvariantViolation(f"Game over without {state.winner!r} bearing off all checkers")
    elif finished or state.winner is not None:
        raise InvariantViolation("Game finished but phase is not gameOver")

    if state.selected is not None:
        if state.phase != MOVING:
            raise InvariantViolation("Selection outside the moving phase")
        player = state.current_player
        if state.selected == BAR:
            movable = state.bar(player) > 0
        else:
            movable = state.points[state.selected - 1] * player > 0
        if not movable:
            raise InvariantViolation(f"Selected origin {state.selected} holds no checker to move")


def render_board(state):
    """
    Human-readable board. Shows White checkers as W, Black as B,
    top row points 13-24, bottom row 12-1 as seen from White's side.
    """
    def cell(point):
        owner = point_owner(state.points, point)
        if owner is None:
            return '  . '
        return f" {'W' if owner == WHITE else 'B'}{point_count(state.points, point):<2d}"

    top = list(range(13, 25))
    bottom = list(range(12, 0, -1))
    lines = [
        ''.join(f"{p:>4d}" for p in top),
        ''.join(cell(p) for p in top),
        '-' * 48,
        ''.join(cell(p) for p in bottom),
        ''.join(f"{p:>4d}" for p in bottom),
        f"Bar: White={state.bar_white}, Black={state.bar_black}",
        f"Borne off: White={state.borne_off_white}, Black={state.borne_off_black}",
        f"To play: {player_name(state.current_player)} ({state.phase})",
    ]
    if state.dice.rolled:
        lines.append(f"Dice: {state.dice.values}, remaining {list(state.dice.remaining)}")
    return '\n'.join(lines)
