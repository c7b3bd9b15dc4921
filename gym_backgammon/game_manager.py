import logging
import threading
from collections import defaultdict
from typing import Dict, List, Optional, Tuple

import numpy as np

from gym_backgammon.envs.actions import (
    ClearMessage,
    EndTurn,
    GameAction,
    MakeMove,
    NewGame,
    RollDice,
    SelectPoint,
    UndoMove,
)
from gym_backgammon.envs.backgammon import (
    GAME_OVER,
    GameState,
    Move,
    Origin,
    check_invariants,
    create_initial_state,
    player_name,
)
from gym_backgammon.envs.transitions import apply_action

logger = logging.getLogger(__name__)


class BackgammonGameManager:
    """
    Holds the current game state and applies actions to it one at a time.
    Acts as the single dispatcher between a presentation layer and the pure
    turn state machine.
    """

    def __init__(self, rng: Optional[np.random.Generator] = None, seed: Optional[int] = None,
                 debug: bool = False):
        """
        Initialize a new game manager

        Args:
            rng: numpy Generator used for dice rolls
            seed: seed for a fresh Generator when rng is not given
            debug: check state invariants after every action
        """
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.debug = debug
        self.state: GameState = create_initial_state()
        self._lock = threading.Lock()

    def dispatch(self, action: GameAction) -> GameState:
        """
        Apply one action and store the resulting state

        Args:
            action: one of the actions from gym_backgammon.envs.actions

        Returns:
            GameState: the new current state
        """
        with self._lock:
            previous = self.state
            new_state = apply_action(previous, action, self.rng)
            if self.debug:
                check_invariants(new_state)
            self.state = new_state

        if new_state is previous:
            logger.debug(f"{type(action).__name__} ignored in phase {previous.phase}")
        else:
            logger.info(
                f"{type(action).__name__}: {player_name(previous.current_player)} -> "
                f"{player_name(new_state.current_player)}, phase {new_state.phase}, "
                f"dice {list(new_state.dice.remaining)}"
            )
            if new_state.message and new_state.message != previous.message:
                logger.info(new_state.message)
        return new_state

    def roll_dice(self) -> GameState:
        return self.dispatch(RollDice())

    def select_point(self, point: Origin) -> GameState:
        return self.dispatch(SelectPoint(point))

    def make_move(self, move: Move) -> GameState:
        return self.dispatch(MakeMove(move))

    def end_turn(self) -> GameState:
        return self.dispatch(EndTurn())

    def undo_move(self) -> GameState:
        return self.dispatch(UndoMove())

    def new_game(self) -> GameState:
        return self.dispatch(NewGame())

    def clear_message(self) -> GameState:
        return self.dispatch(ClearMessage())

    def valid_moves_by_origin(self) -> Dict[Origin, List[Move]]:
        """
        Organize the currently exposed legal moves by origin

        Returns:
            dict: origin -> list of moves from that origin
        """
        by_origin = defaultdict(list)
        for move in self.state.legal_moves:
            by_origin[move.origin].append(move)
        return dict(by_origin)

    def is_game_over(self) -> Tuple[bool, Optional[str]]:
        """
        Check if the game is over

        Returns:
            tuple: (is_over, winner name or None)
        """
        if self.state.phase == GAME_OVER:
            return True, player_name(self.state.winner)
        return False, None
