import logging

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from gym_backgammon.envs.actions import MakeMove, RollDice
from gym_backgammon.envs.backgammon import (
    BAR,
    CHECKERS_PER_PLAYER,
    GAME_OVER,
    OFF,
    ROLLING,
    TOTAL_POINTS,
    create_initial_state,
    player_name,
    render_board,
)
from gym_backgammon.envs.transitions import apply_action

"""
Backgammon Environment - Behavior Notes
=======================================

1. Both players act through the same agent interface. The observation
   always includes whose turn it is (obs[29]), the board is NOT rotated.

2. Dice are rolled automatically: at reset and whenever a turn ends.
   A roll with no legal move is skipped by the engine and the next player
   rolls, so step() always hands back a state where someone can move
   (or the game is over).

3. Action Format: a single integer slot(origin) * 26 + slot(destination)
   where slot(bar) = 0, slot(off) = 25 and points 1-24 are themselves.
   The die and hit flag are implied by the current legal moves.

4. Game Termination: the episode ends when a player bears off all 15
   checkers. The reward is +1 for the player who made the final move.
"""

logger = logging.getLogger(__name__)

SLOTS = TOTAL_POINTS + 2
BAR_SLOT = 0
OFF_SLOT = TOTAL_POINTS + 1


def encode_move(move):
    origin = BAR_SLOT if move.origin == BAR else move.origin
    destination = OFF_SLOT if move.destination == OFF else move.destination
    return origin * SLOTS + destination


def decode_action(action):
    """Convert an action index into (origin, destination)."""
    origin, destination = divmod(int(action), SLOTS)
    return (
        BAR if origin == BAR_SLOT else origin,
        OFF if destination == OFF_SLOT else destination,
    )


class BackgammonEnv(gym.Env):
    """
    Gymnasium environment over the backgammon turn state machine. One step
    plays one checker move; dice rolls and turn handover happen inside step().
    """

    metadata = {"render_modes": ["human", "ansi"]}

    def __init__(self, render_mode=None, max_steps=1000, debug=False, max_skips=100):
        super().__init__()
        self.render_mode = render_mode
        self.max_steps = max_steps
        self.debug = debug
        self.max_skips = max_skips

        self.action_space = spaces.Discrete(SLOTS * SLOTS)

        # obs[:24] = signed points, obs[24:26] = bar white/black,
        # obs[26:28] = borne off white/black, obs[28] = dice left, obs[29] = current player
        low = np.array([-CHECKERS_PER_PLAYER] * TOTAL_POINTS + [0, 0, 0, 0, 0, -1], dtype=np.float32)
        high = np.array([CHECKERS_PER_PLAYER] * TOTAL_POINTS + [15, 15, 15, 15, 4, 1], dtype=np.float32)
        self.observation_space = spaces.Box(low=low, high=high, dtype=np.float32)

        self.state = create_initial_state()
        self.steps = 0

    def reset(self, seed=None, options=None):
        super().reset(seed=seed)
        self.state = create_initial_state()
        self.steps = 0
        skipped = self._roll_until_moving()
        return self._get_obs(), self._get_info(skipped_turns=skipped)

    def step(self, action):
        if self.state.phase == GAME_OVER:
            return self._get_obs(), 0.0, True, False, self._get_info()

        self.steps += 1
        truncated = self.steps >= self.max_steps

        move = self._match_move(action)
        if move is None:
            if self.debug:
                logger.debug(f"Invalid action {action} -> {decode_action(action)}, legal: {self.state.legal_moves}")
            # Penalise but keep the game going
            info = self._get_info(invalid_move=True)
            return self._get_obs(), -0.1, False, truncated, info

        mover = self.state.current_player
        self.state = apply_action(self.state, MakeMove(move), self.np_random)

        if self.state.phase == GAME_OVER:
            logger.info(f"{player_name(mover)} won after {self.steps} steps")
            return self._get_obs(), 1.0, True, False, self._get_info(won=True)

        skipped = 0
        if self.state.phase == ROLLING:
            skipped = self._roll_until_moving()
            if self.state.phase == ROLLING:
                truncated = True

        return self._get_obs(), 0.0, False, truncated, self._get_info(skipped_turns=skipped)

    def legal_action_mask(self):
        mask = np.zeros(self.action_space.n, dtype=bool)
        for move in self.state.legal_moves:
            mask[encode_move(move)] = True
        return mask

    def _match_move(self, action):
        if not 0 <= int(action) < self.action_space.n:
            return None
        origin, destination = decode_action(action)
        for move in self.state.legal_moves:
            if move.origin == origin and move.destination == destination:
                return move
        return None

    def _roll_until_moving(self):
        """Roll until someone has a legal move. Returns the number of skipped turns."""
        skipped = 0
        while self.state.phase == ROLLING and skipped < self.max_skips:
            self.state = apply_action(self.state, RollDice(), self.np_random)
            if self.state.phase == ROLLING:
                skipped += 1
                if self.debug:
                    logger.debug(self.state.message)
        return skipped

    def _get_obs(self):
        state = self.state
        obs = np.zeros(shape=(TOTAL_POINTS + 6,), dtype=np.float32)
        obs[:TOTAL_POINTS] = state.points
        obs[24] = state.bar_white
        obs[25] = state.bar_black
        obs[26] = state.borne_off_white
        obs[27] = state.borne_off_black
        obs[28] = len(state.dice.remaining)
        obs[29] = state.current_player
        return obs

    def _get_info(self, **extra):
        info = {
            "dice": list(self.state.dice.remaining),
            "current_player": self.state.current_player,
            "legal_moves": list(self.state.legal_moves),
            "message": self.state.message,
        }
        info.update(extra)
        return info

    def render(self):
        text = render_board(self.state)
        if self.render_mode == "human":
            print(text)
            print()
        elif self.render_mode == "ansi":
            return text

    def close(self):
        pass
