from gym_backgammon.envs.actions import (
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
    BLACK,
    GAME_OVER,
    MOVING,
    OFF,
    ROLLING,
    WHITE,
    GameState,
    Move,
    create_initial_state,
)
from gym_backgammon.envs.backgammon_env import BackgammonEnv
from gym_backgammon.envs.errors import InvariantViolation
from gym_backgammon.envs.forced_moves import get_required_moves
from gym_backgammon.envs.transitions import apply_action
