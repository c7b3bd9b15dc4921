"""
Actions a presentation layer can submit, one per call.
Every action type must have a handler in transitions.ACTION_HANDLERS.
"""

from dataclasses import dataclass
from typing import Union

from gym_backgammon.envs.backgammon import Move, Origin


@dataclass(frozen=True)
class RollDice:
    pass


@dataclass(frozen=True)
class SelectPoint:
    point: Origin


@dataclass(frozen=True)
class MakeMove:
    move: Move


@dataclass(frozen=True)
class EndTurn:
    pass


@dataclass(frozen=True)
class UndoMove:
    pass


@dataclass(frozen=True)
class NewGame:
    pass


@dataclass(frozen=True)
class ClearMessage:
    pass


GameAction = Union[RollDice, SelectPoint, MakeMove, EndTurn, UndoMove, NewGame, ClearMessage]

ALL_ACTIONS = (RollDice, SelectPoint, MakeMove, EndTurn, UndoMove, NewGame, ClearMessage)
