#!/usr/bin/env python3
"""
Interactive CLI for playing backgammon hot-seat in a terminal.
"""

import argparse
import logging
import sys

from gym_backgammon.envs.actions import (
    EndTurn,
    MakeMove,
    NewGame,
    RollDice,
    SelectPoint,
    UndoMove,
)
from gym_backgammon.envs.backgammon import BAR, GAME_OVER, OFF, ROLLING, player_name, render_board
from gym_backgammon.game_manager import BackgammonGameManager

QUIT = 'quit'

HELP = """Commands:
  r            roll the dice
  s <n|bar>    select a point (or the bar) to list its moves
  <index>      play the listed move with that index
  u            undo this turn's moves
  e            end the turn
  n            new game
  q            quit"""


def describe_move(move):
    origin = 'bar' if move.origin == BAR else f"point {move.origin}"
    destination = 'bear off' if move.destination == OFF else f"point {move.destination}"
    hit = ' (hit)' if move.hit else ''
    return f"From {origin} to {destination} with {move.die}{hit}"


def parse_command(text, legal_moves):
    """
    Turn one line of input into an action, QUIT, or None when the line is
    not understood.
    """
    words = text.strip().lower().split()
    if not words:
        return None
    command = words[0]

    if command in ('q', 'quit'):
        return QUIT
    if command in ('r', 'roll'):
        return RollDice()
    if command in ('u', 'undo'):
        return UndoMove()
    if command in ('e', 'end'):
        return EndTurn()
    if command in ('n', 'new'):
        return NewGame()
    if command in ('s', 'select'):
        if len(words) != 2:
            return None
        if words[1] == BAR:
            return SelectPoint(BAR)
        try:
            return SelectPoint(int(words[1]))
        except ValueError:
            return None

    try:
        index = int(command)
    except ValueError:
        return None
    if 0 <= index < len(legal_moves):
        return MakeMove(legal_moves[index])
    return None


def main(argv=None):
    """Run the interactive CLI for backgammon."""
    parser = argparse.ArgumentParser(description='Play backgammon in the terminal (two players, one keyboard)')
    parser.add_argument('--seed', type=int, default=None, help='Seed for the dice')
    parser.add_argument('--log-level', type=str, default='WARNING',
                        help='Logging level (DEBUG, INFO, WARNING, ...)')
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING),
                        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    manager = BackgammonGameManager(seed=args.seed, debug=True)
    print("=== Backgammon CLI ===")
    print(HELP)

    while True:
        state = manager.state
        print()
        print(render_board(state))
        if state.message:
            print(f"\n{state.message}")
            state = manager.clear_message()

        if state.phase == GAME_OVER:
            print(f"\nGame over! {player_name(state.winner).capitalize()} wins!")
        elif state.phase != ROLLING:
            print("\nValid moves:")
            for i, move in enumerate(state.legal_moves):
                print(f"[{i}] {describe_move(move)}")

        try:
            line = input(f"\n{player_name(state.current_player)}> ")
        except EOFError:
            break

        action = parse_command(line, state.legal_moves)
        if action == QUIT:
            print("Exiting the game. Thanks for playing!")
            break
        if action is None:
            print("Unknown command.")
            print(HELP)
            continue

        if manager.dispatch(action) is state:
            print("That action is not available right now.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
