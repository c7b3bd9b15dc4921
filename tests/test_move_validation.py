import numpy as np

from gym_backgammon.envs.backgammon import BAR, BLACK, OFF, WHITE, create_initial_points
from gym_backgammon.envs.move_validation import (
    can_bear_off,
    can_enter_from_bar,
    distance_to_off,
    is_blocked,
    is_valid_move,
)

OPENING_WHITE = {24: 2, 13: 5, 8: 3, 6: 5}
OPENING_BLACK = {1: 2, 12: 5, 17: 3, 19: 5}


def board(**counts):
    """points p<n>=count, negative for Black."""
    points = np.zeros(24, dtype=np.int32)
    for name, count in counts.items():
        points[int(name[1:]) - 1] = count
    return points


class TestIsBlocked:
    def test_empty_point(self):
        assert not is_blocked(board(), 5, WHITE)

    def test_own_checkers(self):
        assert not is_blocked(board(p5=3), 5, WHITE)

    def test_single_opponent_checker(self):
        assert not is_blocked(board(p5=-1), 5, WHITE)
        assert not is_blocked(board(p5=1), 5, BLACK)

    def test_two_or_more_opponent_checkers(self):
        assert is_blocked(board(p5=-2), 5, WHITE)
        assert is_blocked(board(p5=4), 5, BLACK)


class TestCanEnterFromBar:
    def test_white_enters_on_points_19_to_24(self):
        points = board(p20=-2)
        assert can_enter_from_bar(points, WHITE, 4)  # point 21
        assert not can_enter_from_bar(points, WHITE, 5)  # point 20

    def test_black_enters_on_points_1_to_6(self):
        points = board(p3=2)
        assert can_enter_from_bar(points, BLACK, 2)
        assert not can_enter_from_bar(points, BLACK, 3)

    def test_entry_on_blot(self):
        assert can_enter_from_bar(board(p22=-1), WHITE, 3)


class TestCanBearOff:
    def test_checker_outside_home_board(self, make_state):
        assert not can_bear_off(make_state(white={6: 4, 7: 1}), WHITE)

    def test_checker_on_bar(self, make_state):
        assert not can_bear_off(make_state(white={6: 4}, bar_white=1), WHITE)

    def test_all_home_white(self, make_state):
        assert can_bear_off(make_state(white={1: 3, 6: 4}), WHITE)

    def test_all_home_black(self, make_state):
        assert can_bear_off(make_state(black={19: 2, 24: 5}), BLACK)
        assert not can_bear_off(make_state(black={18: 1, 24: 5}), BLACK)

    def test_initial_position(self, make_state):
        state = make_state(white=OPENING_WHITE, black=OPENING_BLACK)
        assert not can_bear_off(state, WHITE)
        assert not can_bear_off(state, BLACK)


def test_distance_to_off():
    assert distance_to_off(WHITE, 3) == 3
    assert distance_to_off(BLACK, 22) == 3


class TestIsValidMove:
    def test_white_moves_down(self, make_state):
        state = make_state(white=OPENING_WHITE, black=OPENING_BLACK, dice=(3, 4))
        assert is_valid_move(state, 13, 10, 3)
        assert is_valid_move(state, 13, 9, 4)

    def test_black_moves_up(self, make_state):
        state = make_state(white=OPENING_WHITE, black=OPENING_BLACK, current_player=BLACK, dice=(3, 4))
        assert is_valid_move(state, 1, 4, 3)
        assert is_valid_move(state, 12, 16, 4)

    def test_wrong_direction(self, make_state):
        state = make_state(white=OPENING_WHITE, black=OPENING_BLACK, dice=(3, 4))
        assert not is_valid_move(state, 13, 16, 3)

    def test_destination_must_match_die(self, make_state):
        state = make_state(white=OPENING_WHITE, black=OPENING_BLACK, dice=(3, 4))
        assert not is_valid_move(state, 13, 11, 3)

    def test_blocked_destination(self, make_state):
        state = make_state(white=OPENING_WHITE, black=OPENING_BLACK, dice=(1, 4))
        # Black holds point 12 with five checkers
        assert not is_valid_move(state, 13, 12, 1)

    def test_opponent_checkers_cannot_be_moved(self, make_state):
        state = make_state(white=OPENING_WHITE, black=OPENING_BLACK, dice=(3, 4))
        assert not is_valid_move(state, 12, 9, 3)
        assert not is_valid_move(state, 10, 7, 3)

    def test_die_not_remaining(self, make_state):
        state = make_state(white=OPENING_WHITE, black=OPENING_BLACK, dice=(3, 4), remaining=(4,))
        assert not is_valid_move(state, 13, 10, 3)
        assert not is_valid_move(state, 13, 8, 5)

    def test_step_off_the_board_is_not_a_point_move(self, make_state):
        state = make_state(white={13: 1, 3: 1}, dice=(5, 4))
        assert not is_valid_move(state, 3, -2, 5)


class TestBarEntry:
    def test_bar_checkers_must_enter_first(self, make_state):
        state = make_state(white={13: 5, 6: 5}, bar_white=1, dice=(3, 4))
        assert not is_valid_move(state, 13, 10, 3)
        assert is_valid_move(state, BAR, 22, 3)

    def test_entry_point_fixed_by_die(self, make_state):
        state = make_state(white={13: 5}, bar_white=1, dice=(3, 4))
        assert not is_valid_move(state, BAR, 21, 3)
        assert is_valid_move(state, BAR, 21, 4)

    def test_black_entry(self, make_state):
        state = make_state(white={6: 2}, black={19: 5}, bar_black=1, current_player=BLACK, dice=(6, 2))
        assert not is_valid_move(state, BAR, 6, 6)
        assert is_valid_move(state, BAR, 2, 2)

    def test_no_bar_checker(self, make_state):
        state = make_state(white={13: 5}, dice=(3, 4))
        assert not is_valid_move(state, BAR, 22, 3)

    def test_cannot_bear_off_from_bar(self, make_state):
        state = make_state(white={1: 5}, bar_white=1, dice=(3, 4))
        assert not is_valid_move(state, BAR, OFF, 3)


class TestBearingOff:
    def test_exact_roll(self, make_state):
        state = make_state(white={3: 1}, dice=(3, 5))
        assert is_valid_move(state, 3, OFF, 3)

    def test_higher_roll_from_rearmost_checker(self, make_state):
        state = make_state(white={3: 1, 5: 1}, dice=(6, 1))
        assert is_valid_move(state, 5, OFF, 6)
        assert not is_valid_move(state, 3, OFF, 6)

    def test_lower_roll_never_bears_off(self, make_state):
        state = make_state(white={5: 1}, dice=(3, 2))
        assert not is_valid_move(state, 5, OFF, 3)
        assert is_valid_move(state, 5, 2, 3)

    def test_not_all_checkers_home(self, make_state):
        state = make_state(white={3: 1, 8: 1}, dice=(3, 5))
        assert not is_valid_move(state, 3, OFF, 3)

    def test_black_bears_off(self, make_state):
        state = make_state(black={22: 1, 20: 1}, current_player=BLACK, dice=(3, 6))
        assert is_valid_move(state, 22, OFF, 3)
        assert is_valid_move(state, 20, OFF, 6)
        assert not is_valid_move(state, 22, OFF, 6)


def test_landing_on_blot_is_legal(make_state):
    state = make_state(white={13: 1}, black={10: 1}, dice=(3, 4))
    assert is_valid_move(state, 13, 10, 3)


def test_initial_points_layout():
    points = create_initial_points()
    assert points[23] == 2 and points[12] == 5 and points[7] == 3 and points[5] == 5
    assert points[0] == -2 and points[11] == -5 and points[16] == -3 and points[18] == -5
    assert not points.flags.writeable
