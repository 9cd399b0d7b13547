"""Tests for drop positions, placement legality and win detection."""

import pytest

from block_stack_rl.game import (
    Board,
    Orientation,
    Player,
    Rejection,
    can_move,
    check_move,
    check_win,
    drop_position,
    has_valid_move,
    is_exhausted,
    rebuild,
    validate_move,
)

V = Orientation.VERTICAL
H = Orientation.HORIZONTAL
W = Player.WHITE
B = Player.BLACK


class TestDropPosition:
    """Gravity: blocks land on the column heights below them."""

    def test_vertical_lands_on_column_height(self, board_of):
        assert drop_position(Board(), 5, V) == 0
        board = board_of((0, 0, "v", "w"))
        assert drop_position(board, 0, V) == 2

    def test_vertical_needs_two_free_rows(self, board_of):
        # Column 0 at height 7: rows 7 and 8 still fit
        board = board_of((0, 0, "v", "w"), (0, 2, "v", "b"), (0, 4, "v", "w"), (0, 6, "h", "b"))
        assert board.height(0) == 7
        assert drop_position(board, 0, V) == 7
        board = board_of((0, 0, "v", "w"), (0, 2, "v", "b"), (0, 4, "v", "w"), (0, 6, "v", "b"))
        assert board.height(0) == 8
        assert drop_position(board, 0, V) is None

    def test_horizontal_on_level_columns(self, board_of):
        board = board_of((0, 0, "v", "w"), (1, 0, "v", "b"))
        assert drop_position(board, 0, H) == 2

    def test_horizontal_on_ground(self):
        assert drop_position(Board(), 0, H) == 0

    def test_illegal_bridge(self, board_of):
        # Column 0 has height 2, column 1 is empty: the block would hang at y=2
        board = board_of((0, 0, "v", "w"))
        assert board.height(0) == 2 and board.height(1) == 0
        y = drop_position(board, 0, H)
        assert y is None
        assert not validate_move(board, 0, y, H, B)
        assert check_move(board, 0, y, H, B) is Rejection.NO_DROP

    def test_horizontal_bridge_from_the_other_side(self, board_of):
        board = board_of((1, 0, "v", "w"))
        assert drop_position(board, 0, H) is None

    def test_horizontal_above_top_row(self, board_of):
        specs = []
        for x in (0, 1):
            for j in range(4):
                specs.append((x, 2 * j, "v", "w" if (x + j) % 2 == 0 else "b"))
        board = board_of(*specs, (0, 8, "h", "w"))
        assert board.height(0) == 9 and board.height(1) == 9
        assert drop_position(board, 0, H) is None


class TestWidthConstraint:
    """The structure never spans more than nine columns."""

    @pytest.fixture
    def wide(self, board_of):
        return board_of((0, 0, "v", "w"), (8, 0, "v", "b"))

    def test_vertical_outside_span(self, wide):
        assert check_move(wide, 9, 0, V, W) is Rejection.TOO_WIDE
        assert check_move(wide, -1, 0, V, W) is Rejection.TOO_WIDE

    def test_horizontal_extension_outside_span(self, wide):
        assert check_move(wide, 8, 2, H, W) is Rejection.TOO_WIDE

    def test_inside_span_is_fine(self, board_of):
        board = board_of((0, 0, "v", "w"), (7, 0, "v", "b"))
        assert check_move(board, 8, 0, V, W) is not Rejection.TOO_WIDE

    def test_width_checked_before_connectivity(self, wide):
        # Far away and disconnected, but width is reported first
        assert check_move(wide, 20, 0, V, W) is Rejection.TOO_WIDE


class TestConnectivity:
    """After the first block every block must touch the structure."""

    def test_first_block_anywhere(self):
        assert validate_move(Board(), 42, 0, V, W)
        assert validate_move(Board(), -7, 0, H, B)

    def test_vertical_needs_neighbor(self, board_of):
        board = board_of((0, 0, "v", "w"))
        assert check_move(board, 2, 0, V, B) is Rejection.DISCONNECTED
        assert validate_move(board, 1, 0, V, B)

    def test_horizontal_touching_with_far_end(self, board_of):
        board = board_of((0, 0, "v", "w"))
        assert validate_move(board, -2, 0, H, B)
        assert check_move(board, 2, 0, H, B) is Rejection.DISCONNECTED

    def test_corner_contact_does_not_count(self, board_of):
        # Only the diagonal (0, 1) touches a vertical block anchored at (1, 2)
        board = board_of((0, 0, "v", "w"))
        assert check_move(board, 1, 2, V, B) is Rejection.DISCONNECTED


class TestShortSideRule:
    """Same-owner, same-orientation blocks may not meet end to end."""

    def test_vertical_on_own_vertical(self, board_of):
        board = board_of((0, 0, "v", "w"))
        y = drop_position(board, 0, V)
        assert check_move(board, 0, y, V, W) is Rejection.SHORT_SIDE

    def test_vertical_on_opponent_vertical(self, board_of):
        board = board_of((0, 0, "v", "w"))
        assert validate_move(board, 0, drop_position(board, 0, V), V, B)

    def test_vertical_on_own_horizontal(self, board_of):
        board = board_of((0, 0, "h", "w"))
        assert validate_move(board, 0, drop_position(board, 0, V), V, W)

    def test_horizontal_next_to_own_horizontal(self, board_of):
        board = board_of((0, 0, "h", "w"))
        assert check_move(board, 2, 0, H, W) is Rejection.SHORT_SIDE
        assert check_move(board, -2, 0, H, W) is Rejection.SHORT_SIDE

    def test_horizontal_next_to_opponent_horizontal(self, board_of):
        board = board_of((0, 0, "h", "w"))
        assert validate_move(board, 2, 0, H, B)
        assert validate_move(board, -2, 0, H, B)

    def test_vertical_next_to_own_horizontal(self, board_of):
        board = board_of((0, 0, "h", "w"))
        assert validate_move(board, 2, 0, V, W)

    def test_horizontal_on_own_horizontal(self, board_of):
        # Long sides may touch
        board = board_of((0, 0, "h", "w"))
        y = drop_position(board, 0, H)
        assert y == 1
        assert validate_move(board, 0, y, H, W)


class TestValidMoves:
    """Stalemate and exhaustion."""

    def test_empty_board_always_has_moves(self):
        assert has_valid_move(Board(), W)
        assert has_valid_move(Board(), B)

    def test_open_board_has_moves(self, board_of):
        assert has_valid_move(board_of((0, 0, "v", "w")), W)

    def test_stalemate_board(self, stalemate_history):
        board = rebuild(stalemate_history)
        assert board.block_count(W) == 20
        assert board.block_count(B) == 20
        assert not has_valid_move(board, W)
        assert not has_valid_move(board, B)
        assert check_win(board, W) is None
        assert check_win(board, B) is None

    def test_exhausted_player_cannot_move(self, board_of):
        board = board_of((0, 0, "v", "w"), (1, 0, "v", "b"))
        assert is_exhausted(board, W, limit=1)
        assert not can_move(board, W, limit=1)
        assert has_valid_move(board, W)
        assert can_move(board, W)


class TestCheckWin:
    """Five same-owner cells in a line."""

    def test_row_of_five(self, board_of):
        board = board_of(
            (0, 0, "h", "w"), (-1, 0, "v", "b"), (2, 0, "v", "w"), (-2, 0, "v", "b"), (3, 0, "h", "w")
        )
        assert check_win(board, W) == [(0, 0), (1, 0), (2, 0), (3, 0), (4, 0)]
        assert check_win(board, B) is None

    def test_row_of_four(self, board_of):
        board = board_of((0, 0, "h", "w"), (-1, 0, "v", "b"), (2, 0, "v", "w"), (-2, 0, "v", "b"), (3, 0, "v", "w"))
        assert check_win(board, W) is None

    def test_column_of_five(self, board_of):
        board = board_of((0, 0, "v", "w"), (1, 0, "v", "b"), (0, 2, "h", "w"), (0, 3, "v", "w"))
        assert check_win(board, W) == [(0, 0), (0, 1), (0, 2), (0, 3), (0, 4)]

    def test_rising_diagonal(self, board_of):
        board = board_of(*[(i, i, "v", "w") for i in range(5)])
        assert check_win(board, W) == [(0, 0), (1, 1), (2, 2), (3, 3), (4, 4)]

    def test_falling_diagonal(self, board_of):
        board = board_of(*[(i, 4 - i, "v", "w") for i in range(5)])
        assert check_win(board, W) == [(0, 4), (1, 3), (2, 2), (3, 1), (4, 0)]

    def test_opponent_cell_breaks_line(self, board_of):
        board = board_of((0, 0, "h", "w"), (2, 0, "v", "b"), (3, 0, "h", "w"))
        assert check_win(board, W) is None
        assert check_win(board, B) is None
