import pytest

from vieja_relay.game_room import (
    EMPTY, SLOT_SYMBOLS, WIN_COMBINATIONS, GameRoom, Symbol, as_position, check_winner,
)
from vieja_relay.protocol import DRAW


def make_room():
    room = GameRoom('AB2CD', 'p1')
    room.add_player('p2')
    return room


def test_new_room_state():
    room = GameRoom('AB2CD', 'p1')
    assert room.get_state() == {
        'board': [EMPTY] * 9,
        'turn': 'X',
        'gameOver': False,
        'playersCount': 1,
    }
    assert room.symbol_of('p1') is Symbol.X


def test_symbols_follow_slots():
    assert SLOT_SYMBOLS == (Symbol.X, Symbol.O)
    room = make_room()
    assert room.symbol_of('p2') is Symbol.O
    assert room.symbol_of('stranger') is None


def test_third_player_is_refused():
    room = make_room()
    assert room.add_player('p3') is None
    assert room.players == ['p1', 'p2']


def test_vacated_slot_is_refilled_with_its_symbol():
    room = make_room()
    assert room.remove_player('p1')
    assert room.symbol_of('p1') is None
    assert room.add_player('p3') is Symbol.X
    assert room.remove_player('nobody') is False


def test_room_is_empty_after_both_leave():
    room = make_room()
    room.remove_player('p1')
    assert not room.is_empty()
    room.remove_player('p2')
    assert room.is_empty()


@pytest.mark.parametrize('line', WIN_COMBINATIONS)
def test_every_line_wins(line):
    board = [EMPTY] * 9
    for i in line:
        board[i] = 'O'
    assert check_winner(board) == 'O'


def test_no_winner_on_mixed_line():
    assert check_winner(['X', 'X', 'O', EMPTY, EMPTY, EMPTY, EMPTY, EMPTY, EMPTY]) is None


def test_place_flips_turn():
    room = make_room()
    assert room.place(Symbol.X, 4) is None
    assert room.board[4] == 'X'
    assert room.turn is Symbol.O
    assert not room.game_over


def test_draw_sequence():
    room = make_room()
    # X O X / O O X / X X O
    moves = [0, 1, 2, 4, 7, 3, 5, 8]
    for turn, position in enumerate(moves):
        assert room.place(SLOT_SYMBOLS[turn % 2], position) is None
    assert room.place(Symbol.X, 6) == DRAW
    assert room.game_over
    assert EMPTY not in room.board


def test_win_keeps_turn():
    room = make_room()
    for symbol, position in [(Symbol.X, 0), (Symbol.O, 3), (Symbol.X, 1), (Symbol.O, 4)]:
        room.place(symbol, position)
    assert room.place(Symbol.X, 2) == 'X'
    assert room.game_over
    assert room.turn is Symbol.X


def test_restart_keeps_players():
    room = make_room()
    room.place(Symbol.X, 0)
    room.restart()
    assert room.board == [EMPTY] * 9
    assert room.turn is Symbol.X
    assert not room.game_over
    assert room.symbol_of('p1') is Symbol.X
    assert room.symbol_of('p2') is Symbol.O


@pytest.mark.parametrize('value,expected', [
    (0, 0), (8, 8), (4.0, 4),
    (-1, None), (9, None), (1.5, None), (True, None), ('3', None), (None, None),
])
def test_as_position(value, expected):
    assert as_position(value) == expected
