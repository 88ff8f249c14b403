"""
Módulo que implementa la lógica de una sala de juego para Tic-Tac-Toe.
Cada sala guarda dos puestos de jugador, el tablero y de quién es el turno.
Las salas no hacen E/S: el servidor decide qué se envía a cada jugador.
"""

from enum import Enum

from .protocol import DRAW


class Symbol(str, Enum):
    X = "X"
    O = "O"

    @property
    def other(self):
        return Symbol.O if self is Symbol.X else Symbol.X


# El puesto 0 siempre juega con X y el puesto 1 con O
SLOT_SYMBOLS = (Symbol.X, Symbol.O)

EMPTY = ""
BOARD_SIZE = 9

WIN_COMBINATIONS = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),  # Filas
    (0, 3, 6), (1, 4, 7), (2, 5, 8),  # Columnas
    (0, 4, 8), (2, 4, 6),             # Diagonales
)


def check_winner(board):
    """Devuelve el símbolo de la primera línea completa, o None."""
    for a, b, c in WIN_COMBINATIONS:
        if board[a] != EMPTY and board[a] == board[b] == board[c]:
            return board[a]
    return None


def is_board_full(board):
    return EMPTY not in board


def as_position(value):
    """
    Convierte el índice recibido en una casilla válida (0-8).
    Devuelve None si no es un entero dentro del tablero.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        value = int(value)
    if not isinstance(value, int):
        return None
    if not 0 <= value < BOARD_SIZE:
        return None
    return value


class GameRoom:
    """
    Representa una sala de juego con dos puestos y una partida.
    Los jugadores se identifican por su conexión; el símbolo sale del puesto.
    """

    def __init__(self, room_id, creator):
        """Inicializa una sala con el creador en el primer puesto."""
        self.room_id = room_id
        self.slots = [creator, None]
        self.board = [EMPTY] * BOARD_SIZE
        self.turn = Symbol.X
        self.game_over = False

    def __repr__(self):
        return f"<GameRoom {self.room_id} jugadores={self.players_count}>"

    @property
    def players(self):
        return [player for player in self.slots if player is not None]

    @property
    def players_count(self):
        return len(self.players)

    def is_full(self):
        return None not in self.slots

    def is_empty(self):
        return all(player is None for player in self.slots)

    def has_player(self, player):
        return player is not None and player in self.slots

    def symbol_of(self, player):
        """Símbolo del jugador en esta sala, o None si no ocupa un puesto."""
        if not self.has_player(player):
            return None
        return SLOT_SYMBOLS[self.slots.index(player)]

    def add_player(self, player):
        """
        Sienta al jugador en el primer puesto libre.
        Devuelve su símbolo, o None si la sala está llena.
        """
        if self.is_full():
            return None
        index = self.slots.index(None)
        self.slots[index] = player
        return SLOT_SYMBOLS[index]

    def remove_player(self, player):
        """Libera el puesto del jugador. Devuelve False si no estaba."""
        if not self.has_player(player):
            return False
        self.slots[self.slots.index(player)] = None
        return True

    def place(self, symbol, position):
        """
        Coloca la ficha y actualiza el estado de la partida.

        La casilla debe estar libre y ser el turno de ``symbol``; el servidor
        valida eso antes de llamar. Devuelve el ganador, DRAW si hay empate,
        o None si la partida sigue (en ese caso cambia el turno).
        """
        self.board[position] = symbol.value

        winner = check_winner(self.board)
        if winner is not None:
            self.game_over = True
            return winner
        if is_board_full(self.board):
            self.game_over = True
            return DRAW

        self.turn = self.turn.other
        return None

    def is_cell_empty(self, position):
        return self.board[position] == EMPTY

    def restart(self):
        """Vacía el tablero; los jugadores conservan su puesto."""
        self.board = [EMPTY] * BOARD_SIZE
        self.turn = Symbol.X
        self.game_over = False

    def get_state(self):
        return {
            "board": list(self.board),
            "turn": self.turn.value,
            "gameOver": self.game_over,
            "playersCount": self.players_count,
        }
