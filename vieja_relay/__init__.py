"""Servidor de Tic-Tac-Toe (la vieja) para dos jugadores por código de sala."""

from .game_room import GameRoom, Symbol
from .server import TicTacToeServer

__version__ = "1.0.0"
