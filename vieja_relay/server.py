"""
Registro de salas y manejadores de las acciones de los jugadores.
Recibe los mensajes ya decodificados de cada conexión, modifica las salas y
envía las notificaciones a través de la función ``send`` del transporte.
"""

import logging

from .game_room import GameRoom, as_position
from .protocol import (
    CMD_CREATE, CMD_JOIN, CMD_MOVE, CMD_RESTART,
    MSG_ERROR, MSG_GAMEOVER, MSG_INFO, MSG_JOINED, MSG_STATE,
    TEXT_NOT_IN_ROOM, TEXT_NOT_YOUR_TURN, TEXT_PLAYER_LEFT, TEXT_RESTARTED,
    TEXT_ROOM_CREATED, TEXT_ROOM_FULL, TEXT_ROOM_NOT_FOUND, TEXT_SECOND_JOINED,
    TEXT_WAITING,
    create_message, make_room_code, normalize_room_code,
)

logger = logging.getLogger(__name__)


class TicTacToeServer:
    """
    Registro de salas en memoria.

    No tiene hilos ni bloqueos: cada mensaje y cada desconexión se atienden
    con una sola llamada que no se suspende, desde el bucle del transporte.
    """

    def __init__(self, send, make_code=make_room_code):
        """
        Inicializa el servidor con el registro vacío.

        Args:
            send: función ``send(conexion, mensaje)`` del transporte; no hace
                nada si la conexión ya está cerrada.
            make_code: generador de códigos de sala.
        """
        self.send = send
        self.make_code = make_code

        # Diccionario de salas {codigo: GameRoom}
        self.rooms = {}

        self.handlers = {
            CMD_CREATE: lambda client, message: self.create_room(client),
            CMD_JOIN: lambda client, message: self.join_room(client, message.get("roomCode")),
            CMD_MOVE: lambda client, message: self.process_move(
                client, message.get("roomCode"), message.get("index")),
            CMD_RESTART: lambda client, message: self.restart_game(client, message.get("roomCode")),
        }

    def process_message(self, client, message):
        """Procesa un mensaje ya decodificado de un cliente."""
        handler = self.handlers.get(message.get("type"))
        if handler is None:
            logger.debug("Tipo de mensaje desconocido: %r", message.get("type"))
            return
        try:
            handler(client, message)
        except Exception:
            logger.exception("Error al procesar mensaje %r", message)

    def send_message(self, client, msg_type, **fields):
        """Envía un mensaje a un cliente."""
        self.send(client, create_message(msg_type, **fields))

    def broadcast(self, room, msg_type, **fields):
        """Envía el mismo mensaje a todos los jugadores de la sala."""
        message = create_message(msg_type, **fields)
        for player in room.players:
            self.send(player, message)

    def send_state(self, client, room):
        self.send_message(client, MSG_STATE, **room.get_state())

    def broadcast_state(self, room):
        self.broadcast(room, MSG_STATE, **room.get_state())

    def get_room(self, room_code):
        return self.rooms.get(normalize_room_code(room_code))

    def new_room_code(self):
        """Genera códigos hasta encontrar uno que no esté en uso."""
        code = self.make_code()
        while code in self.rooms:
            code = self.make_code()
        return code

    def create_room(self, client):
        """Crea una nueva sala con el cliente como X."""
        room_code = self.new_room_code()
        room = GameRoom(room_code, client)
        self.rooms[room_code] = room

        symbol = room.symbol_of(client)
        logger.info("Sala creada: %s", room_code)

        self.send_message(client, MSG_JOINED, roomCode=room_code, you=symbol.value)
        self.send_state(client, room)
        self.send_message(client, MSG_INFO, message=TEXT_ROOM_CREATED)
        return room

    def join_room(self, client, room_code):
        """Une a un jugador a una sala existente, o lo reconecta."""
        room = self.get_room(room_code)
        if room is None:
            self.send_message(client, MSG_ERROR, message=TEXT_ROOM_NOT_FOUND)
            return None

        # Ya está en la sala: repetir la confirmación
        symbol = room.symbol_of(client)
        if symbol is not None:
            self.send_message(client, MSG_JOINED, roomCode=room.room_id, you=symbol.value)
            self.send_state(client, room)
            return room

        symbol = room.add_player(client)
        if symbol is None:
            self.send_message(client, MSG_ERROR, message=TEXT_ROOM_FULL)
            return None

        logger.info("Jugador unido a sala %s como %s", room.room_id, symbol.value)

        self.send_message(client, MSG_JOINED, roomCode=room.room_id, you=symbol.value)
        self.send_state(client, room)

        self.broadcast(room, MSG_INFO, message=TEXT_SECOND_JOINED)
        self.broadcast_state(room)
        return room

    def process_move(self, client, room_code, index):
        """
        Procesa un movimiento de un jugador.

        Las comprobaciones van en orden y se detienen en el primer fallo; solo
        algunos fallos se notifican al jugador. Devuelve True si se aceptó.
        """
        room = self.get_room(room_code)
        if room is None:
            logger.debug("Movimiento en sala inexistente %r", room_code)
            return False

        symbol = room.symbol_of(client)
        if symbol is None:
            self.send_message(client, MSG_ERROR, message=TEXT_NOT_IN_ROOM)
            return False

        if room.game_over:
            return False

        position = as_position(index)
        if position is None:
            logger.debug("Casilla inválida %r en sala %s", index, room.room_id)
            return False

        if not room.is_full():
            self.send_message(client, MSG_ERROR, message=TEXT_WAITING)
            return False

        if room.turn is not symbol:
            self.send_message(client, MSG_ERROR, message=TEXT_NOT_YOUR_TURN)
            return False

        if not room.is_cell_empty(position):
            return False

        result = room.place(symbol, position)
        if result is not None:
            logger.info("Fin de partida en sala %s: %s", room.room_id, result)
            self.broadcast(room, MSG_GAMEOVER, winner=result)

        self.broadcast_state(room)
        return True

    def restart_game(self, client, room_code):
        """Reinicia la partida de la sala; los símbolos no cambian."""
        room = self.get_room(room_code)
        if room is None or not room.has_player(client):
            return False

        room.restart()
        logger.info("Partida reiniciada en sala %s", room.room_id)

        self.broadcast(room, MSG_INFO, message=TEXT_RESTARTED)
        self.broadcast_state(room)
        return True

    def remove_client(self, client):
        """
        Libera el puesto de un cliente desconectado.

        Se supone que una conexión ocupa como mucho una sala: se atiende solo
        la primera que la contenga. La sala se elimina si queda vacía.
        """
        for room_code, room in self.rooms.items():
            if not room.remove_player(client):
                continue

            logger.info("Jugador desconectado de sala %s", room_code)

            self.broadcast(room, MSG_INFO, message=TEXT_PLAYER_LEFT)
            self.broadcast_state(room)

            if room.is_empty():
                del self.rooms[room_code]
                logger.info("Sala %s eliminada (vacía)", room_code)
            return room
        return None
