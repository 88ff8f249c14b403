"""
Protocolo de comunicación para el juego.
Define los tipos de mensaje, los textos para el jugador y el formato de los
códigos de sala entre cliente y servidor.
"""

import json
import secrets

# Mensajes entrantes
CMD_CREATE = "create"        # Crear una sala
CMD_JOIN = "join"            # Unirse (o volver) a una sala
CMD_MOVE = "move"            # Realizar un movimiento
CMD_RESTART = "restart"      # Reiniciar la partida

# Mensajes salientes
MSG_HELLO = "hello"          # Saludo al conectar
MSG_JOINED = "joined"        # Confirmación de sala y símbolo
MSG_STATE = "state"          # Estado del tablero
MSG_INFO = "info"            # Aviso informativo
MSG_ERROR = "error"          # Mensaje de error
MSG_GAMEOVER = "gameover"    # Fin de la partida

# Marcador de empate en el mensaje de fin de partida
DRAW = "D"

# Códigos de sala: sin caracteres que se confunden (0/O, 1/I)
ROOM_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
ROOM_CODE_LENGTH = 5

# Textos para el jugador
TEXT_HELLO = "Conectado. Crea una sala o únete a una."
TEXT_ROOM_CREATED = "Sala creada. Comparte el código con un amigo."
TEXT_ROOM_NOT_FOUND = "Sala no encontrada."
TEXT_ROOM_FULL = "La sala ya tiene dos jugadores."
TEXT_SECOND_JOINED = "Se unió el segundo jugador. ¡A jugar!"
TEXT_NOT_IN_ROOM = "No estás en esta sala."
TEXT_WAITING = "Esperando al segundo jugador..."
TEXT_NOT_YOUR_TURN = "No es tu turno."
TEXT_RESTARTED = "Partida reiniciada."
TEXT_PLAYER_LEFT = "Un jugador se desconectó. Puede volver a conectarse."


def make_room_code():
    """Genera un código de sala aleatorio."""
    return "".join(secrets.choice(ROOM_CODE_ALPHABET) for _ in range(ROOM_CODE_LENGTH))


def normalize_room_code(code):
    """Normaliza un código recibido: sin espacios y en mayúsculas."""
    if not isinstance(code, str):
        return ""
    return code.strip().upper()


def create_message(msg_type, **fields):
    """Crea un mensaje con el formato del protocolo."""
    message = {"type": msg_type}
    message.update(fields)
    return message


def encode_message(message):
    """Serializa un mensaje para enviarlo por la conexión."""
    return json.dumps(message, ensure_ascii=False)


def parse_message(raw):
    """
    Analiza un mensaje recibido según el protocolo.

    Devuelve el diccionario del mensaje, o None si no se puede interpretar
    (JSON inválido, no es un objeto o no tiene un tipo de texto).
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError:
            return None
    try:
        message = json.loads(raw)
    except (TypeError, ValueError):
        return None
    if not isinstance(message, dict) or not isinstance(message.get("type"), str):
        return None
    return message
