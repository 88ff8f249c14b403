"""
Transporte WebSocket para el servidor del juego.
Acepta conexiones, decodifica los mensajes de cada cliente y entrega las
notificaciones del servidor sin bloquear a quien las envía.
"""

import asyncio
import logging
from http import HTTPStatus

from websockets.asyncio.server import serve
from websockets.exceptions import ConnectionClosed

from .protocol import MSG_HELLO, TEXT_HELLO, create_message, encode_message, parse_message
from .server import TicTacToeServer

logger = logging.getLogger(__name__)

HEALTH_TEXT = "TicTacToe WS server is running\n"


class WebSocketServer:
    """
    Puente entre las conexiones WebSocket y el registro de salas.
    Mantiene una cola de salida por cada conexión abierta.
    """

    def __init__(self, host="0.0.0.0", port=8080):
        """Inicializa el transporte y su registro de salas vacío."""
        self.host = host
        self.port = port

        # Mapeo de conexiones WebSocket a su cola de salida
        self.connections = {}

        self.game = TicTacToeServer(self.send)

    def send(self, websocket, message):
        """Encola un mensaje; no hace nada si la conexión ya no está abierta."""
        queue = self.connections.get(websocket)
        if queue is None:
            return
        queue.put_nowait(encode_message(message))

    def process_request(self, connection, request):
        """Responde a peticiones HTTP normales (sin upgrade) con un texto fijo."""
        if "Upgrade" not in request.headers:
            return connection.respond(HTTPStatus.OK, HEALTH_TEXT)
        return None

    def serve(self, host=None, port=None):
        """Devuelve el servidor de ``websockets`` listo para usar con ``async with``."""
        return serve(
            self.handle_websocket,
            self.host if host is None else host,
            self.port if port is None else port,
            process_request=self.process_request,
        )

    async def start(self):
        """Inicia el servidor WebSocket y lo mantiene en ejecución."""
        async with self.serve() as server:
            logger.info("Servidor WebSocket iniciado en %s:%s", self.host, self.port)
            await server.serve_forever()

    async def handle_websocket(self, websocket):
        """Maneja una conexión WebSocket."""
        logger.info("Nueva conexión desde %s", websocket.remote_address)

        queue = asyncio.Queue()
        self.connections[websocket] = queue
        writer = asyncio.create_task(self.write_messages(websocket, queue))

        try:
            self.send(websocket, create_message(MSG_HELLO, message=TEXT_HELLO))

            async for raw in websocket:
                message = parse_message(raw)
                if message is None:
                    logger.debug("Mensaje descartado: %r", raw[:50])
                    continue
                self.game.process_message(websocket, message)
        except ConnectionClosed as e:
            logger.debug("Conexión cerrada con error: %s", e)
        finally:
            # El cliente deja de recibir antes de que se libere su puesto
            del self.connections[websocket]
            writer.cancel()
            self.game.remove_client(websocket)
            logger.info("Conexión finalizada %s", websocket.remote_address)

    async def write_messages(self, websocket, queue):
        """Envía en orden los mensajes encolados para una conexión."""
        while True:
            data = await queue.get()
            try:
                await websocket.send(data)
            except ConnectionClosed:
                logger.debug("No se pudo enviar a una conexión cerrada")
                return
