"""
Script para iniciar el servidor del juego.
"""

import argparse
import asyncio
import logging
import os

import psutil

from .ws_server import WebSocketServer

logger = logging.getLogger(__name__)


def parse_args(argv=None, environ=None):
    """Lee los argumentos de la línea de comandos; las variables de entorno dan los valores por defecto."""
    environ = os.environ if environ is None else environ

    parser = argparse.ArgumentParser(description='Servidor de Tic-Tac-Toe multijugador por código de sala')
    parser.add_argument('--host', type=str, default=environ.get('HOST', '0.0.0.0'),
                        help='Dirección de escucha (predeterminado: 0.0.0.0 o $HOST)')
    parser.add_argument('--port', type=int, default=int(environ.get('PORT', '8080')),
                        help='Puerto WebSocket (predeterminado: 8080 o $PORT)')
    parser.add_argument('--log-level', type=str.upper, default=environ.get('LOG_LEVEL', 'INFO').upper(),
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Nivel de registro (predeterminado: INFO o $LOG_LEVEL)')
    parser.add_argument('--free-port', action='store_true',
                        help='Terminar los procesos que ya escuchan en el puerto antes de iniciar')
    return parser.parse_args(argv)


def kill_processes_by_port(port):
    """
    Busca y termina cualquier proceso que esté escuchando en un puerto.

    Args:
        port: Puerto a liberar

    Returns:
        int: número de procesos terminados
    """
    killed = 0
    own_pid = os.getpid()
    for proc in psutil.process_iter(['pid', 'name']):
        if proc.pid == own_pid:
            continue
        try:
            connections = proc.net_connections(kind='inet')
            if not any(conn.laddr and conn.laddr.port == port for conn in connections):
                continue
            logger.info("Terminando proceso %s (%s) en puerto %s", proc.pid, proc.name(), port)
            proc.terminate()
            try:
                proc.wait(timeout=3)
            except psutil.TimeoutExpired:
                proc.kill()
            killed += 1
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
            pass
    return killed


def main(argv=None):
    """Función principal que inicia el servidor."""
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    if args.free_port:
        kill_processes_by_port(args.port)

    server = WebSocketServer(args.host, args.port)
    try:
        asyncio.run(server.start())
    except KeyboardInterrupt:
        logger.info("Servidor detenido por el usuario")


if __name__ == "__main__":
    main()
