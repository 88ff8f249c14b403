"""
Script para iniciar el servidor del juego sin instalar el paquete.
"""

from vieja_relay.run import main

if __name__ == "__main__":
    main()
