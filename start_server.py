#!/usr/bin/env python
"""
Script para iniciar el servidor Gunicorn con la configuración adecuada.
Facilita el arranque del servidor en diferentes entornos.
"""
import os
import sys
import subprocess
import logging
from dotenv import load_dotenv

# Configurar logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("start_server")

def main():
    """Función principal para iniciar el servidor Gunicorn."""
    # Cargar variables de entorno
    load_dotenv()

    if not os.path.exists("gunicorn_config.py"):
        logger.error("El archivo de configuración de Gunicorn no existe. Asegúrate de que estás en el directorio correcto.")
        sys.exit(1)

    if not os.getenv("BOOKING_WEBHOOK_URL"):
        logger.warning("BOOKING_WEBHOOK_URL no está configurada: no se podrán crear sesiones de agendamiento")

    port = os.getenv("BOOKING_PORT", "8000")
    host = os.getenv("BOOKING_HOST", "0.0.0.0")
    workers = os.getenv("GUNICORN_WORKERS", "1")
    root_path = os.getenv("ROOT_PATH", "")

    logger.info(f"Iniciando servidor en {host}:{port} con {workers} worker(s)")
    if workers != "1":
        logger.warning("Las sesiones se guardan en memoria: con varios workers una sesión puede no encontrarse")
    logger.info(f"La API estará disponible en: http://{host}:{port}{root_path}/docs")

    cmd = [
        "gunicorn",
        "--config", "gunicorn_config.py",
        "app.main:app"
    ]

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Servidor detenido manualmente")
    except (OSError, subprocess.CalledProcessError) as e:
        logger.error(f"Error al iniciar el servidor: {str(e)}")
        sys.exit(1)

if __name__ == "__main__":
    main()
