"""
Configuración centralizada del proyecto.
Este módulo gestiona todas las variables de configuración y entorno.
"""
import os
import logging
from dotenv import load_dotenv
from typing import Dict, Any, Optional
from enum import Enum, auto

# Carga explícita del archivo .env
load_dotenv(verbose=True)

logger = logging.getLogger(__name__)

# Enumeración de zonas horarias soportadas
class TimeZones(Enum):
    """Enumeración de zonas horarias soportadas (escalable para futuros añadidos)"""
    COLOMBIA = auto()
    MEXICO = auto()

# Mapa de zonas horarias
TIMEZONE_MAP = {
    TimeZones.COLOMBIA: "America/Bogota",
    TimeZones.MEXICO: "America/Mexico_City",
}

def _get_timezone(name: str) -> TimeZones:
    try:
        return TimeZones[name.upper()]
    except KeyError:
        logger.warning(f"BOOKING_TIMEZONE inválida '{name}', usando COLOMBIA")
        return TimeZones.COLOMBIA

def _get_session_ttl(raw: str) -> float:
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"BOOKING_SESSION_TTL inválido '{raw}', usando 1800")
        return 1800.0

def _get_timeout(raw: Optional[str]) -> Optional[float]:
    # Sin valor = sin timeout
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"BOOKING_REQUEST_TIMEOUT inválido '{raw}', se ignora")
        return None

# Configuración por defecto
DEFAULT_TIMEZONE = _get_timezone(os.getenv("BOOKING_TIMEZONE", "COLOMBIA"))

# Configuración del webhook de agendamiento
BOOKING_WEBHOOK_URL = os.getenv("BOOKING_WEBHOOK_URL")
BOOKING_REQUEST_TIMEOUT = _get_timeout(os.getenv("BOOKING_REQUEST_TIMEOUT"))

# Segundos de inactividad antes de descartar una sesión
BOOKING_SESSION_TTL = _get_session_ttl(os.getenv("BOOKING_SESSION_TTL", "1800"))

# Configuración del servidor
BOOKING_PORT = int(os.getenv("BOOKING_PORT", "8000"))
BOOKING_HOST = os.getenv("BOOKING_HOST", "0.0.0.0")

# Configuración de logs
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "app.log")

# Función para obtener la configuración como diccionario
def get_settings() -> Dict[str, Any]:
    """Retorna la configuración actual como un diccionario."""
    return {
        "booking": {
            "webhook_url": BOOKING_WEBHOOK_URL,
            "request_timeout": BOOKING_REQUEST_TIMEOUT,
            "session_ttl": BOOKING_SESSION_TTL,
        },
        "server": {
            "host": BOOKING_HOST,
            "port": BOOKING_PORT,
        },
        "logging": {
            "level": LOG_LEVEL,
            "file": LOG_FILE,
        },
        "timezone": {
            "default": TIMEZONE_MAP[DEFAULT_TIMEZONE],
        }
    }
