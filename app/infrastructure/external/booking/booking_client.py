"""
Cliente del webhook de agendamiento.
Este módulo traduce las acciones del flujo (consultar horarios y crear reservas)
a solicitudes contra un único endpoint JSON y normaliza sus respuestas.
"""
import asyncio
import logging
import aiohttp
from datetime import date
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple
from pydantic import ValidationError as PydanticValidationError

from app.domain.entities.models import BookingPayload, ServiceError, Slot
from app.application.services.tools.date_utils import format_date_iso

logger = logging.getLogger(__name__)

SLOT_FETCH = "slot fetch"
BOOKING_SUBMISSION = "booking submission"

Transport = Callable[..., Awaitable[Tuple[int, Any]]]

async def api_request(
    method: str,
    url: str,
    headers: Optional[Dict[str, str]] = None,
    data: Optional[Dict[str, Any]] = None,
    timeout: Optional[float] = None
) -> Tuple[int, Any]:
    """
    Función genérica para realizar solicitudes a APIs.

    Args:
        method: Método HTTP (get, post, etc.)
        url: URL de la solicitud
        headers: Cabeceras de la solicitud
        data: Cuerpo JSON de la solicitud
        timeout: Segundos máximos de espera; None espera indefinidamente

    Returns:
        Tupla con (código_respuesta, datos_json)
    """
    client_timeout = aiohttp.ClientTimeout(total=timeout)
    async with aiohttp.ClientSession(timeout=client_timeout) as session:
        async with session.request(method.upper(), url, headers=headers, json=data) as response:
            try:
                response_data = await response.json(content_type=None)
            except ValueError:
                response_text = await response.text()
                response_data = {"text": response_text}

            return response.status, response_data

def normalize_slots(data: Any) -> List[Slot]:
    """
    Normaliza la respuesta de `get_slots`.

    El webhook responde con una de dos formas: una lista de slots
    `[{id, time}, ...]` o un objeto `{"slots": [{id, time}, ...]}`. Cualquier
    otra forma se considera una lista vacía. Se descartan los slots sin `time`
    y los que traen un `id` que no es texto ni entero; se conserva el orden
    recibido.

    Args:
        data: Cuerpo JSON de la respuesta

    Returns:
        Lista de slots válidos
    """
    if isinstance(data, list):
        raw_slots = data
    elif isinstance(data, dict):
        raw_slots = data.get("slots") or []
    else:
        raw_slots = []

    if not isinstance(raw_slots, list):
        logger.warning(f"Campo 'slots' con formato inesperado: {type(raw_slots).__name__}")
        return []

    slots = []
    for raw in raw_slots:
        if not isinstance(raw, dict) or not raw.get("time"):
            continue
        try:
            slots.append(Slot(id=raw.get("id"), time=str(raw["time"])))
        except PydanticValidationError:
            logger.warning(f"Slot con ID inválido descartado: {raw.get('id')!r}")

    discarded = len(raw_slots) - len(slots)
    if discarded:
        logger.debug(f"Se descartaron {discarded} slots inválidos o sin hora")
    return slots

def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300

class BookingClient:
    """
    Cliente sin estado para el webhook de horarios y reservas.
    Cada operación realiza una sola solicitud, sin reintentos ni caché.
    """

    def __init__(
        self,
        webhook_url: str,
        timeout: Optional[float] = None,
        transport: Transport = api_request
    ):
        """
        Inicializa el cliente.

        Args:
            webhook_url: URL del webhook de agendamiento
            timeout: Timeout opcional por solicitud en segundos
            transport: Función que ejecuta la solicitud HTTP
        """
        self.webhook_url = webhook_url
        self.timeout = timeout
        self._transport = transport

    async def _post(self, body: Dict[str, Any], action: str) -> Any:
        try:
            status_code, data = await self._transport(
                "post",
                self.webhook_url,
                headers={"Content-Type": "application/json"},
                data=body,
                timeout=self.timeout
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Error de red en {action}: {str(e)}")
            raise ServiceError(action) from e

        if not _is_success(status_code):
            error_details = data.get("text", str(data)) if isinstance(data, dict) else str(data)
            logger.error(f"Error en {action}: {status_code} - {error_details}")
            raise ServiceError(action)

        return data

    async def fetch_slots(self, selected_date: date, service: str) -> List[Slot]:
        """
        Obtiene los horarios disponibles para un día y servicio.

        Args:
            selected_date: Día consultado
            service: Servicio solicitado

        Returns:
            Slots disponibles en el orden entregado por el webhook

        Raises:
            ServiceError: Si la solicitud falla
        """
        body = {
            "action": "get_slots",
            "date": format_date_iso(selected_date),
            "service": service
        }
        data = await self._post(body, SLOT_FETCH)
        slots = normalize_slots(data)
        logger.info(f"{len(slots)} horarios disponibles para {body['date']} ({service})")
        return slots

    async def submit_booking(self, payload: BookingPayload) -> bool:
        """
        Crea una reserva en el webhook.

        No se envía llave de idempotencia: reenviar el mismo payload crea otra reserva.

        Args:
            payload: Datos completos de la reserva

        Returns:
            True si el webhook aceptó la reserva

        Raises:
            ServiceError: Si la solicitud falla
        """
        await self._post(payload.to_request_body(), BOOKING_SUBMISSION)
        logger.info(f"Reserva creada para {payload.date} a las {payload.time}")
        return True
