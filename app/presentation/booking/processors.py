"""
Procesadores para la API de agendamiento.
Este módulo mantiene las sesiones activas y construye la vista del flujo que
consume el formulario web.
"""
import time
import uuid
import logging
from datetime import date
from typing import Dict, Optional, Tuple

from app.domain.entities.models import BookingFlowState, ConfirmationView, FlowState, FlowView
from app.application.services.booking_flow import BookingFlowController
from app.application.services import transitions
from app.application.services.tools.date_utils import (
    format_date_human_readable, format_date_iso, parse_date_expression
)
from app.infrastructure.external.booking.booking_client import BookingClient
from app.infrastructure.config.config.settings import BOOKING_SESSION_TTL

# Configurar logging
logger = logging.getLogger("booking")

LOADING_MESSAGE = "Buscando horarios..."
NO_SLOTS_MESSAGE = "No hay horarios disponibles para este día."
INSTRUCTION_MESSAGE = "Selecciona un día en el calendario para ver horarios."
SUCCESS_TITLE = "¡Cita Agendada!"

# Sesiones en memoria del proceso; no sobreviven a un reinicio
sessions: Dict[str, BookingFlowController] = {}
# Último acceso de cada sesión (time.monotonic)
last_seen: Dict[str, float] = {}

def touch_session(session_id: str, now: Optional[float] = None) -> None:
    last_seen[session_id] = time.monotonic() if now is None else now

def prune_sessions(now: Optional[float] = None, ttl: float = BOOKING_SESSION_TTL) -> int:
    """
    Descarta las sesiones sin actividad durante más de `ttl` segundos.

    Las sesiones con una reserva en curso se conservan.

    Args:
        now: Instante de referencia (time.monotonic); por defecto el actual
        ttl: Segundos de inactividad permitidos

    Returns:
        Número de sesiones descartadas
    """
    now = time.monotonic() if now is None else now
    expired = []
    for session_id, seen in last_seen.items():
        controller = sessions.get(session_id)
        if now - seen > ttl and not (controller and controller.state.booking_in_flight):
            expired.append(session_id)
    for session_id in expired:
        sessions.pop(session_id, None)
        last_seen.pop(session_id, None)

    if expired:
        logger.info(f"Sesiones inactivas descartadas: {len(expired)} (activas: {len(sessions)})")
    return len(expired)

def create_session(client: BookingClient, now: Optional[float] = None) -> Tuple[str, BookingFlowController]:
    """
    Crea una nueva sesión de agendamiento.

    Antes de registrarla descarta las sesiones inactivas.

    Args:
        client: Cliente del webhook que usará la sesión
        now: Instante de creación (time.monotonic); por defecto el actual

    Returns:
        Tupla con (id_sesión, controlador)
    """
    now = time.monotonic() if now is None else now
    prune_sessions(now)

    session_id = str(uuid.uuid4())
    controller = BookingFlowController(client)
    sessions[session_id] = controller
    touch_session(session_id, now)
    logger.info(f"Sesión creada: {session_id[:8]} (activas: {len(sessions)})")
    return session_id, controller

def discard_session(session_id: str) -> bool:
    last_seen.pop(session_id, None)
    controller = sessions.pop(session_id, None)
    if controller is None:
        return False
    logger.info(f"Sesión eliminada: {session_id[:8]}")
    return True

def parse_requested_date(date_expression: str, today: date) -> date:
    """
    Interpreta la fecha pedida y aplica la fecha mínima del calendario.

    Raises:
        ValueError: Si la fecha no se entiende o ya pasó
    """
    selected_date = parse_date_expression(date_expression, today)
    if selected_date < today:
        raise ValueError("No es posible agendar en fechas pasadas.")
    return selected_date

def slots_message(state: BookingFlowState) -> Optional[str]:
    """Texto que acompaña la sección de horarios, en el orden en que se muestra."""
    if state.flags.loading:
        return LOADING_MESSAGE
    if state.flags.error_message or state.slots:
        return None
    if state.flags.has_searched:
        return NO_SLOTS_MESSAGE
    return INSTRUCTION_MESSAGE

def build_flow_view(session_id: str, state: BookingFlowState) -> FlowView:
    """
    Construye la vista del flujo para la capa de presentación.

    Args:
        session_id: ID de la sesión
        state: Estado actual del flujo

    Returns:
        Vista serializable del flujo
    """
    confirmation = None
    if state.step == FlowState.CONFIRMED:
        confirmation = ConfirmationView(
            title=SUCCESS_TITLE,
            date_label=format_date_human_readable(state.selected_date),
            time=state.selected_slot.time if state.selected_slot else None,
            phone=state.contact.phone
        )

    return FlowView(
        session_id=session_id,
        step=state.step.value,
        contact=state.contact,
        selected_date=format_date_iso(state.selected_date),
        selected_date_label=format_date_human_readable(state.selected_date, include_year=False),
        slots=list(state.slots),
        selected_slot=state.selected_slot,
        loading=state.flags.loading,
        error=state.flags.error_message,
        has_searched=state.flags.has_searched,
        slots_message=slots_message(state) if state.step == FlowState.SELECTING_SLOT else None,
        can_confirm=transitions.can_confirm(state) and not state.flags.loading,
        confirm_label="Agendando..." if state.flags.loading else "Confirmar Cita",
        confirmation=confirmation
    )
