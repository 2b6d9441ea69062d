"""
Rutas y endpoints del flujo de agendamiento.
Define los endpoints HTTP que expone cada paso del formulario.
"""
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException

from app.infrastructure.config.config.settings import get_settings
from app.domain.entities.models import (
    ContactUpdate, DateSelectionRequest, FlowView, ServiceType, SlotSelectionRequest
)
from app.application.services.booking_flow import BookingFlowController
from app.infrastructure.external.booking.booking_client import BookingClient
from app.presentation.booking.processors import (
    build_flow_view, create_session, discard_session, parse_requested_date, sessions, touch_session
)

# Crear router para los endpoints del agendamiento
router = APIRouter(prefix="/booking", tags=["booking"])

def get_booking_client() -> BookingClient:
    """
    Construye el cliente del webhook a partir de la configuración.

    Raises:
        HTTPException: Si falta la URL del webhook
    """
    settings = get_settings()
    webhook_url = settings["booking"]["webhook_url"]
    if not webhook_url:
        raise HTTPException(status_code=503, detail="Faltan variables de entorno: BOOKING_WEBHOOK_URL")
    return BookingClient(webhook_url, timeout=settings["booking"]["request_timeout"])

def get_controller(session_id: str) -> BookingFlowController:
    controller = sessions.get(session_id)
    if controller is None:
        raise HTTPException(status_code=404, detail="Sesión no encontrada")
    touch_session(session_id)
    return controller

@router.get("/services")
async def list_services():
    """Servicios disponibles para agendar."""
    return {"services": [service.value for service in ServiceType]}

@router.post("/sessions", response_model=FlowView, status_code=201)
async def start_session(client: BookingClient = Depends(get_booking_client)):
    """Inicia un nuevo flujo de agendamiento."""
    session_id, controller = create_session(client)
    return build_flow_view(session_id, controller.state)

@router.get("/sessions/{session_id}", response_model=FlowView)
async def get_flow(session_id: str, controller: BookingFlowController = Depends(get_controller)):
    """Retorna el estado actual del flujo."""
    return build_flow_view(session_id, controller.state)

@router.delete("/sessions/{session_id}")
async def end_session(session_id: str):
    """Elimina la sesión."""
    if not discard_session(session_id):
        raise HTTPException(status_code=404, detail="Sesión no encontrada")
    return {"success": True, "timestamp": datetime.now().isoformat()}

@router.patch("/sessions/{session_id}/contact", response_model=FlowView)
async def update_contact(
    session_id: str,
    update: ContactUpdate,
    controller: BookingFlowController = Depends(get_controller)
):
    """
    Edita campos del formulario de contacto.

    Args:
        session_id: ID de la sesión
        update: Campos a modificar; los omitidos no cambian
        controller: Flujo de la sesión

    Returns:
        Vista actualizada del flujo
    """
    fields = update.model_dump(exclude_unset=True, mode="json")
    state = controller.update_contact(**{name: value or "" for name, value in fields.items()})
    return build_flow_view(session_id, state)

@router.post("/sessions/{session_id}/info", response_model=FlowView)
async def submit_info(session_id: str, controller: BookingFlowController = Depends(get_controller)):
    """Envía el formulario de contacto y avanza al calendario."""
    return build_flow_view(session_id, controller.submit_info())

@router.post("/sessions/{session_id}/date", response_model=FlowView)
async def select_date(
    session_id: str,
    request: DateSelectionRequest,
    controller: BookingFlowController = Depends(get_controller)
):
    """
    Selecciona un día y consulta los horarios disponibles.

    Args:
        session_id: ID de la sesión
        request: Fecha en formato YYYY-MM-DD o en lenguaje natural
        controller: Flujo de la sesión

    Returns:
        Vista del flujo con los horarios del día
    """
    try:
        selected_date = parse_requested_date(request.date, controller.today_provider())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    state = await controller.select_date(selected_date)
    return build_flow_view(session_id, state)

@router.post("/sessions/{session_id}/slot", response_model=FlowView)
async def select_slot(
    session_id: str,
    request: SlotSelectionRequest,
    controller: BookingFlowController = Depends(get_controller)
):
    """Selecciona un horario de la lista vigente."""
    return build_flow_view(session_id, controller.select_slot(request.slot_id))

@router.post("/sessions/{session_id}/confirm", response_model=FlowView)
async def confirm(session_id: str, controller: BookingFlowController = Depends(get_controller)):
    """Confirma la cita con el horario seleccionado."""
    state = await controller.confirm()
    return build_flow_view(session_id, state)

@router.post("/sessions/{session_id}/back", response_model=FlowView)
async def go_back(session_id: str, controller: BookingFlowController = Depends(get_controller)):
    """Regresa al formulario de contacto."""
    return build_flow_view(session_id, controller.go_back())

@router.post("/sessions/{session_id}/reset", response_model=FlowView)
async def reset(session_id: str, controller: BookingFlowController = Depends(get_controller)):
    """Reinicia el flujo para agendar otra cita."""
    return build_flow_view(session_id, controller.reset())

@router.get("/health")
async def health_check():
    """Endpoint para verificar el estado del servicio."""
    return {"status": "healthy", "timestamp": datetime.now().isoformat(), "sessions": len(sessions)}
