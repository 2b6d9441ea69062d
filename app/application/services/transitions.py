"""
Transiciones del flujo de agendamiento.
Cada función recibe el estado actual y un evento y retorna el nuevo estado,
sin efectos secundarios. El controlador es quien ejecuta las llamadas remotas.
"""
from datetime import date
from typing import Any, Iterable, Optional

from app.domain.entities.models import (
    BookingFlowState, BookingPayload, ContactInfo, FlowState, InvalidTransitionError,
    Slot, SlotUnavailableError, StatusFlags, ValidationError
)
from app.application.services.tools.date_utils import format_date_iso

INFO_REQUIRED_MESSAGE = "Por favor completa todos los campos."
SLOTS_ERROR_MESSAGE = "Error al obtener horarios."
BOOKING_ERROR_MESSAGE = "Error al agendar. Intenta de nuevo."

def _require_step(state: BookingFlowState, step: FlowState, action: str) -> None:
    if state.step != step:
        raise InvalidTransitionError(
            f"'{action}' no está permitido en el paso '{state.step.value}'"
        )

def _with_flags(state: BookingFlowState, **changes: Any) -> BookingFlowState:
    return state.model_copy(update={"flags": state.flags.model_copy(update=changes)})

def initial_state(today: date, generation: int = 0) -> BookingFlowState:
    return BookingFlowState(selected_date=today, generation=generation)

def validate_contact(contact: ContactInfo) -> None:
    """
    Verifica que los cuatro campos de contacto tengan valor.

    Raises:
        ValidationError: Con la lista de campos vacíos
    """
    missing = contact.missing_fields()
    if missing:
        raise ValidationError(missing)

def update_contact(state: BookingFlowState, **fields: str) -> BookingFlowState:
    _require_step(state, FlowState.COLLECTING_INFO, "update_contact")
    unknown = set(fields) - set(ContactInfo.model_fields)
    if unknown:
        raise ValueError(f"Campos desconocidos: {', '.join(sorted(unknown))}")
    return state.model_copy(update={"contact": state.contact.model_copy(update=fields)})

def submit_info(state: BookingFlowState) -> BookingFlowState:
    _require_step(state, FlowState.COLLECTING_INFO, "submit_info")
    try:
        validate_contact(state.contact)
    except ValidationError:
        return _with_flags(state, error_message=INFO_REQUIRED_MESSAGE)

    state = state.model_copy(update={
        "step": FlowState.SELECTING_SLOT,
        "slots": (),
        "selected_slot": None,
    })
    return _with_flags(state, error_message="")

def begin_date_search(state: BookingFlowState, selected_date: date) -> BookingFlowState:
    """
    Inicia la búsqueda de horarios para un día.

    Incrementa `generation`: el valor resultante es el token que debe
    acompañar a la respuesta para que se aplique.
    """
    _require_step(state, FlowState.SELECTING_SLOT, "select_date")
    if state.booking_in_flight:
        raise InvalidTransitionError("Hay una reserva en curso")
    return state.model_copy(update={
        "selected_date": selected_date,
        "selected_slot": None,
        "slots": (),
        "generation": state.generation + 1,
        "flags": StatusFlags(loading=True, error_message="", has_searched=True),
    })

def is_current(state: BookingFlowState, token: int) -> bool:
    return state.generation == token

def apply_slots(state: BookingFlowState, token: int, slots: Iterable[Slot]) -> BookingFlowState:
    # Respuesta de una búsqueda ya reemplazada: se descarta
    if not is_current(state, token):
        return state
    state = state.model_copy(update={"slots": tuple(slots)})
    return _with_flags(state, loading=False)

def apply_slots_failure(state: BookingFlowState, token: int) -> BookingFlowState:
    if not is_current(state, token):
        return state
    state = state.model_copy(update={"slots": ()})
    return _with_flags(state, loading=False, error_message=SLOTS_ERROR_MESSAGE)

def find_slot(state: BookingFlowState, slot_id: Any) -> Optional[Slot]:
    # Los IDs llegan como texto desde la API y pueden ser numéricos en el webhook
    return next((slot for slot in state.slots if str(slot.id) == str(slot_id)), None)

def select_slot(state: BookingFlowState, slot_id: Any) -> BookingFlowState:
    _require_step(state, FlowState.SELECTING_SLOT, "select_slot")
    slot = find_slot(state, slot_id)
    if slot is None:
        raise SlotUnavailableError(f"El horario '{slot_id}' no está disponible")
    return state.model_copy(update={"selected_slot": slot})

def can_confirm(state: BookingFlowState) -> bool:
    return (
        state.step == FlowState.SELECTING_SLOT
        and state.selected_slot is not None
        and not state.booking_in_flight
    )

def build_booking_payload(state: BookingFlowState) -> BookingPayload:
    if state.selected_slot is None:
        raise InvalidTransitionError("No hay un horario seleccionado")
    return BookingPayload(
        **state.contact.model_dump(),
        date=format_date_iso(state.selected_date),
        time=state.selected_slot.time
    )

def begin_booking(state: BookingFlowState) -> BookingFlowState:
    if not can_confirm(state):
        raise InvalidTransitionError("No se puede confirmar en el estado actual")
    state = state.model_copy(update={"booking_in_flight": True})
    return _with_flags(state, loading=True)

def booking_succeeded(state: BookingFlowState) -> BookingFlowState:
    state = state.model_copy(update={"step": FlowState.CONFIRMED, "booking_in_flight": False})
    return _with_flags(state, loading=False)

def booking_failed(state: BookingFlowState) -> BookingFlowState:
    state = state.model_copy(update={"booking_in_flight": False})
    return _with_flags(state, loading=False, error_message=BOOKING_ERROR_MESSAGE)

def go_back(state: BookingFlowState) -> BookingFlowState:
    """Regresa al formulario conservando el contacto; invalida búsquedas en curso."""
    _require_step(state, FlowState.SELECTING_SLOT, "go_back")
    if state.booking_in_flight:
        raise InvalidTransitionError("Hay una reserva en curso")
    state = state.model_copy(update={
        "step": FlowState.COLLECTING_INFO,
        "slots": (),
        "selected_slot": None,
        "generation": state.generation + 1,
    })
    return _with_flags(state, loading=False, error_message="")

def reset(state: BookingFlowState, today: date) -> BookingFlowState:
    return initial_state(today, generation=state.generation + 1)
