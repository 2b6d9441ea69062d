"""
Modelos del flujo de agendamiento.
Define los pasos del asistente y la instantánea inmutable de su estado.
"""
from datetime import date
from enum import Enum
from typing import Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field

from app.domain.entities.models.booking_models import ContactInfo, Slot

class FlowState(str, Enum):
    """Pasos del asistente de agendamiento"""
    COLLECTING_INFO = "collecting_info"
    SELECTING_SLOT = "selecting_slot"
    CONFIRMED = "confirmed"

class StatusFlags(BaseModel):
    """Indicadores transitorios que consume la capa de presentación"""
    model_config = ConfigDict(frozen=True)

    loading: bool = False
    error_message: str = ""
    has_searched: bool = False

class BookingFlowState(BaseModel):
    """
    Instantánea del flujo de agendamiento.

    `generation` es el token de la búsqueda de horarios más reciente: sólo la
    respuesta emitida con ese token puede modificar `slots`.
    """
    model_config = ConfigDict(frozen=True)

    step: FlowState = FlowState.COLLECTING_INFO
    contact: ContactInfo = Field(default_factory=ContactInfo)
    selected_date: date
    slots: Tuple[Slot, ...] = ()
    selected_slot: Optional[Slot] = None
    flags: StatusFlags = Field(default_factory=StatusFlags)
    generation: int = 0
    booking_in_flight: bool = False
