"""
Modelos específicos relacionados con la API HTTP.
Define las estructuras de datos utilizadas en la comunicación con la capa de presentación.
"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from app.domain.entities.models.booking_models import ContactInfo, ServiceType, Slot

class ContactUpdate(BaseModel):
    """Modelo para editar uno o varios campos del formulario de contacto"""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, description="Nombre completo")
    phone: Optional[str] = Field(None, description="Teléfono")
    email: Optional[str] = Field(None, description="Correo electrónico")
    service: Optional[ServiceType] = Field(None, description="Servicio solicitado")

class DateSelectionRequest(BaseModel):
    """Modelo para seleccionar un día en el calendario"""
    date: str = Field(..., description="Fecha YYYY-MM-DD o expresión como 'mañana' o '15 de mayo'")

class SlotSelectionRequest(BaseModel):
    """Modelo para seleccionar un horario de la lista vigente"""
    slot_id: str = Field(..., description="ID del slot seleccionado")

class ConfirmationView(BaseModel):
    """Resumen mostrado cuando la cita queda agendada"""
    title: str
    date_label: str
    time: Optional[str]
    phone: str

class FlowView(BaseModel):
    """Estado del flujo tal como lo muestra el formulario"""
    session_id: str
    step: str
    contact: ContactInfo
    selected_date: str
    selected_date_label: str
    slots: List[Slot]
    selected_slot: Optional[Slot] = None
    loading: bool
    error: str
    has_searched: bool
    slots_message: Optional[str] = None
    can_confirm: bool
    confirm_label: str
    confirmation: Optional[ConfirmationView] = None
