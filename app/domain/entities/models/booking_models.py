"""
Modelos específicos relacionados con reservas y disponibilidad.
Define las estructuras de datos utilizadas en la gestión de slots y reservas.
"""
from enum import Enum
from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

class ServiceType(str, Enum):
    """Servicios que se pueden agendar"""
    PSICOLOGIA = "Psicología"
    MEDICINA_GENERAL = "Medicina General"
    MEDICINA_ALTERNATIVA = "Medicina Alternativa"
    TERAPIA_FISICA = "Terapia Física"

class ContactInfo(BaseModel):
    """Datos de contacto capturados en el primer paso del formulario"""
    model_config = ConfigDict(frozen=True)

    name: str = Field("", description="Nombre completo")
    phone: str = Field("", description="Teléfono de contacto")
    email: str = Field("", description="Correo electrónico")
    service: str = Field("", description="Servicio solicitado")

    def missing_fields(self) -> List[str]:
        """Retorna los nombres de los campos obligatorios que están vacíos."""
        return [name for name, value in self.model_dump().items() if not value]

class Slot(BaseModel):
    """Horario disponible devuelto por el servicio remoto"""
    model_config = ConfigDict(frozen=True)

    id: Optional[Union[int, str]] = Field(None, description="Identificador del slot")
    time: str = Field(..., description="Hora del slot (HH:MM)")

class BookingPayload(BaseModel):
    """Datos enviados al servicio remoto al confirmar una reserva"""
    model_config = ConfigDict(frozen=True)

    name: str
    phone: str
    email: str
    service: str
    date: str = Field(..., description="Fecha seleccionada (YYYY-MM-DD)")
    time: str = Field(..., description="Hora seleccionada (HH:MM)")

    def to_request_body(self) -> Dict[str, Any]:
        return {"action": "create_booking", **self.model_dump()}
