"""
Modelos específicos relacionados con errores.
Define las estructuras de datos y excepciones utilizadas para representar errores en la aplicación.
"""
from typing import List, Optional, TypedDict

class ErrorResult(TypedDict):
    """Modelo para representar un resultado de error"""
    error: str
    details: Optional[str]

class BookingFlowError(Exception):
    """Excepción base para errores del flujo de agendamiento."""
    status_code = 400

class ValidationError(BookingFlowError):
    """Faltan campos obligatorios de contacto al enviar el formulario."""
    status_code = 422

    def __init__(self, missing_fields: List[str]):
        self.missing_fields = missing_fields
        super().__init__(f"Campos obligatorios vacíos: {', '.join(missing_fields)}")

class ServiceError(BookingFlowError):
    """El servicio remoto de horarios/reservas respondió con error o no respondió."""
    status_code = 502

    def __init__(self, action: str):
        self.action = action
        super().__init__(f"{action} failed")

class InvalidTransitionError(BookingFlowError):
    """La operación no está permitida en el paso actual del flujo."""
    status_code = 409

class SlotUnavailableError(BookingFlowError):
    """El slot solicitado no pertenece a la lista de horarios vigente."""
    status_code = 404
