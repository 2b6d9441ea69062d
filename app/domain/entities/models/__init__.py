"""
Exportación de todos los modelos de dominio.
Este módulo centraliza la exportación de todos los modelos para facilitar su importación.
"""
# Modelos de reservas
from app.domain.entities.models.booking_models import (
    ServiceType,
    ContactInfo,
    Slot,
    BookingPayload
)

# Modelos del flujo
from app.domain.entities.models.flow_models import (
    FlowState,
    StatusFlags,
    BookingFlowState
)

# Modelos de la API
from app.domain.entities.models.api_models import (
    ContactUpdate,
    DateSelectionRequest,
    SlotSelectionRequest,
    ConfirmationView,
    FlowView
)

# Modelos de errores
from app.domain.entities.models.error_models import (
    ErrorResult,
    BookingFlowError,
    ValidationError,
    ServiceError,
    InvalidTransitionError,
    SlotUnavailableError
)

# Exportar todos los modelos para facilitar importación
__all__ = [
    # Reservas
    'ServiceType',
    'ContactInfo',
    'Slot',
    'BookingPayload',

    # Flujo
    'FlowState',
    'StatusFlags',
    'BookingFlowState',

    # API
    'ContactUpdate',
    'DateSelectionRequest',
    'SlotSelectionRequest',
    'ConfirmationView',
    'FlowView',

    # Errores
    'ErrorResult',
    'BookingFlowError',
    'ValidationError',
    'ServiceError',
    'InvalidTransitionError',
    'SlotUnavailableError'
]
