"""
Configuración y fixtures de pruebas del flujo de agendamiento.

Reemplaza el webhook remoto por mocks para probar el flujo de forma aislada.
"""
import os
from datetime import date
from unittest.mock import AsyncMock

import pytest

# Antes de importar la app: no escribir app.log durante las pruebas
os.environ["LOG_FILE"] = ""
os.environ.setdefault("BOOKING_WEBHOOK_URL", "https://webhook.test/agendamiento")

from app.application.services.booking_flow import BookingFlowController
from app.infrastructure.external.booking.booking_client import BookingClient

WEBHOOK_URL = "https://webhook.test/agendamiento"
TODAY = date(2024, 4, 29)  # lunes

JUAN = {
    "name": "Juan Pérez",
    "phone": "3001234567",
    "email": "juan@x.com",
    "service": "Psicología",
}


@pytest.fixture
def transport():
    """Transporte HTTP simulado: retorna (status, cuerpo_json)"""
    return AsyncMock(return_value=(200, []))


@pytest.fixture
def booking_client(transport):
    """Cliente real sobre el transporte simulado"""
    return BookingClient(WEBHOOK_URL, transport=transport)


@pytest.fixture
def fake_client():
    """Cliente completamente simulado para probar el controlador"""
    client = AsyncMock(spec=BookingClient)
    client.fetch_slots.return_value = []
    client.submit_booking.return_value = True
    return client


@pytest.fixture
def controller(fake_client):
    return BookingFlowController(fake_client, today_provider=lambda: TODAY)


@pytest.fixture
def selecting_controller(controller):
    """Controlador con los datos de contacto ya enviados"""
    controller.update_contact(**JUAN)
    controller.submit_info()
    return controller
