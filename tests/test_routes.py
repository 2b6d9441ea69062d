"""
Pruebas de la API HTTP del flujo de agendamiento.
"""
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.application.services.tools.date_utils import format_date_iso, today_local
from app.domain.entities.models import ServiceError, Slot
from app.presentation.booking import processors, routes

from conftest import JUAN


@pytest.fixture
def client(fake_client):
    """Cliente HTTP con el webhook simulado"""
    app.dependency_overrides[routes.get_booking_client] = lambda: fake_client
    processors.sessions.clear()
    processors.last_seen.clear()
    yield TestClient(app)
    app.dependency_overrides.clear()
    processors.sessions.clear()
    processors.last_seen.clear()


@pytest.fixture
def session_id(client):
    return client.post("/booking/sessions").json()["session_id"]


def _fill_contact(client, session_id):
    response = client.patch(f"/booking/sessions/{session_id}/contact", json=JUAN)
    assert response.status_code == 200
    return client.post(f"/booking/sessions/{session_id}/info")


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "online"
    assert client.get("/booking/health").json()["status"] == "healthy"


def test_list_services(client):
    assert client.get("/booking/services").json()["services"] == [
        "Psicología", "Medicina General", "Medicina Alternativa", "Terapia Física"
    ]


def test_new_session_view(client):
    response = client.post("/booking/sessions")

    assert response.status_code == 201
    view = response.json()
    assert view["step"] == "collecting_info"
    assert view["contact"] == {"name": "", "phone": "", "email": "", "service": ""}
    assert view["selected_date"] == format_date_iso(today_local())
    assert view["can_confirm"] is False


def test_missing_webhook_url(client, monkeypatch):
    app.dependency_overrides.clear()
    monkeypatch.setattr(routes, "get_settings", lambda: {"booking": {"webhook_url": None, "request_timeout": None}})

    response = client.post("/booking/sessions")

    assert response.status_code == 503
    assert "BOOKING_WEBHOOK_URL" in response.json()["detail"]


def test_unknown_session(client):
    assert client.get("/booking/sessions/no-existe").status_code == 404


def test_contact_input_is_stripped_and_validated(client, session_id):
    response = client.patch(
        f"/booking/sessions/{session_id}/contact", json={"name": "  Juan Pérez  "}
    )
    assert response.json()["contact"]["name"] == "Juan Pérez"

    response = client.patch(
        f"/booking/sessions/{session_id}/contact", json={"service": "Odontología"}
    )
    assert response.status_code == 422


def test_incomplete_info_returns_form_error(client, session_id):
    client.patch(f"/booking/sessions/{session_id}/contact", json={"name": "Juan Pérez"})

    view = client.post(f"/booking/sessions/{session_id}/info").json()

    assert view["step"] == "collecting_info"
    assert view["error"] == "Por favor completa todos los campos."


def test_full_booking_flow(client, session_id, fake_client):
    fake_client.fetch_slots.return_value = [Slot(id="s1", time="09:00")]
    tomorrow = today_local() + timedelta(days=1)

    view = _fill_contact(client, session_id).json()
    assert view["step"] == "selecting_slot"
    assert view["slots_message"] == "Selecciona un día en el calendario para ver horarios."

    view = client.post(f"/booking/sessions/{session_id}/date", json={"date": "mañana"}).json()
    assert view["selected_date"] == format_date_iso(tomorrow)
    assert view["slots"] == [{"id": "s1", "time": "09:00"}]
    assert view["slots_message"] is None
    assert view["can_confirm"] is False

    view = client.post(f"/booking/sessions/{session_id}/slot", json={"slot_id": "s1"}).json()
    assert view["selected_slot"] == {"id": "s1", "time": "09:00"}
    assert view["can_confirm"] is True
    assert view["confirm_label"] == "Confirmar Cita"

    view = client.post(f"/booking/sessions/{session_id}/confirm").json()
    assert view["step"] == "confirmed"
    assert view["confirmation"]["title"] == "¡Cita Agendada!"
    assert view["confirmation"]["time"] == "09:00"
    assert view["confirmation"]["phone"] == "3001234567"

    payload = fake_client.submit_booking.call_args.args[0]
    assert payload.model_dump() == {**JUAN, "date": format_date_iso(tomorrow), "time": "09:00"}

    view = client.post(f"/booking/sessions/{session_id}/reset").json()
    assert view["step"] == "collecting_info"
    assert view["contact"] == {"name": "", "phone": "", "email": "", "service": ""}


def test_empty_search_message(client, session_id, fake_client):
    _fill_contact(client, session_id)

    view = client.post(f"/booking/sessions/{session_id}/date", json={"date": "hoy"}).json()

    assert view["slots"] == []
    assert view["slots_message"] == "No hay horarios disponibles para este día."


def test_fetch_error_hides_slot_message(client, session_id, fake_client):
    fake_client.fetch_slots.side_effect = ServiceError("slot fetch")
    _fill_contact(client, session_id)

    view = client.post(f"/booking/sessions/{session_id}/date", json={"date": "hoy"}).json()

    assert view["error"] == "Error al obtener horarios."
    assert view["slots_message"] is None


def test_past_or_invalid_dates_are_rejected(client, session_id, fake_client):
    _fill_contact(client, session_id)
    yesterday = today_local() - timedelta(days=1)

    past = client.post(f"/booking/sessions/{session_id}/date", json={"date": format_date_iso(yesterday)})
    invalid = client.post(f"/booking/sessions/{session_id}/date", json={"date": "algún día"})

    assert past.status_code == 400
    assert invalid.status_code == 400
    fake_client.fetch_slots.assert_not_called()


def test_out_of_step_operations(client, session_id):
    response = client.post(f"/booking/sessions/{session_id}/date", json={"date": "hoy"})
    assert response.status_code == 409
    assert response.json()["error"] == "InvalidTransitionError"

    response = client.post(f"/booking/sessions/{session_id}/back")
    assert response.status_code == 409


def test_unknown_slot(client, session_id):
    _fill_contact(client, session_id)

    response = client.post(f"/booking/sessions/{session_id}/slot", json={"slot_id": "s404"})

    assert response.status_code == 404
    assert response.json()["error"] == "SlotUnavailableError"


def test_back_keeps_contact(client, session_id):
    _fill_contact(client, session_id)

    view = client.post(f"/booking/sessions/{session_id}/back").json()

    assert view["step"] == "collecting_info"
    assert view["contact"] == JUAN


def test_delete_session(client, session_id):
    assert client.delete(f"/booking/sessions/{session_id}").status_code == 200
    assert client.get(f"/booking/sessions/{session_id}").status_code == 404
    assert client.delete(f"/booking/sessions/{session_id}").status_code == 404


def test_idle_sessions_are_pruned(client, fake_client):
    idle_id, _ = processors.create_session(fake_client, now=0.0)
    active_id, _ = processors.create_session(fake_client, now=1000.0)
    processors.touch_session(active_id, now=1900.0)

    assert processors.prune_sessions(now=2000.0, ttl=1800) == 1

    assert idle_id not in processors.sessions
    assert idle_id not in processors.last_seen
    assert active_id in processors.sessions
    assert client.get(f"/booking/sessions/{idle_id}").status_code == 404


def test_sessions_with_booking_in_flight_are_kept(client, fake_client):
    session_id, controller = processors.create_session(fake_client, now=0.0)
    controller.state = controller.state.model_copy(update={"booking_in_flight": True})

    assert processors.prune_sessions(now=10_000.0, ttl=1800) == 0
    assert session_id in processors.sessions


def test_creating_a_session_prunes_idle_ones(client, fake_client):
    processors.create_session(fake_client, now=0.0)

    new_id, _ = processors.create_session(fake_client, now=1e9)

    assert list(processors.sessions) == [new_id]


def test_requests_refresh_session_activity(client, session_id):
    processors.last_seen[session_id] = 0.0

    client.get(f"/booking/sessions/{session_id}")

    assert processors.last_seen[session_id] > 0.0
