"""
Pruebas de las transiciones puras del flujo de agendamiento.
"""
from datetime import date

import pytest

from app.application.services import transitions
from app.domain.entities.models import (
    BookingPayload, ContactInfo, FlowState, InvalidTransitionError, Slot,
    SlotUnavailableError, ValidationError
)

from conftest import JUAN, TODAY


@pytest.fixture
def state():
    return transitions.initial_state(TODAY)


@pytest.fixture
def selecting(state):
    return transitions.submit_info(transitions.update_contact(state, **JUAN))


def test_initial_state(state):
    assert state.step == FlowState.COLLECTING_INFO
    assert state.contact == ContactInfo()
    assert state.selected_date == TODAY
    assert state.slots == ()
    assert state.selected_slot is None
    assert not state.flags.loading
    assert state.flags.error_message == ""
    assert not state.flags.has_searched


def test_update_contact_is_field_by_field(state):
    state = transitions.update_contact(state, name="Juan Pérez")
    state = transitions.update_contact(state, phone="3001234567")
    assert state.contact == ContactInfo(name="Juan Pérez", phone="3001234567")


def test_update_contact_rejects_unknown_field(state):
    with pytest.raises(ValueError):
        transitions.update_contact(state, address="Calle 1")


def test_contact_is_frozen_after_step_one(selecting):
    with pytest.raises(InvalidTransitionError):
        transitions.update_contact(selecting, name="Otro")


@pytest.mark.parametrize("empty_field", ["name", "phone", "email", "service"])
def test_submit_info_requires_every_field(state, empty_field):
    state = transitions.update_contact(state, **{**JUAN, empty_field: ""})

    new_state = transitions.submit_info(state)

    assert new_state.step == FlowState.COLLECTING_INFO
    assert new_state.flags.error_message == transitions.INFO_REQUIRED_MESSAGE


def test_validate_contact_lists_missing_fields():
    with pytest.raises(ValidationError) as exc_info:
        transitions.validate_contact(ContactInfo(name="Juan", service="Psicología"))
    assert exc_info.value.missing_fields == ["phone", "email"]


def test_contact_missing_fields_in_declaration_order():
    assert ContactInfo(name="Juan").missing_fields() == ["phone", "email", "service"]
    assert ContactInfo(**JUAN).missing_fields() == []


def test_submit_info_clears_previous_error(state):
    state = transitions.submit_info(state)
    assert state.flags.error_message

    state = transitions.submit_info(transitions.update_contact(state, **JUAN))

    assert state.step == FlowState.SELECTING_SLOT
    assert state.flags.error_message == ""


def test_date_search_clears_selection_and_bumps_generation(selecting):
    selecting = transitions.apply_slots(
        transitions.begin_date_search(selecting, date(2024, 5, 1)), 1, [Slot(id="s1", time="09:00")]
    )
    selecting = transitions.select_slot(selecting, "s1")

    searching = transitions.begin_date_search(selecting, date(2024, 5, 2))

    assert searching.generation == selecting.generation + 1
    assert searching.selected_date == date(2024, 5, 2)
    assert searching.slots == ()
    assert searching.selected_slot is None
    assert searching.flags.loading
    assert searching.flags.has_searched


def test_stale_slots_are_ignored(selecting):
    first = transitions.begin_date_search(selecting, date(2024, 5, 1))
    second = transitions.begin_date_search(first, date(2024, 5, 2))

    after_stale = transitions.apply_slots(second, first.generation, [Slot(id="a", time="08:00")])
    assert after_stale is second

    after_stale_error = transitions.apply_slots_failure(second, first.generation)
    assert after_stale_error is second


def test_slot_failure_sets_generic_message(selecting):
    searching = transitions.begin_date_search(selecting, date(2024, 5, 1))

    failed = transitions.apply_slots_failure(searching, searching.generation)

    assert failed.flags.error_message == "Error al obtener horarios."
    assert not failed.flags.loading
    assert failed.slots == ()


def test_select_unknown_slot(selecting):
    with pytest.raises(SlotUnavailableError):
        transitions.select_slot(selecting, "no-existe")


def test_select_slot_matches_numeric_ids(selecting):
    searching = transitions.begin_date_search(selecting, date(2024, 5, 1))
    loaded = transitions.apply_slots(searching, searching.generation, [Slot(id=7, time="10:00")])

    assert transitions.select_slot(loaded, "7").selected_slot == Slot(id=7, time="10:00")


def test_build_booking_payload(selecting):
    searching = transitions.begin_date_search(selecting, date(2024, 5, 1))
    loaded = transitions.apply_slots(searching, searching.generation, [Slot(id="s1", time="09:00")])

    payload = transitions.build_booking_payload(transitions.select_slot(loaded, "s1"))

    assert payload == BookingPayload(**JUAN, date="2024-05-01", time="09:00")


def test_begin_booking_requires_selected_slot(selecting):
    assert not transitions.can_confirm(selecting)
    with pytest.raises(InvalidTransitionError):
        transitions.begin_booking(selecting)


def test_go_back_keeps_contact_and_discards_slots(selecting):
    searching = transitions.begin_date_search(selecting, date(2024, 5, 1))

    back = transitions.go_back(searching)

    assert back.step == FlowState.COLLECTING_INFO
    assert back.contact == selecting.contact
    assert back.slots == ()
    assert not back.flags.loading
    assert not transitions.is_current(back, searching.generation)


def test_reset_invalidates_pending_responses(selecting):
    searching = transitions.begin_date_search(selecting, date(2024, 5, 1))

    fresh = transitions.reset(searching, TODAY)

    assert fresh.step == FlowState.COLLECTING_INFO
    assert fresh.contact == ContactInfo()
    assert fresh.generation > searching.generation
