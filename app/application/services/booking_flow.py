"""
Controlador del flujo de agendamiento.
Este módulo define el asistente de tres pasos: datos de contacto, selección de
día y horario, y confirmación de la cita contra el webhook remoto.
"""
import logging
from datetime import date
from typing import Any, Callable

from app.domain.entities.models import BookingFlowState, ServiceError
from app.application.services import transitions
from app.application.services.tools.date_utils import today_local
from app.infrastructure.external.booking.booking_client import BookingClient

logger = logging.getLogger(__name__)

class BookingFlowController:
    """
    Clase que encapsula el flujo de agendamiento de una sesión.
    Es la única dueña del estado y aplica las transiciones puras a medida que
    el cliente remoto responde.
    """

    def __init__(self, client: BookingClient, today_provider: Callable[[], date] = today_local):
        """
        Inicializa el flujo en el paso de datos de contacto.

        Args:
            client: Cliente del webhook de horarios y reservas
            today_provider: Función que retorna la fecha de hoy
        """
        self.client = client
        self.today_provider = today_provider
        self.state = transitions.initial_state(self.today_provider())

    def _transition(self, new_state: BookingFlowState, reason: str = "") -> BookingFlowState:
        if new_state.step != self.state.step:
            logger.info(
                f"Transición {self.state.step.value} -> {new_state.step.value}"
                + (f" ({reason})" if reason else "")
            )
        self.state = new_state
        return self.state

    def update_contact(self, **fields: str) -> BookingFlowState:
        """Actualiza uno o varios campos del formulario de contacto."""
        return self._transition(transitions.update_contact(self.state, **fields))

    def submit_info(self) -> BookingFlowState:
        """
        Envía el formulario de contacto.

        Si falta algún campo el flujo se queda en el paso actual con un mensaje
        de error; en caso contrario avanza a la selección de horario.
        """
        new_state = transitions.submit_info(self.state)
        if new_state.flags.error_message:
            missing = self.state.contact.missing_fields()
            logger.info(f"Formulario incompleto, faltan: {', '.join(missing)}")
        return self._transition(new_state, "datos de contacto completos")

    async def select_date(self, selected_date: date) -> BookingFlowState:
        """
        Selecciona un día y consulta sus horarios.

        Sólo la respuesta de la búsqueda más reciente actualiza el estado; las
        respuestas de búsquedas reemplazadas se descartan.

        Args:
            selected_date: Día seleccionado en el calendario

        Returns:
            Estado después de procesar la respuesta
        """
        self._transition(transitions.begin_date_search(self.state, selected_date))
        token = self.state.generation
        service = self.state.contact.service

        try:
            slots = await self.client.fetch_slots(selected_date, service)
        except ServiceError as e:
            if not transitions.is_current(self.state, token):
                logger.info(f"Error de búsqueda obsoleta descartado (token {token})")
                return self.state
            logger.error(f"Error al obtener horarios para {selected_date}: {str(e.__cause__ or e)}")
            return self._transition(transitions.apply_slots_failure(self.state, token))
        except Exception:
            # El flujo no puede quedar en carga aunque el error sea inesperado
            if transitions.is_current(self.state, token):
                logger.exception(f"Error inesperado al obtener horarios para {selected_date}")
                self._transition(transitions.apply_slots_failure(self.state, token))
            raise

        if not transitions.is_current(self.state, token):
            logger.info(f"Respuesta obsoleta descartada (token {token}, actual {self.state.generation})")
            return self.state
        return self._transition(transitions.apply_slots(self.state, token, slots))

    def select_slot(self, slot_id: Any) -> BookingFlowState:
        """Selecciona un horario de la lista vigente."""
        return self._transition(transitions.select_slot(self.state, slot_id))

    async def confirm(self) -> BookingFlowState:
        """
        Confirma la cita con el horario seleccionado.

        Sin horario seleccionado, fuera del paso de selección o con una reserva
        en curso no hace nada.

        Returns:
            Estado después de la respuesta del webhook
        """
        if not transitions.can_confirm(self.state):
            return self.state

        self._transition(transitions.begin_booking(self.state))
        token = self.state.generation
        payload = transitions.build_booking_payload(self.state)

        try:
            await self.client.submit_booking(payload)
        except ServiceError as e:
            if not transitions.is_current(self.state, token):
                return self.state
            logger.error(f"Error al agendar: {str(e.__cause__ or e)}")
            return self._transition(transitions.booking_failed(self.state))
        except Exception:
            if transitions.is_current(self.state, token):
                logger.exception("Error inesperado al agendar")
                self._transition(transitions.booking_failed(self.state))
            raise

        # El flujo se reinició mientras la reserva estaba en curso
        if not transitions.is_current(self.state, token):
            logger.warning("Confirmación recibida después de reiniciar el flujo, se descarta")
            return self.state
        return self._transition(transitions.booking_succeeded(self.state), "reserva creada")

    def go_back(self) -> BookingFlowState:
        """Regresa al formulario de contacto."""
        return self._transition(transitions.go_back(self.state), "regresar")

    def reset(self) -> BookingFlowState:
        """Reinicia el flujo completo."""
        return self._transition(transitions.reset(self.state, self.today_provider()), "reinicio")
