"""Appointment lifecycle: booking with slot checks, updates, deletion and day queries."""

import logging
from datetime import datetime, timedelta
from typing import Any, Callable

from clinic_backend.auth.identity import ROLE_ADMIN
from clinic_backend.core.dates import coerce_date, start_of_day
from clinic_backend.core.errors import AuthorizationError, ConflictError, NotFoundError, failure_prefix
from clinic_backend.schemas.appointment import AppointmentCreate, AppointmentUpdate
from clinic_backend.services.directory_service import DOCTORS_COLLECTION, PATIENTS_COLLECTION
from clinic_backend.services.slot_ledger import APPOINTMENTS_COLLECTION, SlotLedger
from clinic_backend.store.base import DocumentStore, Filter

logger = logging.getLogger(__name__)


class AppointmentService:
    def __init__(
        self,
        store: DocumentStore,
        slot_ledger: SlotLedger,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._store = store
        self._slot_ledger = slot_ledger
        self._clock = clock

    def create(self, data: AppointmentCreate, actor_id: str, actor_role: str | None) -> dict:
        """Book an appointment.

        Non-admin callers may only book for a patient record they created
        themselves. When a time is given the slot must be free of both
        appointments and locks. The availability check and the insert are not
        isolated from concurrent bookings.
        """
        with failure_prefix('create appointment'):
            patient = self._store.get(PATIENTS_COLLECTION, data.patient_id)
            if patient is None:
                raise NotFoundError('Patient not found')
            doctor = self._store.get(DOCTORS_COLLECTION, data.doctor_id)
            if doctor is None:
                raise NotFoundError('Doctor not found')

            if actor_role != ROLE_ADMIN and patient.get('createdBy') != actor_id:
                raise AuthorizationError('You can only book appointments for your own patient record')

            appointment_date = coerce_date(data.appointment_date, 'appointment date')

            if data.appointment_time and not self._slot_ledger.is_available(
                data.doctor_id, appointment_date, data.appointment_time
            ):
                raise ConflictError('This slot is no longer available')

            now = self._clock()
            appointment = {
                'patientId': data.patient_id,
                'patientName': patient.get('fullName') or '',
                'doctorId': data.doctor_id,
                'doctorName': doctor.get('fullName') or '',
                'appointmentDate': appointment_date,
                'appointmentTime': data.appointment_time,
                'serviceType': data.service_type,
                'duration': data.duration,
                'status': 'scheduled',
                'notes': data.notes,
                'createdAt': now,
                'updatedAt': now,
                'createdBy': actor_id,
            }
            appointment_id = self._store.create(APPOINTMENTS_COLLECTION, appointment)

        logger.info(
            'Appointment %s booked for patient %s with doctor %s on %s %s',
            appointment_id, data.patient_id, data.doctor_id, appointment_date.date(), data.appointment_time,
        )
        return {'id': appointment_id, **appointment}

    def get(self, appointment_id: str) -> dict | None:
        with failure_prefix('get appointment'):
            return self._store.get(APPOINTMENTS_COLLECTION, appointment_id)

    def list_today(self, doctor_id: str | None = None) -> list[dict]:
        with failure_prefix("get today's appointments"):
            today = start_of_day(self._clock())
            filters: list[Filter] = [
                ('appointmentDate', '>=', today),
                ('appointmentDate', '<', today + timedelta(days=1)),
            ]
            if doctor_id:
                filters.append(('doctorId', '==', doctor_id))
            return self._store.query(APPOINTMENTS_COLLECTION, filters)

    # Annotations on methods defined after this one resolve ``list`` to it, not the builtin.
    def list(
        self,
        status: str | None = None,
        doctor_id: str | None = None,
        patient_id: str | None = None,
        start_date: Any = None,
        end_date: Any = None,
    ) -> list[dict]:
        with failure_prefix('get appointments'):
            filters: list[Filter] = []
            if status:
                filters.append(('status', '==', status))
            if doctor_id:
                filters.append(('doctorId', '==', doctor_id))
            if patient_id:
                filters.append(('patientId', '==', patient_id))
            if start_date is not None:
                filters.append(('appointmentDate', '>=', coerce_date(start_date, 'start date')))
            if end_date is not None:
                filters.append(('appointmentDate', '<=', coerce_date(end_date, 'end date')))

            return self._store.query(
                APPOINTMENTS_COLLECTION,
                filters,
                order_by='appointmentDate',
                descending=True,
            )

    def update(self, appointment_id: str, patch: AppointmentUpdate) -> dict:
        """Merge ``patch`` into the appointment.

        A new date or time is not re-checked against the slot ledger.
        """
        with failure_prefix('update appointment'):
            changes = patch.changes()
            if changes.get('appointmentDate') is not None:
                changes['appointmentDate'] = coerce_date(changes['appointmentDate'], 'appointment date')
            else:
                changes.pop('appointmentDate', None)
            changes['updatedAt'] = self._clock()

            self._store.update(APPOINTMENTS_COLLECTION, appointment_id, changes)

            updated = self._store.get(APPOINTMENTS_COLLECTION, appointment_id)
            if updated is None:
                raise NotFoundError('Appointment not found after update')
            return updated

    def delete(self, appointment_id: str) -> None:
        with failure_prefix('delete appointment'):
            self._store.delete(APPOINTMENTS_COLLECTION, appointment_id)
        logger.info('Appointment %s deleted', appointment_id)
