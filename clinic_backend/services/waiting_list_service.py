"""Waiting list: per-doctor queue of patients, aged forward on read and promotable to appointments."""

import logging
from datetime import datetime
from typing import Any, Callable

from clinic_backend.auth.identity import ROLE_ADMIN
from clinic_backend.core.dates import coerce_date, day_key, start_of_day
from clinic_backend.core.errors import ClinicError, ConflictError, NotFoundError, ValidationError, failure_prefix
from clinic_backend.schemas.appointment import DEFAULT_APPOINTMENT_DURATION_MINUTES, AppointmentCreate
from clinic_backend.schemas.waiting_list import WaitingListCreate, WaitingListUpdate
from clinic_backend.services.appointment_service import AppointmentService
from clinic_backend.services.directory_service import DOCTORS_COLLECTION, PATIENTS_COLLECTION
from clinic_backend.store.base import DocumentStore

logger = logging.getLogger(__name__)

WAITING_LIST_COLLECTION = 'waitingList'
STATUS_WAITING = 'waiting'


def _preferred_moment(entry: dict) -> datetime:
    try:
        return coerce_date(entry.get('preferredDate'))
    except ValidationError:
        return datetime.max


class WaitingListService:
    def __init__(
        self,
        store: DocumentStore,
        appointments: AppointmentService,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._store = store
        self._appointments = appointments
        self._clock = clock

    def _next_priority(self, doctor_id: str) -> int:
        waiting = self._store.query(
            WAITING_LIST_COLLECTION,
            [('doctorId', '==', doctor_id), ('status', '==', STATUS_WAITING)],
        )
        return max((entry.get('priority') or 0 for entry in waiting), default=0) + 1

    def add(self, data: WaitingListCreate, actor_id: str) -> dict:
        with failure_prefix('add to waiting list'):
            patient = self._store.get(PATIENTS_COLLECTION, data.patient_id)
            if patient is None:
                raise NotFoundError('Patient not found')
            doctor = self._store.get(DOCTORS_COLLECTION, data.doctor_id)
            if doctor is None:
                raise NotFoundError('Doctor not found')

            priority = data.priority if data.priority is not None else self._next_priority(data.doctor_id)
            now = self._clock()
            entry = {
                'patientId': data.patient_id,
                'patientName': patient.get('fullName') or '',
                'doctorId': data.doctor_id,
                'doctorName': doctor.get('fullName') or '',
                'serviceType': data.service_type,
                'preferredDate': coerce_date(data.preferred_date, 'preferred date'),
                'status': STATUS_WAITING,
                'priority': priority,
                'notes': data.notes,
                'createdAt': now,
                'updatedAt': now,
                'createdBy': actor_id,
            }
            entry_id = self._store.create(WAITING_LIST_COLLECTION, entry)

        logger.info('Waiting list entry %s added for doctor %s at priority %d', entry_id, data.doctor_id, priority)
        return {'id': entry_id, **entry}

    def get(self, entry_id: str) -> dict | None:
        with failure_prefix('get waiting list entry'):
            return self._store.get(WAITING_LIST_COLLECTION, entry_id)

    def _age_entries(self, entries: list[dict]) -> None:
        """Move every waiting entry whose preferred day has passed to today, in place and in the store."""
        now = self._clock()
        today = start_of_day(now)
        for entry in entries:
            if entry.get('status') != STATUS_WAITING:
                continue
            try:
                preferred = start_of_day(entry.get('preferredDate'))
            except ValidationError:
                continue
            if preferred >= today:
                continue

            try:
                self._store.update(WAITING_LIST_COLLECTION, entry['id'], {'preferredDate': today, 'updatedAt': now})
            except ClinicError:
                logger.exception('Failed to move waiting list entry %s to today', entry['id'])
                continue
            entry['preferredDate'] = today
            entry['updatedAt'] = now

    def list(
        self,
        doctor_id: str | None = None,
        patient_id: str | None = None,
        status: str | None = None,
        date: Any = None,
    ) -> list[dict]:
        """Return matching entries ordered by (preferredDate, priority).

        Reading has a side effect: waiting entries with a past preferred date
        are first advanced to today and persisted.
        """
        with failure_prefix('get waiting list'):
            entries = self._store.query(WAITING_LIST_COLLECTION)
            self._age_entries(entries)

            if doctor_id:
                entries = [entry for entry in entries if entry.get('doctorId') == doctor_id]
            if patient_id:
                entries = [entry for entry in entries if entry.get('patientId') == patient_id]
            if status:
                entries = [entry for entry in entries if entry.get('status') == status]
            if date is not None:
                wanted_day = day_key(coerce_date(date))
                entries = [entry for entry in entries if day_key(entry.get('preferredDate')) == wanted_day]

            entries.sort(key=lambda entry: (_preferred_moment(entry), entry.get('priority') or 0))
            return entries

    def update(self, entry_id: str, patch: WaitingListUpdate) -> dict:
        with failure_prefix('update waiting list entry'):
            changes = patch.changes()
            if changes.get('preferredDate') is not None:
                changes['preferredDate'] = coerce_date(changes['preferredDate'], 'preferred date')
            else:
                changes.pop('preferredDate', None)
            changes['updatedAt'] = self._clock()

            self._store.update(WAITING_LIST_COLLECTION, entry_id, changes)

            updated = self._store.get(WAITING_LIST_COLLECTION, entry_id)
            if updated is None:
                raise NotFoundError('Waiting list entry not found after update')
            return updated

    def remove(self, entry_id: str) -> None:
        with failure_prefix('remove from waiting list'):
            self._store.delete(WAITING_LIST_COLLECTION, entry_id)

    def book(self, entry_id: str, appointment_date: Any, appointment_time: str, actor_id: str) -> dict:
        """Promote a waiting entry into an appointment booked with admin rights.

        The entry is deleted only after the appointment exists; if booking
        fails the entry is left as it was. The two writes are not atomic.
        """
        with failure_prefix('book from waiting list'):
            entry = self._store.get(WAITING_LIST_COLLECTION, entry_id)
            if entry is None:
                raise NotFoundError('Waiting list entry not found')
            if entry.get('status') != STATUS_WAITING:
                raise ConflictError('This waiting list entry is no longer active')

            appointment = self._appointments.create(
                AppointmentCreate(
                    patient_id=entry['patientId'],
                    doctor_id=entry['doctorId'],
                    appointment_date=appointment_date,
                    appointment_time=appointment_time,
                    service_type=entry.get('serviceType'),
                    duration=DEFAULT_APPOINTMENT_DURATION_MINUTES,
                    notes=entry.get('notes'),
                ),
                actor_id,
                ROLE_ADMIN,
            )

            self._store.delete(WAITING_LIST_COLLECTION, entry_id)

        logger.info('Waiting list entry %s promoted to appointment %s', entry_id, appointment['id'])
        return appointment
