from typing import Any

from clinic_backend.core.dates import day_key
from clinic_backend.core.errors import ValidationError
from clinic_backend.services.locked_slot_service import LockedSlotService
from clinic_backend.store.base import DocumentStore

APPOINTMENTS_COLLECTION = 'appointments'
# Appointments in these states occupy their slot.
SLOT_HOLDING_STATUSES = frozenset({'scheduled', 'completed'})


class SlotLedger:
    """Answers whether a doctor is free at a given day and time.

    Every appointment of the doctor is fetched and compared in memory. That is
    O(appointments per doctor) per check but needs no composite index; swap in
    an indexed range query here if volumes grow.
    """

    def __init__(self, store: DocumentStore, locked_slots: LockedSlotService):
        self._store = store
        self._locked_slots = locked_slots

    def is_booked(self, doctor_id: str, date: Any, time: str) -> bool:
        requested_day = day_key(date)
        if requested_day is None:
            raise ValidationError('Invalid date format')

        appointments = self._store.query(APPOINTMENTS_COLLECTION, [('doctorId', '==', doctor_id)])
        for appointment in appointments:
            if appointment.get('appointmentTime') != time:
                continue
            if appointment.get('status') not in SLOT_HOLDING_STATUSES:
                continue
            # Unreadable stored dates never conflict.
            if day_key(appointment.get('appointmentDate')) == requested_day:
                return True
        return False

    def is_available(self, doctor_id: str, date: Any, time: str) -> bool:
        if self.is_booked(doctor_id, date, time):
            return False
        return not self._locked_slots.is_locked(doctor_id, date, time)
