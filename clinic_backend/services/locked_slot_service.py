"""Admin blackout entries for a (doctor, day, time) slot."""

import logging
from datetime import datetime
from typing import Any, Callable

from clinic_backend.core.dates import coerce_date, day_bounds, is_within_day
from clinic_backend.core.errors import ConflictError, ValidationError
from clinic_backend.store.base import DocumentStore

logger = logging.getLogger(__name__)

LOCKED_SLOTS_COLLECTION = 'lockedSlots'
DEFAULT_LOCK_REASON = 'Admin locked'


class LockedSlotService:
    """Create, look up and remove locked slots.

    Lookups query by ``doctorId`` only and match the day and time in memory, so
    the store needs no composite index.
    """

    def __init__(self, store: DocumentStore, clock: Callable[[], datetime] = datetime.now):
        self._store = store
        self._clock = clock

    def _doctor_slots(self, doctor_id: str) -> list[dict]:
        return self._store.query(LOCKED_SLOTS_COLLECTION, [('doctorId', '==', doctor_id)])

    def _matching(self, doctor_id: str, date: Any, time: str) -> list[dict]:
        bounds = day_bounds(date)
        return [
            slot
            for slot in self._doctor_slots(doctor_id)
            if slot.get('time') == time and is_within_day(slot.get('date'), bounds)
        ]

    def create(
        self,
        doctor_id: str,
        date: Any,
        time: str,
        reason: str | None = None,
        created_by: str = 'system',
    ) -> dict:
        slot_date = coerce_date(date)
        if self.get(doctor_id, slot_date, time) is not None:
            raise ConflictError('This slot is already locked')

        slot = {
            'doctorId': doctor_id,
            'date': slot_date,
            'time': time,
            'reason': reason or DEFAULT_LOCK_REASON,
            'createdAt': self._clock(),
            'createdBy': created_by,
        }
        slot_id = self._store.create(LOCKED_SLOTS_COLLECTION, slot)
        logger.info('Locked slot %s for doctor %s on %s at %s', slot_id, doctor_id, slot_date.date(), time)
        return {'id': slot_id, **slot}

    def get(self, doctor_id: str, date: Any, time: str) -> dict | None:
        matches = self._matching(doctor_id, date, time)
        return matches[0] if matches else None

    def is_locked(self, doctor_id: str, date: Any, time: str) -> bool:
        return self.get(doctor_id, date, time) is not None

    def list_by_date(self, doctor_id: str, date: Any) -> list[dict]:
        bounds = day_bounds(date)
        return [slot for slot in self._doctor_slots(doctor_id) if is_within_day(slot.get('date'), bounds)]

    def list_by_doctor(self, doctor_id: str) -> list[dict]:
        def newest_first(slot: dict) -> float:
            try:
                return coerce_date(slot.get('date')).timestamp()
            except ValidationError:
                return float('-inf')

        return sorted(self._doctor_slots(doctor_id), key=newest_first, reverse=True)

    def delete_by_id(self, slot_id: str) -> None:
        self._store.delete(LOCKED_SLOTS_COLLECTION, slot_id)

    def delete_by_details(self, doctor_id: str, date: Any, time: str) -> bool:
        matches = self._matching(doctor_id, date, time)
        if not matches:
            return False

        self._store.delete_many(LOCKED_SLOTS_COLLECTION, [slot['id'] for slot in matches])
        logger.info('Unlocked %d slot(s) for doctor %s at %s', len(matches), doctor_id, time)
        return True
