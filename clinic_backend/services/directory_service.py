"""Patient, doctor and user records the scheduling services depend on."""

import logging
from datetime import datetime
from typing import Callable

from clinic_backend.auth.identity import ROLE_PATIENT, USERS_COLLECTION, AuthenticatedUser, IdentityProvider
from clinic_backend.core.errors import NotFoundError, failure_prefix
from clinic_backend.schemas.directory import DoctorCreate, PatientCreate, RegisterRequest
from clinic_backend.store.base import DocumentStore

logger = logging.getLogger(__name__)

PATIENTS_COLLECTION = 'patients'
DOCTORS_COLLECTION = 'doctors'


class PatientService:
    def __init__(self, store: DocumentStore, clock: Callable[[], datetime] = datetime.now):
        self._store = store
        self._clock = clock

    def create(self, data: PatientCreate, created_by: str, patient_id: str | None = None) -> dict:
        with failure_prefix('create patient'):
            now = self._clock()
            patient = {
                'fullName': data.full_name,
                'email': data.email,
                'phoneNumber': data.phone_number,
                'createdBy': created_by,
                'isActive': True,
                'createdAt': now,
                'updatedAt': now,
            }
            if data.user_id:
                patient['userId'] = data.user_id
            patient_id = self._store.create(PATIENTS_COLLECTION, patient, doc_id=patient_id)
        return {'id': patient_id, **patient}

    def get(self, patient_id: str) -> dict | None:
        with failure_prefix('get patient'):
            return self._store.get(PATIENTS_COLLECTION, patient_id)

    def get_by_user_id(self, user_id: str) -> dict | None:
        with failure_prefix('get patient by user'):
            matches = self._store.query(PATIENTS_COLLECTION, [('userId', '==', user_id)])
        return matches[0] if matches else None

    def list(self) -> list[dict]:
        with failure_prefix('get patients'):
            return self._store.query(PATIENTS_COLLECTION, order_by='fullName')

    def ensure_for_user(self, user: AuthenticatedUser) -> dict:
        """Return the caller's own patient record, creating it keyed by their uid if needed."""
        existing = self.get(user.uid)
        if existing is not None:
            return existing

        logger.info('Creating patient record for user %s', user.uid)
        return self.create(
            PatientCreate(full_name=user.name or 'Patient', email=user.email, user_id=user.uid),
            created_by=user.uid,
            patient_id=user.uid,
        )


class DoctorService:
    def __init__(self, store: DocumentStore, clock: Callable[[], datetime] = datetime.now):
        self._store = store
        self._clock = clock

    def create(self, data: DoctorCreate) -> dict:
        with failure_prefix('create doctor'):
            doctor = {
                'fullName': data.full_name,
                'specialties': list(data.specialties),
                'isActive': True,
                'createdAt': self._clock(),
            }
            if data.user_id:
                doctor['userId'] = data.user_id
            doctor_id = self._store.create(DOCTORS_COLLECTION, doctor)
        return {'id': doctor_id, **doctor}

    def get(self, doctor_id: str) -> dict | None:
        with failure_prefix('get doctor'):
            return self._store.get(DOCTORS_COLLECTION, doctor_id)

    def list(self, active_only: bool = False) -> list[dict]:
        with failure_prefix('get doctors'):
            filters = [('isActive', '==', True)] if active_only else []
            return self._store.query(DOCTORS_COLLECTION, filters, order_by='fullName')


class UserService:
    def __init__(
        self,
        store: DocumentStore,
        identity: IdentityProvider,
        patients: PatientService,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._store = store
        self._identity = identity
        self._patients = patients
        self._clock = clock

    def _with_patient_id(self, uid: str, user: dict) -> dict:
        result = {**user, 'id': uid}
        if user.get('role') == ROLE_PATIENT:
            patient = self._patients.get(uid) or self._patients.get_by_user_id(uid)
            result['patientId'] = patient['id'] if patient else None
        return result

    def register(self, caller: AuthenticatedUser, data: RegisterRequest) -> dict:
        """First call stores the user and assigns a role; later calls return the stored record.

        Callers without a role claim become patients. Other roles are granted
        by an admin through ``set_role``.
        """
        with failure_prefix('register user'):
            existing = self._store.get(USERS_COLLECTION, caller.uid)
            # A role-only record written by the JWT provider is not a registration.
            if existing is not None and existing.get('email') is not None:
                return self._with_patient_id(caller.uid, existing)

            role = caller.role or ROLE_PATIENT
            if caller.role is None:
                self._identity.set_role(caller.uid, role)

            now = self._clock()
            user = {
                'email': data.email or caller.email,
                'fullName': data.display_name or caller.name or 'Unknown',
                'role': role,
                'isActive': True,
                'createdAt': now,
                'updatedAt': now,
            }
            if data.phone_number:
                user['phoneNumber'] = data.phone_number
            self._store.create(USERS_COLLECTION, user, doc_id=caller.uid)

            if role == ROLE_PATIENT and self._patients.get(caller.uid) is None:
                self._patients.create(
                    PatientCreate(
                        full_name=user['fullName'],
                        email=user['email'],
                        phone_number=data.phone_number or '',
                        user_id=caller.uid,
                    ),
                    created_by=caller.uid,
                    patient_id=caller.uid,
                )

        logger.info('User %s registered with role %s', caller.uid, role)
        return self._with_patient_id(caller.uid, user)

    def get(self, uid: str) -> dict | None:
        with failure_prefix('get user'):
            user = self._store.get(USERS_COLLECTION, uid)
            return self._with_patient_id(uid, user) if user else None

    def set_role(self, uid: str, role: str) -> dict:
        with failure_prefix('set user role'):
            user = self._store.get(USERS_COLLECTION, uid)
            if user is None:
                raise NotFoundError('User not found')
            self._identity.set_role(uid, role)
            self._store.update(USERS_COLLECTION, uid, {'role': role, 'updatedAt': self._clock()})
            return self._with_patient_id(uid, {**user, 'role': role})
