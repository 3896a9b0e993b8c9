"""FastAPI providers for the configured store, identity provider and services."""

from functools import lru_cache

from fastapi import Depends

from clinic_backend.auth.identity import FirebaseIdentityProvider, IdentityProvider, JwtIdentityProvider
from clinic_backend.core import config
from clinic_backend.services.appointment_service import AppointmentService
from clinic_backend.services.directory_service import DoctorService, PatientService, UserService
from clinic_backend.services.locked_slot_service import LockedSlotService
from clinic_backend.services.slot_ledger import SlotLedger
from clinic_backend.services.waiting_list_service import WaitingListService
from clinic_backend.store.base import DocumentStore


@lru_cache
def get_document_store() -> DocumentStore:
    if config.DOCUMENT_STORE_BACKEND == "firestore":
        from clinic_backend.store.firestore_store import FirestoreDocumentStore
        return FirestoreDocumentStore()

    from clinic_backend.database import SessionLocal, ensure_document_schema
    from clinic_backend.store.sql_store import SqlDocumentStore

    ensure_document_schema()
    return SqlDocumentStore(SessionLocal)


@lru_cache
def get_identity_provider() -> IdentityProvider:
    if config.IDENTITY_PROVIDER == "firebase":
        return FirebaseIdentityProvider()
    return JwtIdentityProvider(get_document_store())


def get_locked_slot_service(store: DocumentStore = Depends(get_document_store)) -> LockedSlotService:
    return LockedSlotService(store)


def get_appointment_service(
    store: DocumentStore = Depends(get_document_store),
    locked_slots: LockedSlotService = Depends(get_locked_slot_service),
) -> AppointmentService:
    return AppointmentService(store, SlotLedger(store, locked_slots))


def get_waiting_list_service(
    store: DocumentStore = Depends(get_document_store),
    appointments: AppointmentService = Depends(get_appointment_service),
) -> WaitingListService:
    return WaitingListService(store, appointments)


def get_patient_service(store: DocumentStore = Depends(get_document_store)) -> PatientService:
    return PatientService(store)


def get_doctor_service(store: DocumentStore = Depends(get_document_store)) -> DoctorService:
    return DoctorService(store)


def get_user_service(
    store: DocumentStore = Depends(get_document_store),
    identity: IdentityProvider = Depends(get_identity_provider),
    patients: PatientService = Depends(get_patient_service),
) -> UserService:
    return UserService(store, identity, patients)
