import os
from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault('DATABASE_URL', 'sqlite://')
os.environ.setdefault('IDENTITY_PROVIDER', 'jwt')
os.environ.setdefault('DOCUMENT_STORE_BACKEND', 'sql')

from clinic_backend.database import Base  # noqa: E402
from clinic_backend.models.document import Document  # noqa: E402
from clinic_backend.schemas.directory import DoctorCreate, PatientCreate  # noqa: E402
from clinic_backend.services.appointment_service import AppointmentService  # noqa: E402
from clinic_backend.services.directory_service import DoctorService, PatientService  # noqa: E402
from clinic_backend.services.locked_slot_service import LockedSlotService  # noqa: E402
from clinic_backend.services.slot_ledger import SlotLedger  # noqa: E402
from clinic_backend.services.waiting_list_service import WaitingListService  # noqa: E402
from clinic_backend.store.sql_store import SqlDocumentStore  # noqa: E402

NOW = datetime(2026, 3, 10, 9, 30)


@pytest.fixture
def store():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine, tables=[Document.__table__])
    try:
        yield SqlDocumentStore(testing_session_local)
    finally:
        Base.metadata.drop_all(bind=engine, tables=[Document.__table__])
        engine.dispose()


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def locked_slots(store, clock) -> LockedSlotService:
    return LockedSlotService(store, clock)


@pytest.fixture
def slot_ledger(store, locked_slots) -> SlotLedger:
    return SlotLedger(store, locked_slots)


@pytest.fixture
def appointments(store, slot_ledger, clock) -> AppointmentService:
    return AppointmentService(store, slot_ledger, clock)


@pytest.fixture
def waiting_list(store, appointments, clock) -> WaitingListService:
    return WaitingListService(store, appointments, clock)


@pytest.fixture
def patients(store, clock) -> PatientService:
    return PatientService(store, clock)


@pytest.fixture
def doctors(store, clock) -> DoctorService:
    return DoctorService(store, clock)


@pytest.fixture
def patient(patients) -> dict:
    return patients.create(
        PatientCreate(full_name='Ada Lovelace', email='ada@example.com'),
        created_by='staff-1',
    )


@pytest.fixture
def doctor(doctors) -> dict:
    return doctors.create(DoctorCreate(full_name='Dr. Gregory House', specialties=['diagnostics']))
