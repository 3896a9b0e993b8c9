from threading import Lock

from sqlalchemy import create_engine, inspect
from sqlalchemy.orm import declarative_base, sessionmaker

from clinic_backend.core import config


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


engine = create_engine(
    config.DATABASE_URL,
    echo=config.DATABASE_ECHO,
    **_engine_options(config.DATABASE_URL),
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_document_schema_checked = False


def ensure_document_schema() -> None:
    global _document_schema_checked

    if _document_schema_checked:
        return

    with _schema_lock:
        if _document_schema_checked:
            return

        # Imported here so the model registers on Base before create_all runs.
        from clinic_backend.models.document import Document

        if Document.__tablename__ not in inspect(engine).get_table_names():
            Base.metadata.create_all(bind=engine, tables=[Document.__table__])

        _document_schema_checked = True
