"""Document model definitions."""

from sqlalchemy import JSON, Column, DateTime, String, func
from clinic_backend.database import Base


class Document(Base):
    """One schemaless record of a named collection."""
    __tablename__ = "documents"

    collection = Column(String, primary_key=True, index=True)
    doc_id = Column(String, primary_key=True)
    data = Column(JSON, nullable=False, default=dict)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
