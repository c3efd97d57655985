"""SQLAlchemy table definitions."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text, create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker


class Base(DeclarativeBase):
    pass


class SavedInputsRow(Base):
    """Last inputs of one calculator, stored as an encoded JSON blob."""

    __tablename__ = "saved_inputs"

    key = Column(String(50), primary_key=True)
    payload = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


def init_db(db_url: str = "sqlite:///reicalc.db") -> sessionmaker:
    """Initialize the database and return a session factory."""
    engine = create_engine(db_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
