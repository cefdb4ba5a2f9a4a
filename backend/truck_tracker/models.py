from sqlalchemy import Column, Integer, String, Float, DateTime
from sqlalchemy.sql import func
import enum
import uuid

# IMPORTANT: use Base from db.py
from truck_tracker.db import Base


class TruckModel(str, enum.Enum):
    TOYOTA_COROLLA = "Toyota Corolla"
    TOYOTA_RAV4 = "Toyota RAV4"
    FORD_F_SERIES = "Ford F-Series"
    HONDA_CR_V = "Honda CR-V"
    DACIA_SANDERO = "Dacia Sandero"


def new_document_id() -> str:
    return uuid.uuid4().hex


class Truck(Base):
    __tablename__ = "trucks"

    id = Column(Integer, primary_key=True, index=True)
    document_id = Column(String, unique=True, index=True, nullable=False, default=new_document_id)
    identifier = Column(String, unique=True, index=True, nullable=False)
    model = Column(String, nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    position_updated_at = Column(DateTime(timezone=True), nullable=True)
    key = Column(String, nullable=False)  # write-only secret, never serialized
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
