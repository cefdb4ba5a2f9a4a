from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime, timezone


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes; everything is stored in UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Position(BaseModel):
    latitude: float
    longitude: float


class UpdatePositionRequest(BaseModel):
    identifier: str = Field(min_length=1)
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    key: str


class TruckSummary(BaseModel):
    identifier: str
    position: Optional[Position] = None
    position_updated_at: Optional[datetime] = Field(default=None, alias="positionUpdatedAt")

    @field_validator("position_updated_at")
    @classmethod
    def ensure_utc(cls, value):
        return as_utc(value)

    class Config:
        populate_by_name = True


class UpdatePositionResponse(BaseModel):
    data: TruckSummary


class TruckPosition(BaseModel):
    identifier: str
    model: str
    document_id: str = Field(alias="documentId")
    position: Optional[Position] = None
    position_updated_at: Optional[datetime] = Field(default=None, alias="positionUpdatedAt")

    @field_validator("position_updated_at")
    @classmethod
    def ensure_utc(cls, value):
        return as_utc(value)

    class Config:
        populate_by_name = True


class MapCenter(BaseModel):
    latitude: float
    longitude: float
    zoom: int
    count: int
