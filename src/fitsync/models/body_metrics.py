"""Body metrics models."""

from datetime import datetime

from pydantic import Field

from fitsync.models.base import DomainModel, utc_now


class WeightRecord(DomainModel):
    """Body weight measurement."""

    profile_id: str
    date: datetime = Field(default_factory=utc_now)
    weight: float = Field(gt=0)
    notes: str | None = None


class HeightRecord(DomainModel):
    """Body height measurement."""

    profile_id: str
    date: datetime = Field(default_factory=utc_now)
    height: float = Field(gt=0)
    notes: str | None = None


BodyMetricRecord = WeightRecord | HeightRecord
