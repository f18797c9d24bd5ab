from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Coordinates(BaseModel):
    """WGS84 point in decimal degrees."""

    lat: float = Field(ge=-90.0, le=90.0)
    lng: float = Field(ge=-180.0, le=180.0)

    model_config = ConfigDict(extra="forbid", frozen=True)


class Store(BaseModel):
    """Retail location; owned by the location/geocoding collaborator."""

    id: str
    brand_id: str
    name: str | None = None
    district: str | None = None
    coordinates: Coordinates | None = None

    model_config = ConfigDict(extra="allow")


class Candidate(BaseModel):
    """Applicant identity and home location."""

    id: str
    name: str | None = None
    email: str | None = None
    district: str | None = None
    coordinates: Coordinates | None = None

    model_config = ConfigDict(extra="allow")
