"""Commute-distance matching between candidates and stores."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Literal

import pydantic
from rapidfuzz import fuzz, process, utils

from ..errors import GeocodeUnavailable, ValidationError
from ..schemas import Candidate, Coordinates, DistanceCategory, Relevance, Shift, Store
from .districts import DISTRICTS, districts_in_zone, zone_name

EARTH_RADIUS_KM = 6371.0

DEFAULT_SHIFT_MAX_KM: dict[Shift, float] = {
    Shift.MORNING: 7.0,
    Shift.AFTERNOON: 7.0,
    Shift.NIGHT: 10.0,
    Shift.ROTATING: 10.0,
    Shift.ADMINISTRATIVE: 15.0,
}

ScoreSource = Literal["distance", "district", "none"]


@dataclass
class GeoConfig:
    """Thresholds for geographic matching."""

    shift_max_km: dict[Shift, float] = field(default_factory=lambda: dict(DEFAULT_SHIFT_MAX_KM))
    inner_band_ratio: float = 0.5
    geo_match_threshold: int = 60
    district_match_cutoff: float = 85.0

    def __post_init__(self) -> None:
        merged = dict(DEFAULT_SHIFT_MAX_KM)
        merged.update({Shift(key): float(value) for key, value in self.shift_max_km.items()})
        for shift, max_km in merged.items():
            if max_km <= 0:
                raise ValueError(f"shift_max_km for {shift.value} must be positive, got {max_km}")
        if not 0 < self.inner_band_ratio <= 1:
            raise ValueError(f"inner_band_ratio must be in (0, 1], got {self.inner_band_ratio}")
        self.shift_max_km = merged


@dataclass(slots=True)
class StoreMatch:
    """One store ranked against a candidate location."""

    store: Store
    distance_km: float | None
    category: DistanceCategory
    eligible: bool
    max_distance_km: float
    relevance: Relevance = Relevance.OTHER
    zone: str | None = None


@dataclass(slots=True)
class GeoAssessment:
    """Normalized 0-100 proximity of a candidate to a store."""

    score: int
    source: ScoreSource
    distance_km: float | None
    category: DistanceCategory
    relevance: Relevance = Relevance.OTHER
    candidate_district: str | None = None
    store_district: str | None = None


class GeoMatchEngine:
    """Score a candidate's commute against a shift-dependent threshold."""

    def __init__(self, *, config: GeoConfig | None = None) -> None:
        self._config = config or GeoConfig()

    @property
    def config(self) -> GeoConfig:
        return self._config

    def distance_km(self, a: Any, b: Any) -> float:
        """Haversine distance rounded to one decimal."""
        point_a = self._coerce(a)
        point_b = self._coerce(b)

        d_lat = math.radians(point_b.lat - point_a.lat)
        d_lng = math.radians(point_b.lng - point_a.lng)
        h = (
            math.sin(d_lat / 2) ** 2
            + math.cos(math.radians(point_a.lat))
            * math.cos(math.radians(point_b.lat))
            * math.sin(d_lng / 2) ** 2
        )
        c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
        return round(EARTH_RADIUS_KM * c, 1)

    def max_distance_for_shift(self, shift: Shift) -> float:
        return self._config.shift_max_km[Shift(shift)]

    def categorize(self, distance_km: float | None, shift: Shift) -> DistanceCategory:
        if distance_km is None:
            return DistanceCategory.FAR
        max_km = self.max_distance_for_shift(shift)
        if distance_km <= max_km * self._config.inner_band_ratio:
            return DistanceCategory.PERFECT
        if distance_km <= max_km:
            return DistanceCategory.ACCEPTABLE
        return DistanceCategory.FAR

    def is_eligible(self, distance_km: float | None, shift: Shift) -> bool:
        if distance_km is None:
            return False
        return distance_km <= self.max_distance_for_shift(shift)

    def distance_score(self, distance_km: float | None, shift: Shift) -> int:
        """Map a distance onto 0-100 so that the shift maximum lands on 60."""
        if distance_km is None:
            return 0
        max_km = self.max_distance_for_shift(shift)
        inner_km = max_km * self._config.inner_band_ratio
        if distance_km <= inner_km:
            score = 100.0 - 20.0 * (distance_km / inner_km)
        elif distance_km <= max_km:
            score = 80.0 - 20.0 * ((distance_km - inner_km) / (max_km - inner_km))
        else:
            score = max(0.0, 60.0 * (1.0 - (distance_km - max_km) / max_km))
        return int(score)

    def resolve_district(self, name: str | None) -> str | None:
        """Map a free-text district name onto the known district table."""
        if not name or not name.strip():
            return None
        cleaned = name.strip()
        for known in DISTRICTS:
            if known.casefold() == cleaned.casefold():
                return known
        found = process.extractOne(
            cleaned,
            list(DISTRICTS),
            scorer=fuzz.ratio,
            processor=utils.default_process,
            score_cutoff=self._config.district_match_cutoff,
        )
        return found[0] if found else None

    def district_score(self, candidate_district: str | None, store_district: str | None) -> int:
        if candidate_district and store_district:
            if candidate_district.strip().casefold() == store_district.strip().casefold():
                return 100
        candidate_key = self.resolve_district(candidate_district)
        store_key = self.resolve_district(store_district)
        if candidate_key is None or store_key is None:
            return 0
        if candidate_key == store_key:
            return 100

        candidate_info = DISTRICTS[candidate_key]
        if store_key in candidate_info.neighbours:
            return 80
        if store_key in districts_in_zone(candidate_key):
            return 60
        for neighbour in candidate_info.neighbours:
            info = DISTRICTS.get(neighbour)
            if info is not None and store_key in info.neighbours:
                return 40
        return 20

    @staticmethod
    def relevance_category(score: int) -> Relevance:
        if score >= 60:
            return Relevance.MATCH
        if score >= 30:
            return Relevance.NEARBY
        return Relevance.OTHER

    def assess(self, candidate: Candidate, store: Store, shift: Shift) -> GeoAssessment:
        """Fine distance score when both points are geocoded, else the district score."""
        try:
            distance = self.distance_km(candidate.coordinates, store.coordinates)
        except GeocodeUnavailable:
            distance = None

        if distance is not None:
            score = self.distance_score(distance, shift)
            return GeoAssessment(
                score=score,
                source="distance",
                distance_km=distance,
                category=self.categorize(distance, shift),
                relevance=self.relevance_category(score),
                candidate_district=candidate.district,
                store_district=store.district,
            )

        score = self.district_score(candidate.district, store.district)
        return GeoAssessment(
            score=score,
            source="district" if candidate.district and store.district else "none",
            distance_km=None,
            category=DistanceCategory.FAR,
            relevance=self.relevance_category(score),
            candidate_district=candidate.district,
            store_district=store.district,
        )

    def rank_stores(
        self,
        candidate_coords: Any,
        stores: Iterable[Store],
        shift: Shift,
    ) -> list[StoreMatch]:
        """Rank stores by distance; stores without coordinates sort last as ``far``."""
        max_km = self.max_distance_for_shift(shift)
        matches: list[StoreMatch] = []
        for store in stores:
            try:
                distance = self.distance_km(candidate_coords, store.coordinates)
            except GeocodeUnavailable:
                distance = None
            district = self.resolve_district(store.district)
            matches.append(
                StoreMatch(
                    store=store,
                    distance_km=distance,
                    category=self.categorize(distance, shift),
                    eligible=self.is_eligible(distance, shift),
                    max_distance_km=max_km,
                    relevance=self.relevance_category(self.distance_score(distance, shift)),
                    zone=zone_name(district) if district else None,
                )
            )
        matches.sort(key=lambda item: (item.distance_km is None, item.distance_km or 0.0))
        return matches

    @staticmethod
    def _coerce(point: Any) -> Coordinates:
        if point is None:
            raise GeocodeUnavailable("coordinates unavailable")
        if isinstance(point, Coordinates):
            return point
        if isinstance(point, (tuple, list)) and len(point) == 2:
            point = {"lat": point[0], "lng": point[1]}
        try:
            return Coordinates.model_validate(point)
        except pydantic.ValidationError as exc:
            raise ValidationError("malformed coordinates", errors=exc.errors()) from exc


def format_distance(distance_km: float) -> str:
    if distance_km < 1:
        return f"{round(distance_km * 1000)} m"
    return f"{round(distance_km, 1)} km"
