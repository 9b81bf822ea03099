"""
Toilet Store Data Models
========================

Purpose:
- Pydantic models for one store as it moves through the sync pipeline
  (raw upstream block → normalized record → catalog document)
- Per-region and per-batch sync result payloads

A store only becomes a catalog document when has_toilet is true; the
catalog exists to serve the nearby-toilet lookup.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UpsertOutcome(str, Enum):
    """Result of writing one store into the catalog."""
    INSERTED = "inserted"
    UPDATED = "updated"
    NOOP = "noop"


class RawStoreRecord(BaseModel):
    """One <GeoPosition> block, fields as text. Never persisted."""
    poi_id: str
    name: str
    address: str
    x: str = ""  # longitude, encoding ambiguous
    y: str = ""  # latitude, encoding ambiguous
    phone: str = ""
    opening_days: str = ""
    opening_hours: str = ""
    services_raw: str = ""


class StoreRecord(BaseModel):
    """Store after coordinate normalization and service classification."""
    poi_id: str
    name: str
    address: str
    lat: Optional[float] = None
    lng: Optional[float] = None
    phone: str = ""
    opening_days: str = ""
    opening_hours: str = ""
    services: List[str] = Field(default_factory=list)
    has_toilet: bool = False


class Coordinates(BaseModel):
    lat: Optional[float] = None
    lng: Optional[float] = None


class GeoJSONLocation(BaseModel):
    """GeoJSON Point for MongoDB 2dsphere index."""
    type: str = Field(default="Point", description="GeoJSON type")
    coordinates: List[float] = Field(..., description="[longitude, latitude]")

    @field_validator('coordinates')
    @classmethod
    def validate_coordinates(cls, v):
        """Validate coordinates format."""
        if len(v) != 2:
            raise ValueError("Coordinates must be [longitude, latitude]")

        lng, lat = v
        if not (-180 <= lng <= 180):
            raise ValueError(f"Longitude must be between -180 and 180, got {lng}")
        if not (-90 <= lat <= 90):
            raise ValueError(f"Latitude must be between -90 and 90, got {lat}")

        return v

    @classmethod
    def from_lat_lng(cls, lat: Optional[float], lng: Optional[float]) -> Optional["GeoJSONLocation"]:
        """Build a point, or None when the pair is missing or out of range."""
        if lat is None or lng is None:
            return None
        try:
            return cls(coordinates=[lng, lat])
        except ValueError:
            return None


class CatalogEntry(BaseModel):
    """
    Document stored in the toilet catalog, one per poi_id.

    created_at is written only on insert by the repository; every other
    field is overwritten on each sync.
    """
    poi_id: str
    name: str
    address: str
    city: str
    district: str
    region_id: str
    coordinates: Coordinates
    location: Optional[GeoJSONLocation] = None
    phone: str = ""
    opening_hours: str = ""
    opening_days: str = ""
    services: List[str] = Field(default_factory=list)
    has_toilet: bool = True
    updated_at: datetime

    @classmethod
    def from_store(cls, store: StoreRecord, *, city: str, district: str,
                   region_id: str, now: datetime) -> "CatalogEntry":
        return cls(
            poi_id=store.poi_id,
            name=store.name,
            address=store.address,
            city=city,
            district=district,
            region_id=region_id,
            coordinates=Coordinates(lat=store.lat, lng=store.lng),
            location=GeoJSONLocation.from_lat_lng(store.lat, store.lng),
            phone=store.phone,
            opening_hours=store.opening_hours,
            opening_days=store.opening_days,
            services=list(store.services),
            has_toilet=True,
            updated_at=now,
        )


class RegionFetchResult(BaseModel):
    """What the directory client hands back for one region."""
    total_found: int = 0
    stores: List[StoreRecord] = Field(default_factory=list)  # restroom-enabled only
    error: Optional[str] = None


class RegionSyncResult(BaseModel):
    """Per-region counters reported by every sync mode."""
    region_id: str
    region: str
    city: str
    total_found: int = 0
    with_toilet: int = 0
    added: int = 0
    updated: int = 0
    error: Optional[str] = None


class BatchResult(BaseModel):
    """One batch window of the resumable full refresh."""
    model_config = ConfigDict(populate_by_name=True)

    batch: int
    next_batch: Optional[int] = Field(default=None, serialization_alias="nextBatch")
    total_regions: int = Field(..., serialization_alias="totalRegions")
    regions: List[RegionSyncResult] = Field(default_factory=list)
    message: Optional[str] = None

    def to_response(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
