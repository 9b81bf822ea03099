"""
Store block parser for the 7-ELEVEN e-map SearchStore response.

The response is loosely formed XML with one <GeoPosition> block per store:

    <GeoPosition>
      <POIID> 123456</POIID>
      <POIName>松山門市</POIName>
      <X>121557600</X>
      <Y>25060800</Y>
      <Telno>02-1234-5678</Telno>
      <Address>台北市松山區八德路四段1號</Address>
      <StoreImageTitle>02廁所,03ATM,04座位區</StoreImageTitle>
      <OP_DAY>1234567</OP_DAY>
      <OP_TIME>24</OP_TIME>
    </GeoPosition>

Blocks are matched with regular expressions, not an XML parser. A block
missing its id, name or address is skipped.
"""

import html
import logging
import re
from typing import List, Optional, Tuple

from ...common.exceptions import DirectoryParseError
from ...model.mongo.toilet_store import RawStoreRecord, StoreRecord
from .coordinates import normalize_coordinates

logger = logging.getLogger(__name__)

# Restroom service code + label. The label is Chinese upstream; the English
# form is what the English locale of the same endpoint returns.
RESTROOM_SERVICE_TOKENS = ("02廁所", "02Restroom")

_BLOCK_RE = re.compile(r"<GeoPosition>(.*?)</GeoPosition>", re.DOTALL)
_OPEN_TAG = "<GeoPosition>"
_CLOSE_TAG = "</GeoPosition>"


def _field(block: str, tag: str) -> str:
    match = re.search(rf"<{tag}>(.*?)</{tag}>", block, re.DOTALL)
    if not match:
        return ""
    return html.unescape(match.group(1)).strip()


def classify_services(services_raw: str) -> Tuple[List[str], bool]:
    """
    Split the comma-joined service tags and detect restroom availability.

    Returns:
        (services, has_toilet) - every token verbatim, in upstream order
    """
    services = [s.strip() for s in (services_raw or "").split(",") if s.strip()]
    has_toilet = any(token in s for s in services for token in RESTROOM_SERVICE_TOKENS)
    return services, has_toilet


def _raw_record(block: str) -> Optional[RawStoreRecord]:
    poi_id = _field(block, "POIID")
    name = _field(block, "POIName")
    address = _field(block, "Address")

    if not (poi_id and name and address):
        logger.debug(f"[EMAP] Dropping store block without id/name/address: poi_id={poi_id!r}")
        return None

    return RawStoreRecord(
        poi_id=poi_id,
        name=name,
        address=address,
        x=_field(block, "X"),
        y=_field(block, "Y"),
        phone=_field(block, "Telno"),
        opening_days=_field(block, "OP_DAY"),
        opening_hours=_field(block, "OP_TIME"),
        services_raw=_field(block, "StoreImageTitle"),
    )


def parse_store_blocks(payload: str) -> List[RawStoreRecord]:
    """
    Extract raw store records from one region's response.

    Raises:
        DirectoryParseError: payload is not text or GeoPosition tags are unbalanced
    """
    if not isinstance(payload, str):
        raise DirectoryParseError(f"Expected text payload, got {type(payload).__name__}")

    opened, closed = payload.count(_OPEN_TAG), payload.count(_CLOSE_TAG)
    if opened != closed:
        raise DirectoryParseError(
            f"Unbalanced GeoPosition tags ({opened} open, {closed} close)",
            details={"opened": opened, "closed": closed}
        )

    records = []
    for block in _BLOCK_RE.findall(payload):
        record = _raw_record(block)
        if record is not None:
            records.append(record)
    return records


def normalize_store(raw: RawStoreRecord) -> StoreRecord:
    lat, lng = normalize_coordinates(raw.x, raw.y)
    services, has_toilet = classify_services(raw.services_raw)
    return StoreRecord(
        poi_id=raw.poi_id,
        name=raw.name,
        address=raw.address,
        lat=lat,
        lng=lng,
        phone=raw.phone,
        opening_days=raw.opening_days,
        opening_hours=raw.opening_hours,
        services=services,
        has_toilet=has_toilet,
    )


def parse_stores(payload: str) -> List[StoreRecord]:
    """Parse and normalize every valid store in a region payload."""
    return [normalize_store(raw) for raw in parse_store_blocks(payload)]
