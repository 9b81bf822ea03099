"""
Coordinate decoding for the 7-ELEVEN e-map payload.

The upstream returns X/Y either as decimal degrees or as degrees scaled by
10^6, sometimes scaled twice, with no flag telling which. Decoding is a
best-effort heuristic and never fails: a value that is not a number comes
back as None and the store is kept.

    "121564000"    -> 121.564
    "25.043"       -> 25.043
    "25043000000"  -> 0.025043   (second rescale, magnitude still > 1000)
"""

import math
from typing import Optional, Tuple, Union

SCALE = 1_000_000
PLAUSIBLE_MAGNITUDE = 1000

RawCoordinate = Union[str, int, float, None]


def _parse_number(raw: RawCoordinate) -> Optional[float]:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip()
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def _is_scaled_encoding(raw: RawCoordinate, value: float) -> bool:
    # Scaled values are whole numbers; "25.043" is already in degrees.
    if isinstance(raw, str):
        text = raw.strip().lower()
        return "." not in text and "e" not in text
    return value.is_integer()


def normalize_coordinate(raw: RawCoordinate) -> Optional[float]:
    """Decode one raw X or Y value into decimal degrees."""
    value = _parse_number(raw)
    if value is None:
        return None

    candidate = value
    if value != 0 and _is_scaled_encoding(raw, value):
        candidate = value / SCALE

    if abs(candidate) > PLAUSIBLE_MAGNITUDE:
        candidate = candidate / SCALE

    return candidate


def normalize_coordinates(x: RawCoordinate, y: RawCoordinate) -> Tuple[Optional[float], Optional[float]]:
    """Return (lat, lng) from the upstream X (longitude) / Y (latitude) pair."""
    return normalize_coordinate(y), normalize_coordinate(x)
