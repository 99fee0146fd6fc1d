"""Measurement leaf coercion and flattening.

The extraction service returns measurements as an open mapping of
garment section -> measurement key -> loosely typed value ("108cm",
"88 cm", 42, ...). Leaves are classified once into ``NumberLeaf`` or
``RawStringLeaf`` and coerced to an optional float here, so the numeric
parsing rule lives in one place.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

# Characters kept before parsing: digits and the decimal point
_NON_NUMERIC = re.compile(r"[^0-9.]")
# Longest leading decimal literal ("1.2.3" -> "1.2", ".5" -> ".5")
_LEADING_NUMBER = re.compile(r"^(\d+\.?\d*|\.\d+)")


@dataclass(frozen=True)
class NumberLeaf:
    """A leaf that already arrived as a number."""

    value: float


@dataclass(frozen=True)
class RawStringLeaf:
    """A leaf that arrived as text, possibly with units embedded."""

    raw: str


LeafValue = Union[NumberLeaf, RawStringLeaf]


@dataclass(frozen=True)
class FlatMeasurement:
    """One flattened measurement row, before it is bound to a session."""

    garment: str
    key: str
    value: Optional[float]
    unit: str


def to_leaf(value: Any) -> Optional[LeafValue]:
    """Classify a raw leaf. Returns None for leaves that cannot carry a number."""
    if isinstance(value, bool):
        return RawStringLeaf(str(value))
    if isinstance(value, (int, float)):
        return NumberLeaf(float(value))
    if isinstance(value, str):
        return RawStringLeaf(value)
    return None


def parse_numeric(raw: str) -> Optional[float]:
    """Strip every character that is not a digit or '.', then parse.

    Returns None when nothing parseable remains.
    """
    stripped = _NON_NUMERIC.sub("", raw)
    match = _LEADING_NUMBER.match(stripped)
    if not match:
        return None
    return float(match.group(1))


def coerce_leaf(leaf: Optional[LeafValue]) -> Optional[float]:
    """Numeric value of a classified leaf, or None."""
    if isinstance(leaf, NumberLeaf):
        return leaf.value
    if isinstance(leaf, RawStringLeaf):
        return parse_numeric(leaf.raw)
    return None


def coerce_measurement_value(value: Any) -> Optional[float]:
    return coerce_leaf(to_leaf(value))


def flatten_measurements(
    measurements: Optional[Mapping[str, Any]],
    unit: str = "cm",
) -> List[FlatMeasurement]:
    """Flatten garment -> key -> value into one row per leaf key.

    Top-level sections whose value is not itself a mapping are skipped.
    """
    if not measurements:
        return []

    rows: List[FlatMeasurement] = []
    for garment, values in measurements.items():
        if not isinstance(values, Mapping):
            continue
        for key, value in values.items():
            rows.append(
                FlatMeasurement(
                    garment=str(garment),
                    key=str(key),
                    value=coerce_measurement_value(value),
                    unit=unit,
                )
            )
    return rows


def measurement_rows(
    measurement_id: Any,
    flat: List[FlatMeasurement],
) -> List[Dict[str, Any]]:
    """Bind flattened measurements to their owning session for bulk insert."""
    return [
        {
            "measurement_id": measurement_id,
            "garment": row.garment,
            "key": row.key,
            "value": row.value,
            "unit": row.unit,
        }
        for row in flat
    ]
