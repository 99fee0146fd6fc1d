"""Tests for measurement coercion and flattening."""

import pytest

from tailormate.utils.measurements import (
    FlatMeasurement,
    NumberLeaf,
    RawStringLeaf,
    coerce_leaf,
    coerce_measurement_value,
    flatten_measurements,
    measurement_rows,
    parse_numeric,
    to_leaf,
)


class TestLeafCoercion:

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("108cm", 108.0),
            ("88 cm", 88.0),
            ("42.5", 42.5),
            ("approx 1,5 m", 15.0),
            ("1.2.3", 1.2),
            (".5", 0.5),
            ("0", 0.0),
            ("bad", None),
            ("", None),
            ("...", None),
        ],
    )
    def test_parse_numeric(self, raw, expected):
        assert parse_numeric(raw) == expected

    def test_to_leaf_classifies_values(self):
        assert to_leaf(42) == NumberLeaf(42.0)
        assert to_leaf(41.5) == NumberLeaf(41.5)
        assert to_leaf("108cm") == RawStringLeaf("108cm")
        assert to_leaf(None) is None
        assert to_leaf({"nested": 1}) is None

    def test_booleans_are_not_numbers(self):
        assert coerce_measurement_value(True) is None

    def test_coerce_leaf(self):
        assert coerce_leaf(NumberLeaf(3.0)) == 3.0
        assert coerce_leaf(RawStringLeaf("72 in")) == 72.0
        assert coerce_leaf(None) is None


class TestFlattenMeasurements:

    def test_one_row_per_leaf_key(self):
        measurements = {"chest": {"width": "108cm"}, "waist": {"width": "88 cm", "depth": "bad"}}

        rows = flatten_measurements(measurements)

        assert rows == [
            FlatMeasurement(garment="chest", key="width", value=108.0, unit="cm"),
            FlatMeasurement(garment="waist", key="width", value=88.0, unit="cm"),
            FlatMeasurement(garment="waist", key="depth", value=None, unit="cm"),
        ]

    def test_non_mapping_sections_are_skipped(self):
        measurements = {"height": "180", "jacket": {"sleeve": 64}, "extra": None}

        rows = flatten_measurements(measurements, unit="in")

        assert rows == [FlatMeasurement(garment="jacket", key="sleeve", value=64.0, unit="in")]

    @pytest.mark.parametrize("empty", [None, {}])
    def test_empty_input(self, empty):
        assert flatten_measurements(empty) == []

    def test_measurement_rows_bind_session(self):
        flat = flatten_measurements({"trousers": {"inseam": "81"}})

        rows = measurement_rows("session-1", flat)

        assert rows == [
            {"measurement_id": "session-1", "garment": "trousers", "key": "inseam", "value": 81.0, "unit": "cm"}
        ]
