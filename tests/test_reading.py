"""Tests for meter reading assembly."""

from __future__ import annotations

from config import CLASS_NAMES, DECIMAL_POINT_CLASS_ID, UNIT_LABEL_CLASS_ID
from detection import Detection, assemble_reading, is_reading_class, reading_detections
from geometry import BoundingBox


def at(class_id: int, left: float, confidence: float = 0.9) -> Detection:
    return Detection(class_id, confidence, BoundingBox(left, 10, left + 20, 50))


class TestIsReadingClass:

    def test_digits_and_decimal_point(self):
        assert is_reading_class(DECIMAL_POINT_CLASS_ID)
        assert is_reading_class(1)
        assert is_reading_class(10)

    def test_unit_label_excluded(self):
        assert not is_reading_class(UNIT_LABEL_CLASS_ID)

    def test_custom_range(self):
        assert not is_reading_class(0, (1, 10))


class TestAssembleReading:

    def test_orders_left_to_right(self):
        # class 8 is "7", class 2 is "1", class 5 is "4"
        detections = [at(8, 300), at(2, 50), at(5, 180)]
        assert assemble_reading(detections) == "147"

    def test_decimal_point(self):
        detections = [at(2, 0), at(3, 30), at(DECIMAL_POINT_CLASS_ID, 55), at(6, 70)]
        assert assemble_reading(detections) == "12.5"

    def test_unit_label_is_ignored(self):
        detections = [at(4, 0), at(UNIT_LABEL_CLASS_ID, 40), at(10, 100)]
        assert assemble_reading(detections) == "39"

    def test_only_unit_label_is_empty(self):
        assert assemble_reading([at(11, 0)]) == ""

    def test_empty(self):
        assert assemble_reading([]) == ""

    def test_equal_left_keeps_input_order(self):
        assert assemble_reading([at(3, 10), at(4, 10)]) == "23"
        assert assemble_reading([at(4, 10), at(3, 10)]) == "32"

    def test_custom_class_names(self):
        names = ("a", "b", "c")
        assert assemble_reading([at(2, 5), at(0, 1)], (0, 2), names) == "ac"


class TestReadingDetections:

    def test_filters_and_sorts(self):
        unit = at(11, 0)
        seven = at(8, 90)
        one = at(2, 10)
        assert reading_detections([seven, unit, one]) == [one, seven]


class TestClassIds:

    def test_named_ids_match_labels(self):
        assert CLASS_NAMES[DECIMAL_POINT_CLASS_ID] == "."
        assert CLASS_NAMES[UNIT_LABEL_CLASS_ID] == "kwh"
