from __future__ import annotations

import sys
import unittest
from pathlib import Path

TESTS_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = TESTS_DIR.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from casegen.errors import InvalidUnitError, MalformedNumberError
from casegen.units import mm_to_px, parse_length


class ParseLengthTests(unittest.TestCase):
    def test_millimeters_are_literal(self) -> None:
        self.assertEqual(parse_length("10mm"), 10.0)
        self.assertEqual(parse_length("0.5mm"), 0.5)

    def test_inches_convert_to_millimeters(self) -> None:
        self.assertEqual(parse_length("1in"), 25.4)
        self.assertAlmostEqual(parse_length("2.5in"), 63.5)

    def test_unknown_units_are_rejected(self) -> None:
        for value in ("5cm", "100px", "100", ""):
            with self.subTest(value=value):
                with self.assertRaises(InvalidUnitError) as ctx:
                    parse_length(value)
                self.assertEqual(ctx.exception.code, "E_UNIT")

    def test_non_finite_and_underscored_numbers_are_rejected(self) -> None:
        for value in ("nanmm", "infin", "-infmm", "1_0mm"):
            with self.subTest(value=value):
                with self.assertRaises(MalformedNumberError):
                    parse_length(value)

    def test_missing_value_is_an_invalid_unit(self) -> None:
        with self.assertRaises(InvalidUnitError):
            parse_length(None)

    def test_malformed_number_names_the_input(self) -> None:
        with self.assertRaises(MalformedNumberError) as ctx:
            parse_length("abcmm")
        self.assertIn("abcmm", str(ctx.exception))
        with self.assertRaises(MalformedNumberError):
            parse_length("in")


class PixelConversionTests(unittest.TestCase):
    def test_one_inch_is_96_pixels(self) -> None:
        self.assertEqual(mm_to_px(25.4), 96.0)
        self.assertEqual(mm_to_px(0), 0.0)


if __name__ == "__main__":
    unittest.main()
