from __future__ import annotations

import sys
import unittest
from pathlib import Path

TESTS_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = TESTS_DIR.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from casegen.errors import DuplicateKeyError, InvalidTagSpecifierError, MalformedNumberError
from casegen.labels import Forbidden, Label, Required, format_label


class TagMatchTests(unittest.TestCase):
    def test_required_needs_exact_value(self) -> None:
        match = Required("gm-p13")
        self.assertTrue(match.matches("light", {"light": "gm-p13"}))
        self.assertFalse(match.matches("light", {"light": "surefire"}))
        self.assertFalse(match.matches("light", {}))

    def test_forbidden_rejects_any_selection(self) -> None:
        match = Forbidden()
        self.assertTrue(match.matches("sight", {"light": "gm-p13"}))
        self.assertFalse(match.matches("sight", {"sight": "fastfire3"}))
        self.assertFalse(match.matches("sight", {"sight": ""}))


class LabelParseTests(unittest.TestCase):
    def test_empty_label_is_default(self) -> None:
        self.assertEqual(Label.parse(""), Label.default())
        self.assertTrue(Label.default().is_default)
        self.assertIsNone(Label.default().tags)
        self.assertIsNone(Label.default().layers)

    def test_layers_and_tags(self) -> None:
        label = Label.parse("layers=0,2;tags=a:x,!b")
        self.assertEqual(label.layers, frozenset({0, 2}))
        self.assertEqual(label.tags, {"a": Required("x"), "b": Forbidden()})
        self.assertFalse(label.is_default)

    def test_empty_segments_are_skipped(self) -> None:
        self.assertEqual(Label.parse(";;layers=3;"), Label(layers=frozenset({3})))

    def test_duplicate_layers_is_fatal(self) -> None:
        with self.assertRaises(DuplicateKeyError) as ctx:
            Label.parse("layers=0;layers=1")
        self.assertEqual(ctx.exception.code, "E_LABEL_DUPLICATE_KEY")
        self.assertIn("layers=1", str(ctx.exception))

    def test_duplicate_tags_is_fatal(self) -> None:
        with self.assertRaises(DuplicateKeyError):
            Label.parse("tags=a:x;layers=0;tags=b:y")

    def test_invalid_tag_specifiers(self) -> None:
        for raw in ("tags=light", "tags=a:b:c", "tags=:x", "tags=a:", "tags=!", "tags=a:x,,b:y"):
            with self.subTest(raw=raw):
                with self.assertRaises(InvalidTagSpecifierError):
                    Label.parse(raw)

    def test_bad_layer_numbers(self) -> None:
        for raw in ("layers=one", "layers=0,,1", "layers=1.5"):
            with self.subTest(raw=raw):
                with self.assertRaises(MalformedNumberError):
                    Label.parse(raw)

    def test_trailing_comma_is_ignored(self) -> None:
        self.assertEqual(Label.parse("layers=0,1,").layers, frozenset({0, 1}))
        self.assertEqual(Label.parse("tags=a:x,").tags, {"a": Required("x")})
        self.assertEqual(Label.parse("tags=a:x,!b,,"), Label.parse("tags=a:x,!b"))

    def test_inner_empty_entry_is_still_fatal(self) -> None:
        with self.assertRaises(MalformedNumberError):
            Label.parse("layers=0,,1,")
        with self.assertRaises(InvalidTagSpecifierError):
            Label.parse("tags=a:x,,b:y,")

    def test_last_specifier_for_a_tag_wins(self) -> None:
        self.assertEqual(Label.parse("tags=a:x,a:y").tags, {"a": Required("y")})

    def test_malformed_segment_warns_and_continues(self) -> None:
        with self.assertLogs("casegen.labels", level="WARNING") as logs:
            label = Label.parse("Magazine;layers=1;a=b=c;tags=")
        self.assertEqual(label, Label(layers=frozenset({1})))
        output = "\n".join(logs.output)
        self.assertIn("Unhandled label: Magazine", output)
        self.assertIn("Unhandled label: a=b=c", output)
        self.assertIn("Unhandled label: tags=", output)

    def test_unknown_key_warns_and_is_ignored(self) -> None:
        with self.assertLogs("casegen.labels", level="WARNING") as logs:
            label = Label.parse("name=lid;tags=light:gm-p13")
        self.assertEqual(label.tags, {"light": Required("gm-p13")})
        self.assertIsNone(label.layers)
        self.assertIn("Unhandled label component: name = lid", logs.output[0])

    def test_labels_are_hashable_and_read_only(self) -> None:
        label = Label.parse("layers=1;tags=a:x,!b")
        self.assertEqual(hash(label), hash(Label.parse("tags=!b,a:x;layers=1")))
        self.assertEqual(len({label, Label.parse("tags=!b,a:x;layers=1"), Label.default()}), 2)
        with self.assertRaises(TypeError):
            label.tags["c"] = Forbidden()  # type: ignore[index]

    def test_constructor_copies_tags(self) -> None:
        tags = {"a": Required("x")}
        label = Label(tags=tags, layers=frozenset({0}))
        tags["b"] = Forbidden()
        self.assertEqual(label.tags, {"a": Required("x")})


class FormatLabelTests(unittest.TestCase):
    def test_canonical_form_sorts_entries(self) -> None:
        label = Label.parse("tags=!b,a:x;layers=2,0")
        self.assertEqual(format_label(label), "layers=0,2;tags=a:x,!b")
        self.assertEqual(Label.parse(format_label(label)), label)

    def test_default_formats_empty(self) -> None:
        self.assertEqual(format_label(Label.default()), "")


if __name__ == "__main__":
    unittest.main()
