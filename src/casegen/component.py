"""Immutable placed components and their positioned ``<g>`` wrappers."""
from __future__ import annotations

import xml.etree.ElementTree as ET
from copy import deepcopy
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import List, Union

from .errors import ComponentLoadError, InvalidUnitError, MalformedNumberError
from .units import mm_to_px, parse_length
from .xmlutil import q


@dataclass(frozen=True)
class Component:
    """An SVG fragment with a physical size (mm) and a pose.

    Translation and rotation are kept as separate running totals. ``element``
    always rotates about the fragment centre first and translates second, so
    the order of ``translated``/``rotated`` calls does not affect the output.
    """

    fragment: ET.Element = field(repr=False, compare=False)
    width: float
    height: float
    x: float = 0.0
    y: float = 0.0
    rotation: float = 0.0

    @classmethod
    def from_fragment(cls, fragment: ET.Element) -> "Component":
        width = parse_length(fragment.get("width"))
        height = parse_length(fragment.get("height"))
        return cls(fragment, width, height)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "Component":
        source = Path(path)
        try:
            fragment = ET.parse(source).getroot()
        except FileNotFoundError as exc:
            raise ComponentLoadError(f"component file not found: {source}") from exc
        except OSError as exc:
            raise ComponentLoadError(f"failed to read component file {source}: {exc}") from exc
        except ET.ParseError as exc:
            line, column = getattr(exc, "position", (None, None))
            location = f" at line {line}, column {column}" if line is not None else ""
            raise ComponentLoadError(f"invalid SVG in {source}{location}: {exc}") from exc
        try:
            return cls.from_fragment(fragment)
        except (InvalidUnitError, MalformedNumberError) as exc:
            raise type(exc)(f"{source}: {exc.message}") from exc

    def translated(self, dx: float, dy: float) -> "Component":
        return replace(self, x=self.x + dx, y=self.y + dy)

    def rotated(self, angle: float) -> "Component":
        return replace(self, rotation=self.rotation + angle)

    def transform(self) -> str:
        """Return the SVG transform list for the current pose ("" when unposed)."""
        transforms: List[str] = []
        if self.x != 0 or self.y != 0:
            transforms.append(f"translate({_fmt(mm_to_px(self.x))}, {_fmt(mm_to_px(self.y))})")
        if self.rotation != 0:
            center_x = mm_to_px(self.width) / 2
            center_y = mm_to_px(self.height) / 2
            transforms.append(f"translate({_fmt(center_x)}, {_fmt(center_y)})")
            transforms.append(f"rotate({_fmt(self.rotation)})")
            transforms.append(f"translate({_fmt(-center_x)}, {_fmt(-center_y)})")
        return " ".join(transforms)

    def element(self) -> ET.Element:
        wrapper = ET.Element(q("g"), {"transform": self.transform()})
        wrapper.append(deepcopy(self.fragment))
        return wrapper


def _fmt(value: float) -> str:
    return repr(float(value))


__all__ = ["Component"]
