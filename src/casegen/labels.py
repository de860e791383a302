"""Label strings carried in ``inkscape:label`` attributes.

A label is a ``;``-separated list of ``key=value`` entries. Two keys are
understood:

``layers=0,2``
    the node belongs only to the listed output layers.
``tags=light:gm-p13,!sight``
    the node is kept only when the tag context selects ``gm-p13`` for
    ``light`` and selects nothing for ``sight``.

Anything else is logged and ignored so designers can keep free-form names in
the same attribute.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Optional, Union

from .errors import DuplicateKeyError, InvalidTagSpecifierError, MalformedNumberError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Required:
    """The tag must be selected with exactly ``value``."""

    value: str

    def matches(self, tag_name: str, tags: Mapping[str, str]) -> bool:
        return tags.get(tag_name) == self.value


@dataclass(frozen=True)
class Forbidden:
    """The tag must not be selected at all."""

    def matches(self, tag_name: str, tags: Mapping[str, str]) -> bool:
        return tag_name not in tags


TagMatch = Union[Required, Forbidden]


@dataclass(frozen=True)
class Label:
    tags: Optional[Mapping[str, TagMatch]] = None
    layers: Optional[FrozenSet[int]] = None

    def __post_init__(self) -> None:
        # read-only views; labels are shared between filter passes
        if self.tags is not None and not isinstance(self.tags, MappingProxyType):
            object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))
        if self.layers is not None and not isinstance(self.layers, frozenset):
            object.__setattr__(self, "layers", frozenset(self.layers))

    def __hash__(self) -> int:
        tags = frozenset(self.tags.items()) if self.tags is not None else None
        return hash((tags, self.layers))

    @classmethod
    def default(cls) -> "Label":
        return cls()

    @property
    def is_default(self) -> bool:
        return self.tags is None and self.layers is None

    @classmethod
    def parse(cls, raw: str) -> "Label":
        tags: Optional[Dict[str, TagMatch]] = None
        layers: Optional[FrozenSet[int]] = None

        for entry in raw.split(";"):
            if not entry:
                continue
            pair = entry.split("=")
            if len(pair) != 2 or not pair[1]:
                logger.warning("Unhandled label: %s", entry)
                continue
            key, value = pair
            if key == "layers":
                if layers is not None:
                    raise DuplicateKeyError(f"layers specified multiple times: {entry}")
                layers = _parse_layers(value)
            elif key == "tags":
                if tags is not None:
                    raise DuplicateKeyError(f"tags specified multiple times: {entry}")
                tags = _parse_tags(value)
            else:
                logger.warning("Unhandled label component: %s = %s", key, value)

        return cls(tags, layers)


def _split_list(value: str) -> List[str]:
    """Split a comma list, ignoring trailing empty entries (`0,1,` is `0,1`)."""
    chunks = value.split(",")
    while chunks and not chunks[-1]:
        chunks.pop()
    return chunks


def _parse_layers(value: str) -> FrozenSet[int]:
    parsed = set()
    for chunk in _split_list(value):
        try:
            parsed.add(int(chunk))
        except ValueError as exc:
            raise MalformedNumberError(f"invalid layer number {chunk!r} in layers={value}") from exc
    return frozenset(parsed)


def _parse_tags(value: str) -> Dict[str, TagMatch]:
    parsed: Dict[str, TagMatch] = {}
    for spec in _split_list(value):
        if spec.startswith("!") and len(spec) > 1:
            parsed[spec[1:]] = Forbidden()
            continue
        parts = spec.split(":")
        if len(parts) != 2 or not parts[0] or not parts[1]:
            raise InvalidTagSpecifierError(f"Invalid tag specifier: {spec!r}")
        parsed[parts[0]] = Required(parts[1])
    return parsed


def format_label(label: Label) -> str:
    """Render ``label`` back to its canonical string form."""
    entries: List[str] = []
    if label.layers is not None:
        entries.append("layers=" + ",".join(str(layer) for layer in sorted(label.layers)))
    if label.tags is not None:
        specs = []
        for name in sorted(label.tags):
            match = label.tags[name]
            if isinstance(match, Forbidden):
                specs.append(f"!{name}")
            else:
                specs.append(f"{name}:{match.value}")
        entries.append("tags=" + ",".join(specs))
    return ";".join(entries)


__all__ = ["Forbidden", "Label", "Required", "TagMatch", "format_label"]
