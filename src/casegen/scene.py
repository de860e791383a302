"""Scene files: which components go where, and which outputs to write."""
from __future__ import annotations

import logging
import tomllib
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .component import Component
from .errors import SceneError
from .filtering import filter_tree, layer_predicate, tag_predicate
from .xmlutil import q, write_document

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Placement:
    component: str
    translate: Tuple[float, float] = (0.0, 0.0)
    rotate: float = 0.0

    def apply(self, component: Component) -> Component:
        dx, dy = self.translate
        return component.translated(dx, dy).rotated(self.rotate)


@dataclass
class Scene:
    output: str
    components: Dict[str, Path]
    placements: List[Placement]
    layer_count: int = 1
    tags: Dict[str, str] = field(default_factory=dict)
    document_attributes: Dict[str, str] = field(default_factory=dict)

    @property
    def layers(self) -> range:
        return range(self.layer_count)

    def output_path(self, layer: int, output_dir: Optional[Path] = None) -> Path:
        name = Path(self.output.format(layer=layer))
        if output_dir is not None and not name.is_absolute():
            return output_dir / name
        return name

    def load_components(self) -> Dict[str, Component]:
        loaded: Dict[str, Component] = {}
        for name, path in self.components.items():
            component = Component.from_file(path)
            logger.info("Loaded component %s from %s (%g x %g mm)", name, path, component.width, component.height)
            loaded[name] = component
        return loaded

    def compose(self, components: Optional[Mapping[str, Component]] = None) -> ET.Element:
        """Build the unfiltered document holding every placement in order."""
        if components is None:
            components = self.load_components()
        root = ET.Element(q("svg"), {"version": "1.1"})
        for key, value in self.document_attributes.items():
            root.set(key, value)
        for placement in self.placements:
            root.append(placement.apply(components[placement.component]).element())
        return root

    def render(
        self,
        tags: Optional[Mapping[str, str]] = None,
        layers: Optional[Iterable[int]] = None,
    ) -> Dict[int, ET.Element]:
        """Return one filtered document per layer.

        ``tags`` overrides entries of the scene's own tag context.
        """
        selected = dict(self.tags)
        if tags:
            selected.update(tags)
        tag_filtered = filter_tree(self.compose(), tag_predicate(selected))
        wanted = list(self.layers if layers is None else layers)
        return {layer: filter_tree(tag_filtered, layer_predicate(layer)) for layer in wanted}


def load_scene(path: Union[str, Path]) -> Scene:
    scene_path = Path(path)
    try:
        with scene_path.open("rb") as fh:
            data = tomllib.load(fh)
    except FileNotFoundError as exc:
        raise SceneError(f"scene file not found: {scene_path}") from exc
    except OSError as exc:
        raise SceneError(f"failed to read scene file {scene_path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise SceneError(f"invalid TOML in scene file {scene_path}: {exc}") from exc
    return parse_scene(data, base_dir=scene_path.parent)


def parse_scene(data: Mapping[str, Any], *, base_dir: Path = Path(".")) -> Scene:
    output = data.get("output")
    if not isinstance(output, str) or not output:
        raise SceneError('scene requires a non-empty string "output"')
    try:
        distinct = output.format(layer=0) != output.format(layer=1)
    except (KeyError, IndexError, ValueError) as exc:
        raise SceneError(f'scene "output" must only use the {{layer}} placeholder (got {output!r})') from exc
    if not distinct:
        raise SceneError(f'scene "output" must contain {{layer}} (got {output!r})')

    layer_count = data.get("layers", 1)
    if isinstance(layer_count, bool) or not isinstance(layer_count, int) or layer_count < 1:
        raise SceneError(f'scene "layers" must be a positive integer (got {layer_count!r})')

    tags = _string_table(data, "tags")
    document_attributes = _string_table(data, "document")

    components: Dict[str, Path] = {}
    for name, value in _table(data, "components").items():
        if not isinstance(value, str) or not value:
            raise SceneError(f'component "{name}" must map to a file path')
        resolved = Path(value).expanduser()
        if not resolved.is_absolute():
            resolved = base_dir / resolved
        components[name] = resolved

    raw_places = data.get("place", [])
    if not isinstance(raw_places, list):
        raise SceneError('scene "place" must be an array of tables ([[place]])')
    placements = [_parse_placement(entry, index, components) for index, entry in enumerate(raw_places)]

    return Scene(
        output=output,
        components=components,
        placements=placements,
        layer_count=layer_count,
        tags=tags,
        document_attributes=document_attributes,
    )


def build_scene(
    scene: Scene,
    output_dir: Optional[Path] = None,
    *,
    tags: Optional[Mapping[str, str]] = None,
    layers: Optional[Iterable[int]] = None,
) -> List[Path]:
    """Render every requested layer of ``scene`` and write it to disk."""
    written: List[Path] = []
    for layer, document in scene.render(tags, layers).items():
        target = write_document(document, scene.output_path(layer, output_dir))
        logger.info("Wrote layer %d to %s", layer, target)
        written.append(target)
    return written


def _parse_placement(entry: Any, index: int, components: Mapping[str, Path]) -> Placement:
    where = f"place[{index}]"
    if not isinstance(entry, dict):
        raise SceneError(f"{where} must be a table")
    name = entry.get("component")
    if not isinstance(name, str) or not name:
        raise SceneError(f'{where} requires a "component" name')
    if name not in components:
        raise SceneError(f'{where} references unknown component "{name}"')

    translate = entry.get("translate", [0, 0])
    if not isinstance(translate, list) or len(translate) != 2 or not all(_is_number(v) for v in translate):
        raise SceneError(f'{where} "translate" must be [x, y] in millimeters (got {translate!r})')
    rotate = entry.get("rotate", 0)
    if not _is_number(rotate):
        raise SceneError(f'{where} "rotate" must be a number of degrees (got {rotate!r})')

    unknown = set(entry) - {"component", "translate", "rotate"}
    if unknown:
        logger.warning("Ignoring unknown keys in %s: %s", where, ", ".join(sorted(unknown)))
    return Placement(name, (float(translate[0]), float(translate[1])), float(rotate))


def _table(data: Mapping[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise SceneError(f'scene "{key}" must be a table')
    return value


def _string_table(data: Mapping[str, Any], key: str) -> Dict[str, str]:
    table = _table(data, key)
    for name, value in table.items():
        if not isinstance(value, str):
            raise SceneError(f'scene "{key}.{name}" must be a string (got {value!r})')
    return dict(table)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


__all__ = ["Placement", "Scene", "build_scene", "load_scene", "parse_scene"]
