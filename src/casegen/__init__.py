"""Public API for casegen."""
from .component import Component
from .errors import (
    CasegenError,
    ComponentLoadError,
    DocumentWriteError,
    DuplicateKeyError,
    EmptyDocumentError,
    InvalidTagSpecifierError,
    InvalidUnitError,
    MalformedNumberError,
    SceneError,
)
from .filtering import filter_nodes, filter_tree, label_of, layer_predicate, tag_predicate
from .labels import Forbidden, Label, Required, TagMatch, format_label
from .scene import Placement, Scene, build_scene, load_scene, parse_scene
from .units import mm_to_px, parse_length
from .xmlutil import serialize, write_document

__all__ = [
    "CasegenError",
    "Component",
    "ComponentLoadError",
    "DocumentWriteError",
    "DuplicateKeyError",
    "EmptyDocumentError",
    "Forbidden",
    "InvalidTagSpecifierError",
    "InvalidUnitError",
    "Label",
    "MalformedNumberError",
    "Placement",
    "Required",
    "Scene",
    "SceneError",
    "TagMatch",
    "build_scene",
    "filter_nodes",
    "filter_tree",
    "format_label",
    "label_of",
    "layer_predicate",
    "load_scene",
    "mm_to_px",
    "parse_length",
    "parse_scene",
    "serialize",
    "tag_predicate",
    "write_document",
]
