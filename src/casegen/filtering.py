"""Label-driven pruning of element trees."""
from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Callable, List, Mapping

from .errors import EmptyDocumentError
from .labels import Label
from .xmlutil import local_name, raw_label

Predicate = Callable[[Label], bool]


def label_of(node: ET.Element) -> Label:
    return Label.parse(raw_label(node) or "")


def filter_nodes(node: ET.Element, predicate: Predicate) -> List[ET.Element]:
    """Return ``[copy]`` of ``node`` with pruned children, or ``[]`` if it fails.

    Children are filtered before the node's own label is checked; a failing
    node takes every descendant with it. The input tree is never modified.
    """
    children: List[ET.Element] = []
    for child in node:
        children.extend(filter_nodes(child, predicate))

    if not predicate(label_of(node)):
        return []

    rebuilt = ET.Element(node.tag, dict(node.attrib))
    rebuilt.text = node.text
    rebuilt.tail = node.tail
    rebuilt.extend(children)
    return [rebuilt]


def filter_tree(root: ET.Element, predicate: Predicate) -> ET.Element:
    kept = filter_nodes(root, predicate)
    if not kept:
        raise EmptyDocumentError(f"document root <{local_name(root.tag)}> was removed by its own label")
    return kept[0]


def tag_predicate(tags: Mapping[str, str]) -> Predicate:
    """Keep nodes whose tag requirements all match ``tags``."""
    selected = dict(tags)

    def predicate(label: Label) -> bool:
        if label.tags is None:
            return True
        return all(match.matches(name, selected) for name, match in label.tags.items())

    return predicate


def layer_predicate(layer: int) -> Predicate:
    """Keep nodes without a layer set, or whose layer set contains ``layer``."""

    def predicate(label: Label) -> bool:
        return label.layers is None or layer in label.layers

    return predicate


__all__ = ["Predicate", "filter_nodes", "filter_tree", "label_of", "layer_predicate", "tag_predicate"]
