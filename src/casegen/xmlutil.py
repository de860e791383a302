"""ElementTree helpers: namespaces, label lookup and document I/O."""
from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional, Union

from .errors import DocumentWriteError

SVG_NS = "http://www.w3.org/2000/svg"
INKSCAPE_NS = "http://www.inkscape.org/namespaces/inkscape"
SODIPODI_NS = "http://sodipodi.sourceforge.net/DTD/sodipodi-0.dtd"

ET.register_namespace("", SVG_NS)
ET.register_namespace("inkscape", INKSCAPE_NS)
ET.register_namespace("sodipodi", SODIPODI_NS)

LABEL_ATTR = f"{{{INKSCAPE_NS}}}label"


def q(tag: str) -> str:
    return f"{{{SVG_NS}}}{tag}"


def raw_label(node: ET.Element) -> Optional[str]:
    return node.get(LABEL_ATTR)


def serialize(root: ET.Element) -> str:
    return ET.tostring(root, encoding="unicode")


def write_document(root: ET.Element, path: Union[str, Path]) -> Path:
    target = Path(path)
    try:
        target.write_text(serialize(root), encoding="utf-8")
    except OSError as exc:
        raise DocumentWriteError(f"failed to write output file {target}: {exc}") from exc
    return target


def local_name(tag: str) -> str:
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag
