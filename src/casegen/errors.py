"""Error types shared across casegen."""
from __future__ import annotations

from typing import Optional


class CasegenError(ValueError):
    """Structured error with stable code for CLI mapping."""

    code = "E_CASEGEN"

    def __init__(self, message: str, *, code: Optional[str] = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code
        self.message = message

    def __str__(self) -> str:
        return self.message


class InvalidUnitError(CasegenError):
    """Raised when a length has a unit other than mm or in."""

    code = "E_UNIT"


class MalformedNumberError(CasegenError):
    """Raised when the numeric part of a length or layer list does not parse."""

    code = "E_NUMBER"


class DuplicateKeyError(CasegenError):
    """Raised when a label names `layers` or `tags` more than once."""

    code = "E_LABEL_DUPLICATE_KEY"


class InvalidTagSpecifierError(CasegenError):
    """Raised for a tag specifier that is neither `!name` nor `name:value`."""

    code = "E_LABEL_TAG_SPECIFIER"


class ComponentLoadError(CasegenError):
    code = "E_COMPONENT_LOAD"


class SceneError(CasegenError):
    code = "E_SCENE"


class EmptyDocumentError(CasegenError):
    """Raised when filtering prunes the document root itself."""

    code = "E_EMPTY_DOCUMENT"


class DocumentWriteError(CasegenError):
    code = "E_IO_WRITE"


__all__ = [
    "CasegenError",
    "ComponentLoadError",
    "DocumentWriteError",
    "DuplicateKeyError",
    "EmptyDocumentError",
    "InvalidTagSpecifierError",
    "InvalidUnitError",
    "MalformedNumberError",
    "SceneError",
]
