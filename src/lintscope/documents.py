# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Read-only document access used by the linting runtime."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class TextDocument(Protocol):
    """Protocol describing a source document handed to a linter."""

    @property
    def path(self) -> Path:
        """Return the absolute filesystem path of the document."""

        raise NotImplementedError

    @property
    def language_id(self) -> str:
        """Return the language identifier of the document (``python`` for ``.py``)."""

        raise NotImplementedError

    def get_text(self) -> str:
        """Return the current text content of the document."""

        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class SourceDocument:
    """Immutable snapshot of a document's path and content."""

    path: Path
    text: str
    language_id: str = "python"

    def get_text(self) -> str:
        """Return the captured text content."""

        return self.text


@runtime_checkable
class DocumentProvider(Protocol):
    """Protocol implemented by services that open documents by resource."""

    def open(self, resource: Path) -> TextDocument:
        """Return the document identified by ``resource``."""

        raise NotImplementedError


_LANGUAGE_BY_SUFFIX = {
    ".py": "python",
    ".pyi": "python",
    ".pyw": "python",
}


class FileSystemDocumentProvider:
    """Open documents straight from disk."""

    def __init__(self, *, encoding: str = "utf-8") -> None:
        self._encoding = encoding

    def open(self, resource: Path) -> SourceDocument:
        """Read ``resource`` from disk and return a :class:`SourceDocument`.

        Args:
            resource: Path of the file to open.

        Returns:
            SourceDocument: Snapshot of the file's absolute path and text.

        Raises:
            FileNotFoundError: If ``resource`` does not exist.
        """

        path = Path(resource).expanduser().resolve()
        text = path.read_text(encoding=self._encoding, errors="replace")
        language = _LANGUAGE_BY_SUFFIX.get(path.suffix.lower(), "plaintext")
        return SourceDocument(path=path, text=text, language_id=language)


__all__ = ["DocumentProvider", "FileSystemDocumentProvider", "SourceDocument", "TextDocument"]
