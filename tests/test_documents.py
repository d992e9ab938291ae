# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for document snapshots."""

from __future__ import annotations

from pathlib import Path

import pytest

from lintscope.documents import DocumentProvider, FileSystemDocumentProvider, TextDocument


def test_file_system_provider_reads_snapshot(tmp_path: Path) -> None:
    source = tmp_path / "pkg" / "module.py"
    source.parent.mkdir()
    source.write_text("x = 1\n", encoding="utf-8")
    provider = FileSystemDocumentProvider()

    document = provider.open(tmp_path / "pkg" / ".." / "pkg" / "module.py")

    assert isinstance(provider, DocumentProvider)
    assert isinstance(document, TextDocument)
    assert document.path == source.resolve()
    assert document.get_text() == "x = 1\n"
    assert document.language_id == "python"


def test_file_system_provider_language_fallback(tmp_path: Path) -> None:
    notes = tmp_path / "notes.txt"
    notes.write_text("hello", encoding="utf-8")

    assert FileSystemDocumentProvider().open(notes).language_id == "plaintext"


def test_file_system_provider_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        FileSystemDocumentProvider().open(tmp_path / "missing.py")
