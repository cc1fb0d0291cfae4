"""Tests for document loading."""

from __future__ import annotations

import pytest

from roer.files import DocumentError, read_document


def test_reads_yaml(tmp_path):
    path = tmp_path / "template.yml"
    path.write_text("schema: '1'\nid: tmpl-1\nstages:\n  - id: wait\n    type: wait\n", encoding="utf-8")

    assert read_document(path) == {"schema": "1", "id": "tmpl-1", "stages": [{"id": "wait", "type": "wait"}]}


def test_reads_json(tmp_path):
    path = tmp_path / "pipeline.json"
    path.write_text('{"name": "deploy", "application": "myapp", "stages": []}', encoding="utf-8")

    assert read_document(path) == {"name": "deploy", "application": "myapp", "stages": []}


def test_missing_file(tmp_path):
    with pytest.raises(DocumentError, match="reading file"):
        read_document(tmp_path / "missing.yml")


def test_invalid_yaml(tmp_path):
    path = tmp_path / "broken.yml"
    path.write_text("schema: [unclosed\n", encoding="utf-8")

    with pytest.raises(DocumentError, match="unmarshaling yaml"):
        read_document(path)


def test_top_level_must_be_mapping(tmp_path):
    path = tmp_path / "list.yml"
    path.write_text("- one\n- two\n", encoding="utf-8")

    with pytest.raises(DocumentError, match="mapping"):
        read_document(path)
