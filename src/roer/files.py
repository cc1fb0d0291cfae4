"""Loading of YAML / JSON documents given on the command line."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

logger = logging.getLogger(__name__)


class DocumentError(RuntimeError):
    """Raised when a document cannot be read or is not a mapping."""


def read_document(path: Path) -> dict[str, Any]:
    """Read a YAML or JSON file whose top level is a mapping.

    JSON is parsed by the same loader since it is a subset of YAML.
    """
    logger.debug("Reading document %s", path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DocumentError(f"reading file: {path}: {exc}") from exc

    yaml = YAML(typ="safe", pure=True)
    try:
        data = yaml.load(text)
    except YAMLError as exc:
        raise DocumentError(f"unmarshaling yaml in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise DocumentError(f"{path} must contain a mapping at the top level")
    return data


__all__ = ["DocumentError", "read_document"]
