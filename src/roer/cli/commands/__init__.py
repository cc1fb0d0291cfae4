"""CLI command modules for roer.

Each module exposes a ``typer.Typer`` named ``app`` that is registered on the
root application in ``roer/__init__.py``.
"""

from . import app, config_cmd, pipeline, pipeline_template, task

__all__ = ["app", "config_cmd", "pipeline", "pipeline_template", "task"]
