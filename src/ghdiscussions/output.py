"""Render command results as JSON or plain text."""

from __future__ import annotations

import json
import sys
from typing import Any, TextIO

FORMATS = ("json", "text")


def render_text(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list):
        return "\n".join(f"- {render_text(item)}" for item in value)
    if isinstance(value, dict):
        return "\n".join(f"{key}: {render_text(item)}" for key, item in value.items())
    return str(value)


def render(value: Any, output_format: str = "json") -> str:
    if output_format == "text":
        if isinstance(value, list):
            return "".join(f"{render_text(item)}\n\n" for item in value)
        return f"{render_text(value)}\n"
    return json.dumps(value, indent=2, ensure_ascii=False) + "\n"


def write_output(value: Any, output_format: str = "json", stream: TextIO | None = None) -> None:
    (stream or sys.stdout).write(render(value, output_format))


__all__ = ["FORMATS", "render", "render_text", "write_output"]
