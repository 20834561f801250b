"""Render tool results as JSON or YAML text."""
from __future__ import annotations

import json
from typing import Any

import yaml


def render(payload: dict[str, Any], fmt: str = "json") -> str:
    if fmt == "yaml":
        return yaml.safe_dump(
            payload,
            indent=2,
            width=float("inf"),
            sort_keys=False,
            allow_unicode=True,
        )
    return json.dumps(payload, indent=2, ensure_ascii=False, default=str)
