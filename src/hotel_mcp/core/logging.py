"""Logging helpers."""
from __future__ import annotations

import logging
import sys
from pathlib import Path


def configure_logging(level: str, log_dir: Path) -> None:
    """Configure logging for the stdio server.

    stdout carries the tool protocol, so console output goes to stderr.
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr),
            logging.FileHandler(log_dir / "hotel_mcp.log"),
        ],
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
