"""Static facility catalog used for search filters."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Mapping

logger = logging.getLogger(__name__)

SUPPORTED_LANGUAGES: tuple[str, ...] = ("en", "es", "it", "he", "ar", "de")


@dataclass(frozen=True)
class Facility:
    """A filterable hotel facility with per-language names."""

    facility_id: int
    name: str
    translations: Mapping[str, str] = field(default_factory=dict)

    def name_for(self, language: str) -> str:
        return self.translations.get(language) or self.name


class FacilityCatalog:
    """Loads facility metadata from disk."""

    def __init__(self, facilities: Iterable[Facility], *, source: Path | None = None) -> None:
        self._facilities = list(facilities)
        self._source = source

    @property
    def source(self) -> Path | None:
        return self._source

    def __len__(self) -> int:
        return len(self._facilities)

    def for_language(self, language: str) -> List[dict[str, object]]:
        return [{"id": item.facility_id, "name": item.name_for(language)} for item in self._facilities]

    @classmethod
    def load(cls, path: Path) -> "FacilityCatalog":
        if not path.exists():
            logger.warning("Facility catalog not found at %s; continuing without facilities", path)
            return cls([], source=path)
        try:
            entries = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.exception("Failed to load facility catalog from %s", path)
            return cls([], source=path)
        if not isinstance(entries, list):
            logger.warning("Facility catalog at %s is not a list; ignoring it", path)
            return cls([], source=path)

        facilities: List[Facility] = []
        for entry in entries:
            if not isinstance(entry, dict) or entry.get("facility_id") is None:
                continue
            translations = {
                item["lang"]: item["facility"]
                for item in entry.get("translation") or []
                if isinstance(item, dict) and item.get("lang") and item.get("facility")
            }
            facilities.append(
                Facility(
                    facility_id=entry["facility_id"],
                    name=entry.get("facility") or str(entry["facility_id"]),
                    translations=translations,
                )
            )
        logger.debug("Loaded %s facilities from %s", len(facilities), path)
        return cls(facilities, source=path)
