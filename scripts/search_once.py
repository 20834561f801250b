"""Resolve a place, search it once and print the rendered results."""
from __future__ import annotations

import argparse
import asyncio
import logging
from datetime import date, timedelta
from pathlib import Path

from hotel_mcp.config.settings import Settings
from hotel_mcp.core.logging import configure_logging
from hotel_mcp.core.rendering import render
from hotel_mcp.hotels.facilities import FacilityCatalog
from hotel_mcp.services.backend_client import BackendClient
from hotel_mcp.session.store import SessionData
from hotel_mcp.tasks.places import PlacesTask
from hotel_mcp.tasks.search import SearchCriteria, SearchTask


async def search_once(settings: Settings, args: argparse.Namespace) -> dict:
    session = SessionData(language=settings.default_language)
    async with BackendClient(base_url=settings.api_base_url, timeout=settings.http_timeout_s) as client:
        places = PlacesTask(
            client,
            facilities=FacilityCatalog.load(settings.facilities_path),
            default_language=settings.default_language,
            default_currency=settings.default_currency,
            default_country_code=settings.default_country_code,
            market=settings.default_market,
        )
        created = await places.create_session(session, args.place)
        if created["status"] != "success":
            return created

        search = SearchTask(client)
        criteria = SearchCriteria(
            check_in_date=args.check_in.isoformat(),
            check_out_date=args.check_out.isoformat(),
            adults=args.adults,
            children=args.children,
            facilities=args.facility,
        )
        return await search.search(session, criteria)


def main() -> None:
    tomorrow = date.today() + timedelta(days=1)
    parser = argparse.ArgumentParser(description="Run a single hotel search against the backend")
    parser.add_argument("place", help="Free-text place, e.g. 'Paris'")
    parser.add_argument("--check-in", type=date.fromisoformat, default=tomorrow)
    parser.add_argument("--check-out", type=date.fromisoformat, default=tomorrow + timedelta(days=1))
    parser.add_argument("--adults", type=int, default=2)
    parser.add_argument("--children", type=int, default=0)
    parser.add_argument("--facility", type=int, action="append", default=[], help="Facility ID filter (repeatable)")
    parser.add_argument("--format", dest="output_format", choices=["json", "yaml"])
    parser.add_argument("--output", type=Path, help="Write the rendered result to this file instead of stdout")
    args = parser.parse_args()

    settings = Settings(**({"output_format": args.output_format} if args.output_format else {}))
    settings.ensure_directories()
    configure_logging(settings.log_level, settings.log_dir)

    result = asyncio.run(search_once(settings, args))
    text = render(result, settings.output_format)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(text)
        logging.info("Wrote %s result to %s", result.get("status"), args.output)
    else:
        print(text)


if __name__ == "__main__":
    main()
