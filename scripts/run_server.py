"""Start the hotel MCP server over stdio."""
from __future__ import annotations

import argparse
import logging

from hotel_mcp.config.settings import Settings
from hotel_mcp.core.logging import configure_logging
from hotel_mcp.server import HotelToolbox, build_server


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the hotel booking MCP server")
    parser.add_argument("--variant", choices=["customer", "standard"], help="Tool surface to expose")
    parser.add_argument("--format", dest="output_format", choices=["json", "yaml"], help="Tool result format")
    parser.add_argument("--log-level", help="Override the configured log level")
    args = parser.parse_args()

    overrides = {
        key: value
        for key, value in {
            "server_variant": args.variant,
            "output_format": args.output_format,
            "log_level": args.log_level,
        }.items()
        if value is not None
    }
    settings = Settings(**overrides)
    settings.ensure_directories()
    configure_logging(settings.log_level, settings.log_dir)

    toolbox = HotelToolbox(settings)
    server = build_server(toolbox)
    logging.info(
        "Starting %s server against %s (output %s)",
        settings.server_variant,
        settings.api_base_url,
        settings.output_format,
    )
    logging.info(
        "Quotes poll every %.1fs for up to %s attempts (worst case %.0fs per booking)",
        settings.quote_poll_interval_s,
        settings.quote_max_attempts,
        settings.worst_case_poll_seconds(),
    )
    server.run()


if __name__ == "__main__":
    main()
