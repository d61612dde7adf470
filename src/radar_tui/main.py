#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

import argparse
import logging
import sys

from .app import RadarApp
from .config import load_config, settings_from_config, setup_logging

logger = logging.getLogger("radar")


# --- Entrypoint ---
def main() -> None:
    parser = argparse.ArgumentParser(description="Finance Radar TUI client")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--api-base", type=str, help="Override the candidates API URL")
    parser.add_argument("--top", type=int, help="Number of candidates to request")
    args = parser.parse_args()

    debug_path = setup_logging(args.debug)
    if debug_path:
        print(f"Debug logging enabled: {debug_path}", file=sys.stderr)

    config = load_config()
    if args.api_base:
        config["api_base"] = args.api_base
    if args.top is not None:
        config["fetch_top"] = args.top
    settings = settings_from_config(config)
    logger.info("Using API %s (top=%d)", settings["api_base"], settings["fetch_top"])

    try:
        app = RadarApp(settings=settings)
        app.run()
    except Exception as e:
        logger.exception("Application crashed: %s", e)
        print(f"Application crashed: {e}", file=sys.stderr)


if __name__ == "__main__":
    main()
