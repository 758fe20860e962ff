"""
Algebra Genius — Entry point.

Serve the web application with uvicorn.
"""

import argparse
from dataclasses import replace
from typing import Optional

import uvicorn

from solver.logging_config import setup_logging
from web import create_app
from web.config import load_settings


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Step-by-step algebra solver in the browser.")
    parser.add_argument("--host", help="Interface to bind (default from ALGEBRA_GENIUS_HOST)")
    parser.add_argument("--port", type=int, help="Port to listen on")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        type=str.upper, help="Set logging level")
    parser.add_argument("--delay", type=float, dest="solve_delay_seconds",
                        help="Seconds to pause before each solve")
    return parser


def main(argv: Optional[list] = None) -> None:
    args = _build_parser().parse_args(argv)
    overrides = {key: value for key, value in vars(args).items() if value is not None}
    settings = replace(load_settings(), **overrides)

    setup_logging(settings.log_level)
    app = create_app(settings)
    # log_config=None keeps the handlers installed by setup_logging.
    uvicorn.run(app, host=settings.host, port=settings.port,
                log_level=settings.log_level.lower(), log_config=None)


if __name__ == "__main__":
    main()
