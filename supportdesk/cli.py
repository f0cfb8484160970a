# supportdesk/cli.py
"""Command line entry point: `supportdesk serve` / `supportdesk seed`."""

import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv

from .core.config import get_settings
from .core.log_config import setup_logging

logger = logging.getLogger("supportdesk")


async def _seed() -> bool:
    from .db.engine import async_session_maker, create_db_and_tables, engine
    from .db.seed import seed_data

    try:
        await create_db_and_tables()
        async with async_session_maker() as session:
            return await seed_data(session)
    finally:
        await engine.dispose()


def cmd_serve(args):
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "supportdesk.main:app",
        host=args.host or settings.uvicorn_host,
        port=args.port or settings.uvicorn_port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


def cmd_seed(args):
    if asyncio.run(_seed()):
        logger.info("Sample data inserted")
    else:
        logger.info("Database already has data, nothing to seed")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="supportdesk", description="SupportDesk ticket tracker")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the API server")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.add_argument("--reload", action="store_true", help="Auto-reload on code changes")
    serve.set_defaults(func=cmd_serve)

    seed = sub.add_parser("seed", help="Create tables and insert sample data if empty")
    seed.set_defaults(func=cmd_seed)
    return parser


def main(argv=None):
    load_dotenv()
    setup_logging(get_settings().log_level)
    args = build_parser().parse_args(argv)
    args.func(args)
    return 0


if __name__ == "__main__":
    sys.exit(main())
