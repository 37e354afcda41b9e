"""Entry point for the drink-sales Textual app."""

from __future__ import annotations

import argparse
import logging
from datetime import date
from pathlib import Path
from typing import Sequence

from drink_sales.config import BACKEND_SUPABASE, BACKENDS, AppConfig, configure_logging, load_config
from drink_sales.controller import SalesController
from drink_sales.errors import ValidationError
from drink_sales.persistence import SqliteSalesRepository
from drink_sales.remote import SupabaseAuth, SupabaseSalesRepository, create_supabase_client
from drink_sales.repository import AuthService, LocalAuth, SalesRepository
from drink_sales.sales_app import DrinkSalesApp
from drink_sales.timeslots import parse_date

logger = logging.getLogger(__name__)


def build_backend(config: AppConfig) -> tuple[SalesRepository, AuthService]:
    """Wire the configured repository and its auth boundary."""
    if config.backend == BACKEND_SUPABASE:
        client = create_supabase_client(config)
        auth = SupabaseAuth(client)
        return (SupabaseSalesRepository(client, auth), auth)
    return (SqliteSalesRepository(config.db_path), LocalAuth())


def build_controller(config: AppConfig) -> SalesController:
    repository, auth = build_backend(config)
    return SalesController(repository, auth, config)


def _date_arg(text: str) -> date:
    try:
        return parse_date(text)
    except ValidationError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="매장 음료 판매 기록")
    parser.add_argument("--backend", choices=BACKENDS, help="sales backend (default: DRINK_SALES_BACKEND or local)")
    parser.add_argument("--db", type=Path, help="SQLite file for the local backend")
    parser.add_argument("--date", type=_date_arg, help="open on this day (YYYY-MM-DD) instead of today")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    """Run the Textual application."""
    args = parse_args(argv)
    config = load_config().with_overrides(backend=args.backend, db_path=args.db)
    configure_logging(config)
    logger.info("starting backend=%s", config.backend)

    controller = build_controller(config)
    if args.date:
        controller.date = args.date
    DrinkSalesApp(controller).run()


if __name__ == "__main__":
    main()
