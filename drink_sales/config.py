"""Runtime configuration for persistence, export and printing."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping

from drink_sales.errors import ConfigurationError

DEFAULT_DB_PATH = "data/drink_sales.db"
DEFAULT_EXPORT_DIR = "exports"
DEFAULT_LOG_PATH = "/tmp/drink-sales-debug.log"
DEFAULT_OPEN_HOUR = 9
DEFAULT_CLOSE_HOUR = 17
DEFAULT_PAGE_SIZE = 10

BACKEND_LOCAL = "local"
BACKEND_SUPABASE = "supabase"
BACKENDS = (BACKEND_LOCAL, BACKEND_SUPABASE)

# 58mm ESC/POS thermal printer used at the counter.
PRINTER_USB_VENDOR_ID = 0x28E9
PRINTER_USB_PRODUCT_ID = 0x0289
PRINTER_WIDTH_PX = 384
PRINTER_FONT_SIZE = 28
PRINTER_FONT_PATH = "/System/Library/Fonts/AppleSDGothicNeo.ttc"
PRINTER_LEFT_INDENT_PX = 16
PRINTER_TAIL_SPACER_PX = 70


@dataclass(frozen=True)
class AppConfig:
    """Settings resolved once at startup and passed to every collaborator."""

    backend: str = BACKEND_LOCAL
    db_path: Path = Path(DEFAULT_DB_PATH)
    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    export_dir: Path = Path(DEFAULT_EXPORT_DIR)
    log_path: Path = Path(DEFAULT_LOG_PATH)
    open_hour: int = DEFAULT_OPEN_HOUR
    close_hour: int = DEFAULT_CLOSE_HOUR
    page_size: int = DEFAULT_PAGE_SIZE
    printer_font_path: str | None = None

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)

    def with_overrides(self, **changes: object) -> AppConfig:
        """Return a copy with non-None overrides applied and re-validated."""
        applied = {key: value for key, value in changes.items() if value is not None}
        updated = replace(self, **applied)
        _validate(updated)
        return updated


def _int_setting(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc


def _optional(environ: Mapping[str, str], name: str) -> str | None:
    value = environ.get(name, "").strip()
    return value or None


def _validate(config: AppConfig) -> None:
    if config.backend not in BACKENDS:
        raise ConfigurationError(f"backend must be one of {', '.join(BACKENDS)}, got {config.backend!r}")
    if not (0 <= config.open_hour < config.close_hour <= 24):
        raise ConfigurationError(
            f"business hours must satisfy 0 <= open < close <= 24, got {config.open_hour}-{config.close_hour}"
        )
    if config.page_size < 1:
        raise ConfigurationError("page size must be at least 1")


def load_config(environ: Mapping[str, str] | None = None) -> AppConfig:
    """Build the application config from environment variables."""
    env = os.environ if environ is None else environ
    config = AppConfig(
        backend=(_optional(env, "DRINK_SALES_BACKEND") or BACKEND_LOCAL).lower(),
        db_path=Path(_optional(env, "DRINK_SALES_DB_PATH") or DEFAULT_DB_PATH),
        supabase_url=_optional(env, "SUPABASE_URL"),
        supabase_anon_key=_optional(env, "SUPABASE_ANON_KEY"),
        export_dir=Path(_optional(env, "DRINK_SALES_EXPORT_DIR") or DEFAULT_EXPORT_DIR),
        log_path=Path(_optional(env, "DRINK_SALES_LOG_PATH") or DEFAULT_LOG_PATH),
        open_hour=_int_setting(env, "DRINK_SALES_OPEN_HOUR", DEFAULT_OPEN_HOUR),
        close_hour=_int_setting(env, "DRINK_SALES_CLOSE_HOUR", DEFAULT_CLOSE_HOUR),
        page_size=_int_setting(env, "DRINK_SALES_PAGE_SIZE", DEFAULT_PAGE_SIZE),
        printer_font_path=_optional(env, "DRINK_SALES_PRINTER_FONT_PATH"),
    )
    _validate(config)
    return config


def configure_logging(config: AppConfig) -> None:
    """Route package logs to the debug log file; the TUI owns the terminal."""
    package_logger = logging.getLogger("drink_sales")
    package_logger.setLevel(logging.DEBUG)
    package_logger.propagate = False
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    try:
        config.log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(config.log_path, encoding="utf-8")
    except OSError:
        # Logging must never interfere with app flow.
        package_logger.addHandler(logging.NullHandler())
        return
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    package_logger.addHandler(handler)
