from __future__ import annotations

import logging
from pathlib import Path

import pytest

from drink_sales.config import BACKEND_LOCAL, BACKEND_SUPABASE, AppConfig, configure_logging, load_config
from drink_sales.errors import ConfigurationError
from drink_sales.main import build_backend, parse_args
from drink_sales.persistence import SqliteSalesRepository
from drink_sales.remote import SupabaseSalesRepository
from drink_sales.repository import LocalAuth


def test_defaults_without_environment():
    config = load_config({})
    assert config.backend == BACKEND_LOCAL
    assert config.db_path == Path("data/drink_sales.db")
    assert (config.open_hour, config.close_hour, config.page_size) == (9, 17, 10)
    assert not config.supabase_configured


def test_environment_overrides():
    config = load_config(
        {
            "DRINK_SALES_BACKEND": "Supabase",
            "SUPABASE_URL": "https://example.supabase.co",
            "SUPABASE_ANON_KEY": "anon",
            "DRINK_SALES_OPEN_HOUR": "8",
            "DRINK_SALES_CLOSE_HOUR": "20",
            "DRINK_SALES_PAGE_SIZE": "25",
        }
    )
    assert config.backend == BACKEND_SUPABASE
    assert config.supabase_configured
    assert (config.open_hour, config.close_hour, config.page_size) == (8, 20, 25)


@pytest.mark.parametrize(
    "environ",
    [
        {"DRINK_SALES_PAGE_SIZE": "ten"},
        {"DRINK_SALES_PAGE_SIZE": "0"},
        {"DRINK_SALES_OPEN_HOUR": "18"},
        {"DRINK_SALES_BACKEND": "dexie"},
    ],
)
def test_invalid_values_are_rejected(environ):
    with pytest.raises(ConfigurationError):
        load_config(environ)


def test_cli_overrides_apply_on_top_of_environment(tmp_path):
    args = parse_args(["--backend", "supabase", "--db", str(tmp_path / "x.db"), "--date", "2025-03-14"])
    config = load_config({}).with_overrides(backend=args.backend, db_path=args.db)
    assert config.backend == BACKEND_SUPABASE
    assert config.db_path == tmp_path / "x.db"
    assert args.date.isoformat() == "2025-03-14"


def test_cli_rejects_malformed_date():
    with pytest.raises(SystemExit):
        parse_args(["--date", "yesterday"])


def test_build_backend_matches_config(tmp_path):
    repo, auth = build_backend(AppConfig(db_path=tmp_path / "s.db"))
    assert isinstance(repo, SqliteSalesRepository)
    assert isinstance(auth, LocalAuth)

    repo, auth = build_backend(AppConfig(backend=BACKEND_SUPABASE))
    assert isinstance(repo, SupabaseSalesRepository)
    assert auth.requires_sign_in
    assert repo.client is None


def test_configure_logging_writes_to_log_file(config):
    configure_logging(config)
    logging.getLogger("drink_sales.test").info("hello log")
    for handler in logging.getLogger("drink_sales").handlers:
        handler.flush()
    assert "hello log" in config.log_path.read_text(encoding="utf-8")
