from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from reviewlink.config import (
    ApiConfig,
    InvalidConfigurationValueError,
    get_api_config,
    get_database_config,
    get_storage_config,
    optional_env_var,
    positive_int_env_var,
)
from reviewlink.config.api import DEFAULT_IDENTITY_HEADER
from reviewlink.config.storage import DEFAULT_POOL_SIZE

if TYPE_CHECKING:
    from pathlib import Path


def test_database_config_prefers_database_uri(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "postgresql+psycopg://u:p@db/reviews")
    monkeypatch.setenv("DATABASE_POOL_SIZE", "12")

    config = get_database_config()

    assert config.uri == "postgresql+psycopg://u:p@db/reviews"
    assert config.pool_size == 12


def test_database_config_falls_back_to_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.delenv("DATABASE_POOL_SIZE", raising=False)
    monkeypatch.setenv("REVIEWLINK_DATA_DIR", str(tmp_path / "data"))

    config = get_database_config()

    assert config.uri == f"sqlite+pysqlite:///{(tmp_path / 'data').resolve() / 'reviewlink.db'}"
    assert config.pool_size == DEFAULT_POOL_SIZE
    assert get_storage_config().data_dir == tmp_path / "data"
    assert (tmp_path / "data").is_dir()


@pytest.mark.parametrize("raw", ["0", "-3", "many"])
def test_pool_size_must_be_positive(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("DATABASE_POOL_SIZE", raw)

    with pytest.raises(InvalidConfigurationValueError, match="DATABASE_POOL_SIZE"):
        get_database_config()


def test_api_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("REVIEWLINK_HOST", "REVIEWLINK_PORT", "REVIEWLINK_IDENTITY_HEADER"):
        monkeypatch.delenv(name, raising=False)

    assert get_api_config() == ApiConfig()
    assert get_api_config().identity_header == DEFAULT_IDENTITY_HEADER


def test_api_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REVIEWLINK_HOST", "0.0.0.0")
    monkeypatch.setenv("REVIEWLINK_PORT", "9001")
    monkeypatch.setenv("REVIEWLINK_IDENTITY_HEADER", " X-User-Id ")

    assert get_api_config() == ApiConfig(host="0.0.0.0", port=9001, identity_header="X-User-Id")


def test_env_helpers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RL_PRESENT", "value")
    monkeypatch.setenv("RL_BLANK", "  ")
    monkeypatch.delenv("RL_MISSING", raising=False)

    assert optional_env_var("RL_PRESENT", "fallback") == "value"
    assert optional_env_var("RL_BLANK", "fallback") == "fallback"
    assert positive_int_env_var("RL_MISSING", 7) == 7
