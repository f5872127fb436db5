import logging

import pytest
from pydantic import ValidationError

from campus_recruit.core.config import DEFAULT_JWT_SECRET, Settings
from campus_recruit.main import check_secret


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


def test_unknown_environment_is_rejected() -> None:
    with pytest.raises(ValidationError):
        _settings(app_env="qa")


def test_unknown_rate_limit_backend_is_rejected() -> None:
    with pytest.raises(ValidationError):
        _settings(rate_limit_backend="redis")


def test_database_url_override_wins() -> None:
    settings = _settings(database_url="sqlite:///./local.db")

    assert settings.sqlalchemy_url == "sqlite:///./local.db"


def test_postgres_url_is_built_from_parts() -> None:
    settings = _settings(
        database_url="", postgres_user="u", postgres_password="p", postgres_host="db", postgres_port=5433,
        postgres_db="campus",
    )

    assert settings.sqlalchemy_url == "postgresql://u:p@db:5433/campus"


def test_cors_origins_are_split() -> None:
    settings = _settings(cors_origins="http://a.example, http://b.example")

    assert settings.cors_origin_list == ["http://a.example", "http://b.example"]


def test_default_secret_blocks_production_start() -> None:
    with pytest.raises(RuntimeError):
        check_secret(_settings(app_env="production", jwt_secret_key=DEFAULT_JWT_SECRET))


def test_default_secret_only_warns_outside_production(caplog) -> None:
    with caplog.at_level(logging.WARNING):
        check_secret(_settings(app_env="development", jwt_secret_key=DEFAULT_JWT_SECRET))

    assert "insecure" in caplog.text


def test_custom_secret_passes() -> None:
    check_secret(_settings(app_env="production", jwt_secret_key="a-real-secret"))
