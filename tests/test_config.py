import pytest
from pydantic import ValidationError

from app.core.config import EnvironmentMode, Settings


def test_env_mode_is_case_insensitive():
    settings = Settings(env_mode="PRODUCTION", _env_file=None)
    assert settings.env_mode is EnvironmentMode.PRODUCTION
    assert settings.use_real_services


def test_invalid_env_mode():
    with pytest.raises(ValidationError):
        Settings(env_mode="testing", _env_file=None)


def test_media_url_is_normalised():
    assert Settings(media_url="media/", _env_file=None).media_url == "/media"


def test_production_config_flags_defaults():
    settings = Settings(env_mode="production", _env_file=None)
    assert settings.validate_production_config() == [
        "AZURE_STORAGE_CONNECTION_STRING",
        "JWT_SECRET",
        "ADMIN_PASSWORD",
    ]


def test_development_needs_nothing():
    assert Settings(env_mode="development", _env_file=None).validate_production_config() == []
