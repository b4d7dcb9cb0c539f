"""
Unit tests for the settings loader and logger setup.
"""

from loguru import logger

from crow_api.config_loader import get_settings
from crow_api.log import LoggingFormat, get_logger, setup_logger, setup_logger_from_settings


class TestSettings:

    def test_packaged_defaults(self):
        settings = get_settings()

        assert settings.get("crow_api.source_directory") == "src"
        assert settings.get("crow_api.api_gateway_name") == "crow-api"
        assert settings.get("lambda.handler") == "index.handler"
        assert settings.get("authorizer.results_cache_ttl_seconds") == 3600
        assert list(settings.get("declared_config.filenames")) == ["crow.json", "crow.toml"]

    def test_same_instance(self):
        assert get_settings() is get_settings()


class TestLogger:

    def test_get_logger_is_loguru(self):
        assert get_logger() is logger

    def test_setup_logger_formats(self):
        assert setup_logger("DEBUG", LoggingFormat.JSON) is logger
        assert setup_logger("INFO", LoggingFormat.CONSOLE) is logger

    def test_unknown_level_falls_back(self):
        assert setup_logger("NOT-A-LEVEL") is logger

    def test_setup_from_settings(self):
        settings = {"log.level": "WARNING", "log.format": "json"}

        assert setup_logger_from_settings(settings) is logger
        assert setup_logger_from_settings() is logger
