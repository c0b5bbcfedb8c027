"""
Product API Backend: Settings Tests
====================================
"""

import pytest
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.pool import NullPool

from app.config import Settings


class TestSettings:

    def test_frontend_url_is_stripped(self):
        assert Settings(frontend_url="  http://localhost:5173 \n").frontend_url == "http://localhost:5173"

    def test_log_level_normalized(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level_rejected(self):
        with pytest.raises(PydanticValidationError):
            Settings(log_level="LOUD")

    def test_cors_origins_list(self):
        assert Settings(frontend_url="http://localhost:5173").cors_origins_list == [
            "http://localhost:5173"
        ]
        assert Settings(frontend_url="").cors_origins_list == []

    def test_sqlite_gets_null_pool(self):
        options = Settings(database_url="sqlite+aiosqlite:///./x.db").engine_options()
        assert options == {"poolclass": NullPool}

    def test_postgres_gets_pool_settings(self):
        options = Settings(
            database_url="postgresql+asyncpg://u:p@db/products", db_pool_size=7
        ).engine_options()
        assert options["pool_size"] == 7
        assert "poolclass" not in options

    def test_missing_frontend_url_reported(self):
        with pytest.raises(ValueError, match="FRONTEND_URL"):
            Settings(frontend_url="").validate_required_for_production()

    def test_configured_frontend_url_passes(self):
        Settings(frontend_url="http://localhost:5173").validate_required_for_production()
