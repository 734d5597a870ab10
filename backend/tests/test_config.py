"""
Jotter Backend: Settings Tests
===============================
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from jotter.config import DEFAULT_JWT_SECRET, Settings


class TestSettings:

    def test_defaults(self):
        s = Settings(_env_file=None, jwt_secret="x")
        assert s.token_ttl_seconds == 3600
        assert s.bcrypt_rounds == 10
        assert s.backend_port == 3000
        assert s.is_sqlite

    def test_env_vars_are_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("TOKEN_TTL_SECONDS", "600")
        monkeypatch.setenv("bcrypt_rounds", "6")
        s = Settings(_env_file=None)
        assert s.token_ttl_seconds == 600
        assert s.bcrypt_rounds == 6

    def test_algorithm_is_normalized(self):
        assert Settings(_env_file=None, jwt_algorithm="hs512").jwt_algorithm == "HS512"

    @pytest.mark.parametrize("field,value", [
        ("jwt_algorithm", "RS256"),
        ("log_level", "CHATTY"),
        ("bcrypt_rounds", 3),
        ("bcrypt_rounds", 17),
    ])
    def test_rejects_bad_values(self, field, value):
        with pytest.raises(PydanticValidationError):
            Settings(_env_file=None, **{field: value})

    def test_cors_origins_list(self):
        s = Settings(_env_file=None, cors_origins="http://a.test, http://b.test,")
        assert s.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_default_secret_fails_production_check(self):
        with pytest.raises(ValueError, match="JWT_SECRET"):
            Settings(_env_file=None, jwt_secret=DEFAULT_JWT_SECRET).validate_required_for_production()

    def test_custom_secret_passes_production_check(self):
        Settings(_env_file=None, jwt_secret="a-real-secret").validate_required_for_production()

    def test_postgres_url_is_not_sqlite(self):
        s = Settings(_env_file=None, database_url="postgresql+asyncpg://u:p@db/notes")
        assert not s.is_sqlite
