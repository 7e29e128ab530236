"""
Settings tests — mandatory signing secret, durations, leeway bounds.
"""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from smartsupply.config import INSECURE_FALLBACK_SECRET, Settings, parse_duration

GOOD_SECRET = "a-perfectly-fine-secret-value-42"


class TestSigningSecret:

    def test_missing_secret_refuses_to_load(self, monkeypatch):
        monkeypatch.delenv("JWT_SECRET_KEY", raising=False)
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_fallback_secret_refuses_to_load(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, JWT_SECRET_KEY=INSECURE_FALLBACK_SECRET)

    def test_short_secret_refuses_to_load(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, JWT_SECRET_KEY="short")

    def test_secret_from_environment(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET_KEY", GOOD_SECRET)
        assert Settings(_env_file=None).JWT_SECRET_KEY == GOOD_SECRET


class TestLifetime:

    def test_default_is_seven_days(self, monkeypatch):
        monkeypatch.delenv("JWT_EXPIRES_IN", raising=False)
        cfg = Settings(_env_file=None, JWT_SECRET_KEY=GOOD_SECRET)
        assert cfg.jwt_lifetime == timedelta(days=7)

    @pytest.mark.parametrize("value, expected", [
        ("7d", timedelta(days=7)),
        ("12h", timedelta(hours=12)),
        ("30m", timedelta(minutes=30)),
        ("45s", timedelta(seconds=45)),
        ("3600", timedelta(hours=1)),
        (90, timedelta(seconds=90)),
    ])
    def test_parse_duration(self, value, expected):
        assert parse_duration(value) == expected

    @pytest.mark.parametrize("value", ["", "7w", "-1d", "0", "soon"])
    def test_parse_duration_rejects(self, value):
        with pytest.raises(ValueError):
            parse_duration(value)

    def test_bad_lifetime_refuses_to_load(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, JWT_SECRET_KEY=GOOD_SECRET, JWT_EXPIRES_IN="forever")


class TestLeeway:

    def test_leeway_over_five_minutes_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, JWT_SECRET_KEY=GOOD_SECRET, JWT_LEEWAY_SECONDS=301)

    def test_negative_leeway_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, JWT_SECRET_KEY=GOOD_SECRET, JWT_LEEWAY_SECONDS=-1)
