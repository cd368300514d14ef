"""Tests for application wiring."""
from decimal import Decimal

import pytest
from pydantic import ValidationError

from parking_manager.config import AppConfig
from parking_manager.main import open_service


def test_seed_rate_is_rounded_like_api_updates(tmp_path):
    config = AppConfig(
        lot={"slot_count": 2, "hourly_rate": "2.555"},
        storage={"path": str(tmp_path / "lot.json")},
    )

    service = open_service(config)

    assert service.settings.hourly_rate == Decimal("2.56")
    assert service.update_hourly_rate("2.555").hourly_rate == service.settings.hourly_rate


def test_oversized_seed_rate_is_rejected():
    with pytest.raises(ValidationError):
        AppConfig(lot={"hourly_rate": "1e30"})
