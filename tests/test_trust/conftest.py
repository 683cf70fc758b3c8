"""Pytest fixtures for trust scoring tests."""

from unittest.mock import AsyncMock

import pytest

from trustlens.actors.repository import ActorRepository
from trustlens.trust.config import TrustConfig


@pytest.fixture
def trust_config() -> TrustConfig:
    return TrustConfig()


@pytest.fixture
def mock_repo():
    repo = AsyncMock(spec=ActorRepository)
    repo.find_ids_by_address.return_value = []
    repo.count_created_from_address_since.return_value = 1
    repo.update_trust_fields.return_value = True
    repo.update_seller_trust.return_value = True
    return repo
