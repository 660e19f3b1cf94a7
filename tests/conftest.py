"""Shared fixtures for the commentary service tests."""

from unittest.mock import AsyncMock

import pytest

from helpers import model_answer
from services.commentary.decider import CommentaryDecider
from services.commentary.session_store import SessionStore
from utils.settings import AppSettings


@pytest.fixture
def settings():
    return AppSettings()


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def gateway():
    mock = AsyncMock()
    mock.generate.return_value = model_answer()
    return mock


@pytest.fixture
def decider(store, gateway, settings):
    return CommentaryDecider(store, gateway, settings)
