"""
Pytest fixtures for gateway and client core tests
"""

import pytest
from unittest.mock import MagicMock
from typing import Dict, Any
from fastapi.testclient import TestClient

from app.main import app
from app.utils.openpecha_client import OpenPechaClient, get_openpecha_client
from frontend.config import ClientSettings


@pytest.fixture
def mock_openpecha():
    """OpenPecha client double; async methods are AsyncMocks"""
    client = MagicMock(spec=OpenPechaClient)
    client.base_url = "http://openpecha.test"
    client.started = True
    return client


@pytest.fixture
def client(mock_openpecha):
    """Gateway test client wired to the mocked upstream"""
    app.dependency_overrides[get_openpecha_client] = lambda: mock_openpecha
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def client_settings() -> ClientSettings:
    return ClientSettings(
        server_url="http://gateway.test",
        stale_time=300,
        query_retry=1,
        text_search_limit=50,
        text_picker_page_size=100
    )


@pytest.fixture
def sample_text() -> Dict[str, Any]:
    """Text as stored upstream"""
    return {
        "id": "T1",
        "type": "root",
        "title": {"en": "The Way of the Bodhisattva", "bo": "སྤྱོད་འཇུག"},
        "language": "bo",
        "contributions": [{"person_id": "P1", "role": "author"}],
        "alt_titles": [{"en": "Bodhicaryavatara"}, {"sa": "Bodhicaryāvatāra"}],
    }


@pytest.fixture
def sample_person() -> Dict[str, Any]:
    return {
        "id": "P1",
        "name": {"en": "Shantideva", "bo": "ཞི་བ་ལྷ"},
        "alt_names": [{"en": "Santideva"}],
        "bdrc": "P6081",
        "wiki": "",
    }


@pytest.fixture
def sample_instance() -> Dict[str, Any]:
    """Instance with a segmentation layer and an unknown annotation kind"""
    return {
        "id": "I1",
        "text_id": "T1",
        "metadata": {"type": "diplomatic", "copyright": "public", "bdrc": "W1KG4313"},
        "content": "abcdefghij",
        "annotations": {
            "segmentation": [
                {"span": {"start": 0, "end": 4}, "index": 0},
                {"span": {"start": 4, "end": 10}, "index": 1},
            ],
            "pagination": [
                {"span": {"start": 0, "end": 10}, "reference": "1a"},
            ],
        },
    }
