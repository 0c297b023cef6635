"""Pytest configuration and fixtures for profrate tests."""

import pytest
from unittest.mock import AsyncMock, MagicMock
from typing import Any, Dict, List, Optional

# Add the project root to the Python path
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from profrate.config import Config
from profrate.rmp.models import CandidateRecord


@pytest.fixture
def test_config():
    """Configuration with defaults only (no .env file)."""
    return Config(_env_file=None)


def make_node(
    first: str,
    last: str,
    *,
    legacy_id: Optional[int] = 1000,
    num_ratings: int = 10,
    rating: Optional[float] = 4.0,
    difficulty: Optional[float] = 3.0,
    would_take_again: Optional[float] = 80.0,
    department: Optional[str] = "Computer Science",
) -> Dict[str, Any]:
    """Raw GraphQL teacher node as the service returns it."""
    return {
        "id": f"VGVhY2hlci0{legacy_id}",
        "legacyId": legacy_id,
        "firstName": first,
        "lastName": last,
        "department": department,
        "avgRating": rating,
        "avgDifficulty": difficulty,
        "numRatings": num_ratings,
        "wouldTakeAgainPercent": would_take_again,
        "school": {"id": "U2Nob29sLTEwNzM=", "name": "University of California Davis"},
    }


def make_payload(nodes: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Wrap teacher nodes in the search response envelope."""
    return {"data": {"newSearch": {"teachers": {"edges": [{"node": n} for n in nodes]}}}}


def make_candidate(first: str, last: str, **kwargs) -> CandidateRecord:
    return CandidateRecord.model_validate(make_node(first, last, **kwargs))


@pytest.fixture
def sample_search_payload():
    """Search response with two instructors sharing a surname."""
    return make_payload([
        make_node("Jane", "Smith", legacy_id=111, num_ratings=4, rating=3.2),
        make_node("John", "Smith", legacy_id=222, num_ratings=57, rating=4.6,
                  difficulty=2.1, would_take_again=91.0),
    ])


@pytest.fixture
def mock_rmp_client():
    """Stand-in for AsyncRMPClient with no network access."""
    client = MagicMock()
    client.get_school_id = AsyncMock(return_value="U2Nob29sLTEwNzM=")
    client.search_teachers = AsyncMock(return_value=[])
    return client


@pytest.fixture
def node_factory():
    return make_node


@pytest.fixture
def payload_factory():
    return make_payload


@pytest.fixture
def candidate_factory():
    return make_candidate
