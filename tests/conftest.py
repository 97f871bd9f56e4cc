"""Shared test fixtures for the pigeon test suite."""

from __future__ import annotations

import copy

import pytest

from content_fixtures import CARD_DATA, HERO_DATA, QUOTE_DATA, build_site
from pigeon import Pigeon


@pytest.fixture
def site() -> Pigeon:
    """Provide a fresh registry holding the sample components."""
    return build_site()


@pytest.fixture
def records() -> list[dict]:
    """Provide a mixed batch of CMS records, one per sample component."""
    return [copy.deepcopy(item) for item in (HERO_DATA, QUOTE_DATA, CARD_DATA)]
