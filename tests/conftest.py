"""Shared fixtures for the email trigger report tests."""

import json
import os

import pytest

from core.entity_extractor import EntityExtractor

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")


def load_company_fixture():
    fixture_path = os.path.join(FIXTURES_DIR, "company_response.json")
    with open(fixture_path) as f:
        raw = json.load(f)
    return raw["data"]["companies"]["edges"][0]["node"]


@pytest.fixture
def company_data():
    return load_company_fixture()


@pytest.fixture
def entities(company_data):
    extractor = EntityExtractor(debug=False)
    return extractor.extract(company_data)
