from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from isbnkit.main import app, get_range_table
from isbnkit.ranges import parse_range_message

DATA_DIR = Path(__file__).parent / "data"
RANGE_MESSAGE = DATA_DIR / "RangeMessage.xml"


@pytest.fixture(scope="session")
def range_table():
    """Range table parsed from the trimmed RangeMessage.xml fixture."""
    return parse_range_message(RANGE_MESSAGE.read_bytes())


@pytest.fixture
def client(range_table):
    """A test client whose range table dependency is the fixture table."""
    app.dependency_overrides[get_range_table] = lambda: range_table
    yield TestClient(app)
    app.dependency_overrides.clear()
