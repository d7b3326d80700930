from __future__ import annotations

import pytest
from helpers import FakeMessage, FakeSource

from cognac import Pipeline


@pytest.fixture
def source() -> FakeSource:
    return FakeSource()


@pytest.fixture
def pipeline(source: FakeSource) -> Pipeline[FakeMessage]:
    return Pipeline(source, name="test")
