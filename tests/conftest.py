import pytest

from tests.helpers import S, FakeGateway


@pytest.fixture
def gateway():
    return FakeGateway(collateral_requirement=12 * S // 10)
