import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from mongomock_motor import AsyncMongoMockClient

from settleup.main import app
from settleup.db.mongo import get_db
from settleup.services.group_service import GroupService

TEST_DATABASE_NAME = "settleup_test"

ALICE = "alice@example.com"
BOB = "bob@example.com"
CAROL = "carol@example.com"


@pytest_asyncio.fixture
async def test_db():
    """Fresh in-memory MongoDB database for each test."""
    client = AsyncMongoMockClient()
    yield client[TEST_DATABASE_NAME]


@pytest_asyncio.fixture
async def test_client(test_db):
    """API client wired to the in-memory database."""
    app.dependency_overrides[get_db] = lambda: test_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def members():
    return [ALICE, BOB, CAROL]


@pytest_asyncio.fixture
async def trip_group(test_db, members):
    """Active group with Alice, Bob and Carol and no expenses yet."""
    return await GroupService(test_db).create_group("Trip", members)


def equal_split(total: str, member_ids):
    """Split helper for tests: an even split in whole cents."""
    from decimal import Decimal

    share = (Decimal(total) / len(member_ids)).quantize(Decimal("0.01"))
    return {member_id: share for member_id in member_ids}


def assert_ledger_invariant(balances, edges):
    """balance(m) == incoming - outgoing over every stored edge."""
    flows = {member_id: 0 for member_id in balances}
    for edge in edges:
        flows[edge.creditor_id] = flows.get(edge.creditor_id, 0) + edge.amount_cents
        flows[edge.debtor_id] = flows.get(edge.debtor_id, 0) - edge.amount_cents
    for member_id, cents in balances.items():
        assert flows.get(member_id, 0) == cents, member_id
