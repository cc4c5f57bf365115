import pytest

from conftest import ALICE, BOB, CAROL, equal_split
from settleup.core.exceptions import NotFoundError, StateError, ValidationError
from settleup.models.group import GroupStatus
from settleup.services.expense_service import ExpenseService
from settleup.services.group_service import GroupService
from settleup.services.settlement_service import SettlementProcessor


@pytest.mark.asyncio
class TestGroupService:

    async def test_create_group_normalizes_members(self, test_db):
        group = await GroupService(test_db).create_group(" Trip ", [" Alice@Example.com", ALICE, BOB])

        assert group.name == "Trip"
        assert group.member_ids == [ALICE, BOB]
        assert group.status == GroupStatus.ACTIVE

    async def test_create_group_needs_name_and_members(self, test_db):
        service = GroupService(test_db)

        with pytest.raises(ValidationError):
            await service.create_group("  ", [ALICE])
        with pytest.raises(ValidationError):
            await service.create_group("Trip", ["  "])

    async def test_get_unknown_group(self, test_db):
        with pytest.raises(NotFoundError):
            await GroupService(test_db).get_group("missing")

    async def test_list_groups(self, test_db, trip_group, members):
        service = GroupService(test_db)
        flat = await service.create_group("Flat", [BOB, CAROL])

        await ExpenseService(test_db).record_expense(
            trip_group.id, "Dinner", "60", ALICE, equal_split("60", members)
        )
        processor = SettlementProcessor(test_db)
        await processor.resolve_edge(trip_group.id, BOB, ALICE)
        await processor.resolve_edge(trip_group.id, CAROL, ALICE, keep_active=False)

        assert {g.id for g in await service.list_groups(" BOB@example.com")} == {trip_group.id, flat.id}
        assert [g.id for g in await service.list_groups(ALICE)] == [trip_group.id]
        assert [g.id for g in await service.list_groups(BOB, status=GroupStatus.COMPLETED)] == [trip_group.id]
        assert [g.id for g in await service.list_groups(BOB, status=GroupStatus.ACTIVE)] == [flat.id]
        assert await service.list_groups("stranger@example.com") == []

    async def test_find_group_by_name(self, test_db, trip_group):
        service = GroupService(test_db)

        found = await service.find_group_by_name(" Trip")

        assert found.id == trip_group.id
        assert await service.find_group_by_name("Ski week") is None
        with pytest.raises(ValidationError):
            await service.find_group_by_name("")

    async def test_add_members_ignores_existing(self, test_db, trip_group):
        service = GroupService(test_db)

        unchanged = await service.add_members(trip_group.id, [BOB])
        grown = await service.add_members(trip_group.id, ["Dave@example.com", "dave@example.com"])

        assert unchanged.version == trip_group.version
        assert grown.member_ids == [ALICE, BOB, CAROL, "dave@example.com"]
        assert grown.version == trip_group.version + 1

    async def test_add_members_to_completed_group(self, test_db, trip_group):
        await SettlementProcessor(test_db).complete_group(trip_group.id)

        with pytest.raises(StateError):
            await GroupService(test_db).add_members(trip_group.id, ["dave@example.com"])
