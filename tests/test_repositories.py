"""Tests for group and member repositories."""
import pytest

from conftest import ALICE, BOB, CAROL
from settleup.core.exceptions import ConcurrencyConflict, NotFoundError
from settleup.models.expense import Expense
from settleup.models.group import Group, GroupStatus
from settleup.models.ledger import Edge
from settleup.repositories.group_repo import GroupRepository
from settleup.repositories.member_repo import MemberRepository


@pytest.mark.asyncio
class TestGroupRepository:
    """Test GroupRepository persistence and optimistic locking."""

    async def test_create_and_get_group(self, test_db):
        repo = GroupRepository(test_db)

        created = await repo.create_group("Trip", [ALICE, BOB])
        fetched = await repo.get_group(created.id)

        assert fetched is not None
        assert fetched.id == created.id
        assert fetched.name == "Trip"
        assert fetched.member_ids == [ALICE, BOB]
        assert fetched.status == GroupStatus.ACTIVE
        assert fetched.version == 1
        assert fetched.expenses == []
        assert fetched.edges == []

    async def test_get_missing_group(self, test_db):
        assert await GroupRepository(test_db).get_group("missing") is None

    async def test_list_groups_for_member(self, test_db):
        repo = GroupRepository(test_db)
        trip = await repo.create_group("Trip", [ALICE, BOB])
        await repo.create_group("Flat", [BOB, CAROL])

        alice_groups = await repo.list_groups_for_member(ALICE)
        bob_groups = await repo.list_groups_for_member(BOB)
        completed = await repo.list_groups_for_member(BOB, status=GroupStatus.COMPLETED)

        assert [g.id for g in alice_groups] == [trip.id]
        assert {g.name for g in bob_groups} == {"Trip", "Flat"}
        assert completed == []

    async def test_commit_appends_expenses_and_replaces_edges(self, test_db):
        repo = GroupRepository(test_db)
        group = await repo.create_group("Trip", [ALICE, BOB])
        expense = Expense(group_id=group.id, title="Cab", total_cents=1000, paid_by=ALICE,
                          splits={ALICE: 500, BOB: 500})
        edge = Edge(group_id=group.id, debtor_id=BOB, creditor_id=ALICE, amount_cents=500)

        committed = await repo.commit(
            group.model_copy(update={"edges": [edge]}),
            group.version,
            new_expenses=[expense]
        )

        assert committed.version == 2
        assert committed.expenses[0].splits == {ALICE: 500, BOB: 500}
        assert [(e.debtor_id, e.amount_cents) for e in committed.edges] == [(BOB, 500)]

        # Edges are replaced, expenses keep accumulating
        committed = await repo.commit(committed.model_copy(update={"edges": []}), committed.version)
        assert committed.edges == []
        assert len(committed.expenses) == 1
        assert committed.version == 3

    async def test_stale_version_conflicts_and_keeps_state(self, test_db):
        repo = GroupRepository(test_db)
        group = await repo.create_group("Trip", [ALICE, BOB])
        edge = Edge(group_id=group.id, debtor_id=BOB, creditor_id=ALICE, amount_cents=500)
        await repo.commit(group.model_copy(update={"edges": [edge]}), group.version)

        # Second writer still holds version 1
        with pytest.raises(ConcurrencyConflict) as exc_info:
            await repo.commit(group.model_copy(update={"edges": []}), group.version)

        assert exc_info.value.expected_version == 1
        stored = await repo.get_group(group.id)
        assert stored.version == 2
        assert [(e.debtor_id, e.amount_cents) for e in stored.edges] == [(BOB, 500)]

    async def test_commit_missing_group(self, test_db):
        with pytest.raises(NotFoundError):
            await GroupRepository(test_db).commit(Group(name="Ghost"), 1)


@pytest.mark.asyncio
class TestMemberRepository:

    async def test_upsert_member(self, test_db):
        repo = MemberRepository(test_db)

        member = await repo.upsert_member(ALICE, "Alice")
        renamed = await repo.upsert_member(ALICE, "Alice L.")

        assert member.user_id == ALICE
        assert renamed.display_name == "Alice L."
        assert renamed.created_at == member.created_at
        assert (await repo.get_member(ALICE)).display_name == "Alice L."

    async def test_display_names_fall_back_to_mail_local_part(self, test_db):
        repo = MemberRepository(test_db)
        await repo.upsert_member(ALICE, "Alice")

        names = await repo.get_display_names([ALICE, BOB, "plainid"])

        assert names == {ALICE: "Alice", BOB: "bob", "plainid": "plainid"}

    async def test_no_ids_no_names(self, test_db):
        assert await MemberRepository(test_db).get_display_names([]) == {}
