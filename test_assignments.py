# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Assignment ledger and auto-assignment: unit tests against SQLite.
"""
import random
import threading

import pytest
from sqlalchemy import update

from request_desk.core.errors import InvalidUser, NotFound
from request_desk.models.domain import Role, VisibilityPolicy
from request_desk.models.tables import users
from request_desk.services.auto_assign import select_assignee


@pytest.fixture
def handlers(container):
    repo = container.user_repo
    for uid in ("U1", "U2", "U3", "U4"):
        repo.create_user(f"{uid.lower()}@example.com", uid, Role.WORKER, user_id=uid)
    repo.create_user("gone@example.com", "Gone", Role.WORKER, is_active=False, user_id="GONE")
    return ["U1", "U2", "U3", "U4"]


@pytest.fixture
def procurement(container):
    return container.type_repo.create(
        "Procurement", "procurement", VisibilityPolicy.ADMIN_AND_HANDLERS.value, False, True,
    )


def _primaries(ledger, type_id):
    return [a.user_id for a in ledger.list_assignees(type_id) if a.is_primary]


def _deactivate(container, user_id):
    with container.engine.begin() as conn:
        conn.execute(update(users).where(users.c.id == user_id).values(is_active=False))


# ═══════════════════════════════════════════════════════════════════════════
# UPSERT
# ═══════════════════════════════════════════════════════════════════════════
class TestUpsert:
    def test_insert_new(self, container, handlers, procurement):
        a = container.ledger.upsert_assignment(procurement.id, "U1", False)
        assert (a.type_id, a.user_id, a.is_primary) == (procurement.id, "U1", False)
        assert len(container.ledger.list_assignees(procurement.id)) == 1

    def test_update_in_place(self, container, handlers, procurement):
        container.ledger.upsert_assignment(procurement.id, "U1", False)
        container.ledger.upsert_assignment(procurement.id, "U1", True)
        rows = container.ledger.list_assignees(procurement.id)
        assert len(rows) == 1
        assert rows[0].is_primary

    def test_new_primary_clears_old(self, container, handlers, procurement):
        container.ledger.upsert_assignment(procurement.id, "U1", True)
        container.ledger.upsert_assignment(procurement.id, "U2", True)
        assert _primaries(container.ledger, procurement.id) == ["U2"]
        assert len(container.ledger.list_assignees(procurement.id)) == 2

    def test_non_primary_keeps_existing_primary(self, container, handlers, procurement):
        container.ledger.upsert_assignment(procurement.id, "U1", True)
        container.ledger.upsert_assignment(procurement.id, "U2", False)
        assert _primaries(container.ledger, procurement.id) == ["U1"]

    def test_demote_primary(self, container, handlers, procurement):
        container.ledger.upsert_assignment(procurement.id, "U1", True)
        container.ledger.upsert_assignment(procurement.id, "U1", False)
        assert _primaries(container.ledger, procurement.id) == []

    def test_idempotent(self, container, handlers, procurement):
        container.ledger.upsert_assignment(procurement.id, "U2", False)
        container.ledger.upsert_assignment(procurement.id, "U1", True)
        once = container.ledger.list_assignees(procurement.id)
        container.ledger.upsert_assignment(procurement.id, "U1", True)
        assert container.ledger.list_assignees(procurement.id) == once

    def test_primaries_are_per_type(self, container, handlers, procurement):
        other = container.type_repo.create("IT", "it", VisibilityPolicy.TEAM_PUBLIC.value, False, True)
        container.ledger.upsert_assignment(procurement.id, "U1", True)
        container.ledger.upsert_assignment(other.id, "U2", True)
        assert _primaries(container.ledger, procurement.id) == ["U1"]
        assert _primaries(container.ledger, other.id) == ["U2"]

    @pytest.mark.parametrize("seed", range(4))
    def test_at_most_one_primary_after_any_sequence(self, container, handlers, procurement, seed):
        rng = random.Random(seed)
        for _ in range(30):
            container.ledger.upsert_assignment(procurement.id, rng.choice(handlers), rng.random() < 0.5)
            assert len(_primaries(container.ledger, procurement.id)) <= 1


class TestUpsertValidation:
    def test_unknown_user(self, container, handlers, procurement):
        with pytest.raises(InvalidUser):
            container.ledger.upsert_assignment(procurement.id, "NOBODY", True)
        assert container.ledger.list_assignees(procurement.id) == []

    def test_inactive_user(self, container, handlers, procurement):
        with pytest.raises(InvalidUser):
            container.ledger.upsert_assignment(procurement.id, "GONE", False)

    def test_invalid_user_does_not_touch_primary(self, container, handlers, procurement):
        container.ledger.upsert_assignment(procurement.id, "U1", True)
        with pytest.raises(InvalidUser):
            container.ledger.upsert_assignment(procurement.id, "NOBODY", True)
        assert _primaries(container.ledger, procurement.id) == ["U1"]

    def test_unknown_type(self, container, handlers):
        with pytest.raises(NotFound):
            container.ledger.upsert_assignment("no-such-type", "U1", True)


# ═══════════════════════════════════════════════════════════════════════════
# REMOVE
# ═══════════════════════════════════════════════════════════════════════════
class TestRemove:
    def test_remove(self, container, handlers, procurement):
        container.ledger.upsert_assignment(procurement.id, "U1", True)
        assert container.ledger.remove_assignment(procurement.id, "U1") is True
        assert container.ledger.list_assignees(procurement.id) == []

    def test_remove_missing_is_noop(self, container, handlers, procurement):
        assert container.ledger.remove_assignment(procurement.id, "U1") is False

    def test_list_in_insertion_order(self, container, handlers, procurement):
        for uid in ("U3", "U1", "U2"):
            container.ledger.upsert_assignment(procurement.id, uid, False)
        assert [a.user_id for a in container.ledger.list_assignees(procurement.id)] == ["U3", "U1", "U2"]


# ═══════════════════════════════════════════════════════════════════════════
# AUTO-ASSIGNMENT
# ═══════════════════════════════════════════════════════════════════════════
class TestSelectAssignee:
    def test_prefers_primary(self, container, handlers, procurement):
        container.ledger.upsert_assignment(procurement.id, "U1", False)
        container.ledger.upsert_assignment(procurement.id, "U2", True)
        assert select_assignee(container.assignment_repo, procurement.id) == "U2"

    def test_falls_back_to_only_handler(self, container, handlers, procurement):
        container.ledger.upsert_assignment(procurement.id, "U1", False)
        assert select_assignee(container.assignment_repo, procurement.id) == "U1"

    def test_no_handlers(self, container, handlers, procurement):
        assert select_assignee(container.assignment_repo, procurement.id) is None

    def test_fallback_is_earliest_assigned(self, container, handlers, procurement):
        for uid in ("U3", "U1", "U2"):
            container.ledger.upsert_assignment(procurement.id, uid, False)
        for _ in range(3):
            assert select_assignee(container.assignment_repo, procurement.id) == "U3"

    def test_after_primary_removed(self, container, handlers, procurement):
        container.ledger.upsert_assignment(procurement.id, "U1", False)
        container.ledger.upsert_assignment(procurement.id, "U2", True)
        container.ledger.remove_assignment(procurement.id, "U2")
        assert select_assignee(container.assignment_repo, procurement.id) == "U1"

    def test_skips_deactivated_primary(self, container, handlers, procurement):
        container.ledger.upsert_assignment(procurement.id, "U2", True)
        container.ledger.upsert_assignment(procurement.id, "U1", False)
        _deactivate(container, "U2")
        assert select_assignee(container.assignment_repo, procurement.id) == "U1"

    def test_skips_deactivated_fallback(self, container, handlers, procurement):
        for uid in ("U3", "U1"):
            container.ledger.upsert_assignment(procurement.id, uid, False)
        _deactivate(container, "U3")
        assert select_assignee(container.assignment_repo, procurement.id) == "U1"

    def test_only_deactivated_handlers(self, container, handlers, procurement):
        container.ledger.upsert_assignment(procurement.id, "U1", True)
        _deactivate(container, "U1")
        assert select_assignee(container.assignment_repo, procurement.id) is None
        assert [a.user_id for a in container.ledger.list_assignees(procurement.id)] == ["U1"]

    def test_assignee_carries_user_details(self, container, handlers, procurement):
        a = container.ledger.upsert_assignment(procurement.id, "U1", True)
        assert a.user.full_name == "U1"
        assert a.user.email == "u1@example.com"


# ═══════════════════════════════════════════════════════════════════════════
# CONCURRENCY
# ═══════════════════════════════════════════════════════════════════════════
class TestConcurrentPrimary:
    @pytest.mark.parametrize("attempt", range(3))
    def test_two_primaries_race(self, container, handlers, procurement, attempt):
        barrier = threading.Barrier(2)
        errors = []

        def make_primary(uid):
            try:
                barrier.wait()
                container.ledger.upsert_assignment(procurement.id, uid, True)
            except Exception as exc:  # surfaced through the assertion below
                errors.append(exc)

        threads = [threading.Thread(target=make_primary, args=(uid,)) for uid in ("U1", "U2")]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=60)

        assert errors == []
        primaries = _primaries(container.ledger, procurement.id)
        assert len(primaries) == 1
        assert primaries[0] in ("U1", "U2")
        assert len(container.ledger.list_assignees(procurement.id)) == 2
