# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Shared fixtures: a fresh file-backed SQLite database per test."""
from unittest.mock import MagicMock

import pytest

from request_desk.core.database import build_engine
from request_desk.core.dependencies import Container
from request_desk.models.domain import Role
from request_desk.models.tables import metadata


@pytest.fixture
def engine(tmp_path):
    eng = build_engine(f"sqlite:///{tmp_path / 'request_desk.db'}")
    metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def container(engine):
    return Container(engine, notification_client=MagicMock())


@pytest.fixture
def people(container):
    """Admin, lead and two workers; lead and worker1 share the Operations team."""
    users = container.user_repo
    ops = users.create_team("Operations", team_id="team-ops")
    support = users.create_team("Support", team_id="team-support")
    made = {
        "admin": users.create_user("admin@example.com", "Admin User", Role.ADMIN, user_id="u-admin"),
        "lead": users.create_user("lead@example.com", "Team Lead", Role.TEAM_LEAD, user_id="u-lead"),
        "worker1": users.create_user("worker1@example.com", "Worker One", Role.WORKER, user_id="u-w1"),
        "worker2": users.create_user("worker2@example.com", "Worker Two", Role.WORKER, user_id="u-w2"),
        "retired": users.create_user("retired@example.com", "Former Worker", Role.WORKER,
                                     is_active=False, user_id="u-retired"),
    }
    users.add_team_member("u-lead", ops)
    users.add_team_member("u-w1", ops)
    users.add_team_member("u-w2", support)
    return made
