"""Unit tests for RolloutSession and the rollout stage machine."""

from __future__ import annotations

from datetime import timedelta

import pytest

from safe_scale.domain.errors.rollout import InvalidStageTransitionError
from safe_scale.domain.models.app_instance import AppInstance, Liveness
from safe_scale.domain.models.rollout_session import (
    STAGE_TRANSITION_MATRIX,
    AppRole,
    RolloutSession,
    RolloutStage,
)
from safe_scale.domain.models.route import Route

FOO = Route("foo", "cfapps.io")
WWW = Route("www", "example.com")


def _blue() -> AppInstance:
    return AppInstance(
        name="foo",
        routes=(FOO, WWW),
        bound_services=frozenset({"db", "cache"}),
        liveness=Liveness.LIVE,
    )


class TestStart:
    """Tests for opening a session."""

    def test_start_snapshots_blue(self) -> None:
        session = RolloutSession.start("r-1", "dev", _blue(), "new-foo")

        assert session.original_blue_routes == (FOO, WWW)
        assert session.primary_route == FOO
        assert session.stage == RolloutStage.PROVISION_GREEN
        assert session.temporary_route is None

    def test_start_creates_provisioning_green(self) -> None:
        session = RolloutSession.start("r-1", "dev", _blue(), "new-foo")

        assert session.green == AppInstance(name="new-foo")
        assert session.green.liveness == Liveness.PROVISIONING

    def test_services_default_to_sorted_names(self) -> None:
        session = RolloutSession.start("r-1", "dev", _blue(), "new-foo")
        assert session.blue_services == ("cache", "db")

    def test_services_keep_given_order(self) -> None:
        session = RolloutSession.start(
            "r-1", "dev", _blue(), "new-foo", blue_services=("db", "cache")
        )
        assert session.blue_services == ("db", "cache")

    def test_start_carries_rollout_options(self) -> None:
        session = RolloutSession.start(
            "r-1",
            "dev",
            _blue(),
            "new-foo",
            health_check_path="/health",
            drain_check_path="/drain",
            drain_timeout=timedelta(seconds=30),
            target_instance_count=3,
        )

        assert session.health_check_path == "/health"
        assert session.drain_check_path == "/drain"
        assert session.drain_timeout == timedelta(seconds=30)
        assert session.target_instance_count == 3

    def test_original_routes_do_not_follow_blue(self) -> None:
        session = RolloutSession.start("r-1", "dev", _blue(), "new-foo")

        session = session.with_blue(session.blue.without_route(FOO))

        assert session.original_blue_routes == (FOO, WWW)
        assert session.blue.routes == (WWW,)

    def test_primary_route_none_without_routes(self) -> None:
        blue = AppInstance(name="foo", liveness=Liveness.LIVE)
        session = RolloutSession.start("r-1", "dev", blue, "new-foo")
        assert session.primary_route is None


class TestRoles:
    """Tests for role-based access to blue and green."""

    def test_app_by_role(self) -> None:
        session = RolloutSession.start("r-1", "dev", _blue(), "new-foo")

        assert session.app(AppRole.BLUE).name == "foo"
        assert session.app(AppRole.GREEN).name == "new-foo"

    def test_with_app_replaces_only_that_role(self) -> None:
        session = RolloutSession.start("r-1", "dev", _blue(), "new-foo")
        green = session.green.with_route_mapped(FOO)

        updated = session.with_app(AppRole.GREEN, green)

        assert updated.green.routes == (FOO,)
        assert updated.blue == session.blue

    def test_session_is_immutable(self) -> None:
        session = RolloutSession.start("r-1", "dev", _blue(), "new-foo")
        with pytest.raises(AttributeError):
            session.space = "prod"  # type: ignore[misc]


class TestStages:
    """Tests for the stage sequence."""

    def test_stage_sequence(self) -> None:
        stage = RolloutStage.PROVISION_GREEN
        visited = [stage]
        while stage.next_stage() is not None:
            stage = stage.next_stage()
            visited.append(stage)

        assert visited == [
            RolloutStage.PROVISION_GREEN,
            RolloutStage.VERIFY_HEALTH,
            RolloutStage.MIGRATE_ROUTES,
            RolloutStage.DRAIN,
            RolloutStage.DECOMMISSION,
            RolloutStage.COMPLETE,
        ]

    def test_only_complete_is_terminal(self) -> None:
        for stage in RolloutStage:
            assert stage.is_terminal() == (stage == RolloutStage.COMPLETE)

    def test_matrix_covers_every_stage(self) -> None:
        assert set(STAGE_TRANSITION_MATRIX) == set(RolloutStage)

    def test_with_stage_advances(self) -> None:
        session = RolloutSession.start("r-1", "dev", _blue(), "new-foo")

        session = session.with_stage(RolloutStage.VERIFY_HEALTH)

        assert session.stage == RolloutStage.VERIFY_HEALTH
        assert not session.is_complete

    def test_with_stage_rejects_skipping(self) -> None:
        session = RolloutSession.start("r-1", "dev", _blue(), "new-foo")

        with pytest.raises(InvalidStageTransitionError) as exc_info:
            session.with_stage(RolloutStage.DRAIN)

        assert exc_info.value.from_stage == "provision_green"
        assert exc_info.value.expected_stage == "verify_health"

    def test_with_stage_rejects_leaving_complete(self) -> None:
        session = RolloutSession.start("r-1", "dev", _blue(), "new-foo")
        for stage in list(RolloutStage)[1:]:
            session = session.with_stage(stage)
        assert session.is_complete

        with pytest.raises(InvalidStageTransitionError):
            session.with_stage(RolloutStage.PROVISION_GREEN)
