"""Unit tests for RouteRestorer."""

from __future__ import annotations

import pytest

from safe_scale.application.services.app_provisioner import AppProvisioner
from safe_scale.application.services.route_migrator import RouteMigrator
from safe_scale.application.services.route_restorer import RouteRestorer
from safe_scale.domain.errors.rollout import MapError
from safe_scale.domain.models.app_instance import Liveness
from safe_scale.domain.models.route import Route
from safe_scale.infrastructure.stubs.platform_client_stub import PlatformClientStub

FOO = Route("foo", "cfapps.io")
WWW = Route("www", "example.com")
TEMP = Route("temp-foo", "cfapps.io")


class TestRestore:
    """Tests for putting blue back on its routes."""

    def test_restores_after_cut_over(
        self, platform: PlatformClientStub, make_session
    ) -> None:
        migrator = RouteMigrator(platform)
        session = AppProvisioner(platform).provision(make_session())
        session = migrator.cut_over(migrator.migrate(session))

        session = RouteRestorer(migrator).restore(session)

        assert FOO in session.blue.routes
        assert FOO not in session.green.routes
        assert session.blue.liveness == Liveness.LIVE
        assert FOO in platform.apps["foo"].routes
        assert FOO not in platform.apps["new-foo"].routes

    def test_restores_blue_before_unmapping_green(
        self, platform: PlatformClientStub, make_session
    ) -> None:
        migrator = RouteMigrator(platform)
        session = AppProvisioner(platform).provision(make_session())
        session = migrator.cut_over(migrator.migrate(session))
        platform.calls.clear()

        RouteRestorer(migrator).restore(session)

        assert platform.calls == [
            ("map_route", "foo", "cfapps.io", "foo"),
            ("unmap_route", "new-foo", "cfapps.io", "foo"),
        ]

    def test_restores_partial_migration(
        self, platform: PlatformClientStub, make_session
    ) -> None:
        platform.apps["foo"].routes.append(WWW)
        migrator = RouteMigrator(platform)
        session = AppProvisioner(platform).provision(make_session(routes=(FOO, WWW)))
        platform.fail_on("map_route", WWW.fqdn)
        with pytest.raises(MapError) as exc_info:
            migrator.migrate(session)
        platform.calls.clear()

        session = RouteRestorer(migrator).restore(exc_info.value.session)

        # Blue never lost its routes; only green's copy of foo is removed
        assert platform.calls == [("unmap_route", "new-foo", "cfapps.io", "foo")]
        assert session.blue.routes == (FOO, WWW, TEMP)
        assert session.blue.liveness == Liveness.LIVE

    def test_restore_failure_propagates(
        self, platform: PlatformClientStub, make_session
    ) -> None:
        migrator = RouteMigrator(platform)
        session = AppProvisioner(platform).provision(make_session())
        session = migrator.cut_over(migrator.migrate(session))
        platform.fail_on("map_route")

        with pytest.raises(MapError):
            RouteRestorer(migrator).restore(session)
