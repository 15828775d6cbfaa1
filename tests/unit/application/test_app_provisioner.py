"""Unit tests for AppProvisioner."""

from __future__ import annotations

from dataclasses import replace

import pytest

from safe_scale.application.services.app_provisioner import AppProvisioner
from safe_scale.domain.errors.platform import PlatformCommandError
from safe_scale.domain.errors.rollout import BindingError, ProvisionError
from safe_scale.domain.models.app_instance import Liveness
from safe_scale.domain.models.route import Route
from safe_scale.infrastructure.stubs.platform_client_stub import PlatformClientStub


class TestProvision:
    """Tests for creating green and binding services."""

    def test_creates_green_in_primary_domain(
        self, platform: PlatformClientStub, make_session
    ) -> None:
        session = AppProvisioner(platform).provision(make_session())

        assert platform.calls_to("create_app") == [("new-foo", "cfapps.io", "1")]
        assert session.green.routes == (Route("new-foo", "cfapps.io"),)
        assert session.green.liveness == Liveness.LIVE

    def test_binds_every_blue_service(
        self, platform: PlatformClientStub, make_session
    ) -> None:
        session = AppProvisioner(platform).provision(
            make_session(services=("db", "cache"))
        )

        assert platform.calls_to("bind_service") == [
            ("new-foo", "db"),
            ("new-foo", "cache"),
        ]
        assert session.green.bound_services == frozenset({"db", "cache"})
        assert platform.apps["new-foo"].services == ["db", "cache"]

    def test_uses_target_instance_count(
        self, platform: PlatformClientStub, make_session
    ) -> None:
        session = replace(make_session(), target_instance_count=3)

        AppProvisioner(platform).provision(session)

        assert platform.apps["new-foo"].instance_count == 3

    def test_binding_failure_stops_at_first_service(
        self, platform: PlatformClientStub, make_session
    ) -> None:
        platform.fail_on("bind_service", "bad-service")

        with pytest.raises(BindingError) as exc_info:
            AppProvisioner(platform).provision(
                make_session(services=("db", "bad-service", "cache"))
            )

        error = exc_info.value
        assert error.service == "bad-service"
        assert str(error) == "Could not bind bad-service service to new-foo"
        assert isinstance(error.__cause__, PlatformCommandError)
        assert ("new-foo", "cache") not in platform.calls_to("bind_service")
        assert error.session.green.liveness == Liveness.PROVISIONING
        assert error.session.green.bound_services == frozenset({"db"})

    def test_create_failure_raises_provision_error(
        self, platform: PlatformClientStub, make_session
    ) -> None:
        platform.fail_on("create_app")

        with pytest.raises(ProvisionError) as exc_info:
            AppProvisioner(platform).provision(make_session())

        assert str(exc_info.value) == "Unable to create new-foo"
        assert platform.calls_to("bind_service") == []

    def test_blue_without_routes_is_refused(
        self, platform: PlatformClientStub, make_session
    ) -> None:
        with pytest.raises(ProvisionError) as exc_info:
            AppProvisioner(platform).provision(make_session(routes=()))

        assert "has no routes" in str(exc_info.value)
        assert platform.calls_to("create_app") == []
