"""Unit tests for the safe-scale error taxonomy."""

from __future__ import annotations

import pytest

from safe_scale.domain.errors import (
    AppNotFoundError,
    ArgumentError,
    BindingError,
    DrainCheckError,
    DrainTimeoutError,
    EndpointUnreachableError,
    MapError,
    PlatformCommandError,
    ProvisionError,
    ResourceLookupError,
    RolloutStageError,
    RouteCreateError,
    RouteDeleteError,
    RouteNotMappedError,
    SpaceNotFoundError,
    StopError,
    UnmapError,
)
from safe_scale.domain.exceptions import SafeScaleError
from safe_scale.domain.models.route import Route

FOO = Route("foo", "cfapps.io")


class TestHierarchy:
    """Tests for exception inheritance."""

    @pytest.mark.parametrize(
        "error",
        [
            ProvisionError("new-foo"),
            BindingError("db", "new-foo"),
            RouteCreateError(FOO),
            MapError(FOO, "new-foo"),
            UnmapError(FOO, "foo"),
            DrainCheckError("https://temp-foo.cfapps.io/drain", "foo", 500),
            DrainTimeoutError("https://temp-foo.cfapps.io/drain", "foo", 120),
            StopError("foo"),
        ],
    )
    def test_stage_errors_are_safe_scale_errors(self, error: Exception) -> None:
        assert isinstance(error, RolloutStageError)
        assert isinstance(error, SafeScaleError)

    def test_not_mapped_and_delete_are_unmap_errors(self) -> None:
        assert issubclass(RouteNotMappedError, UnmapError)
        assert issubclass(RouteDeleteError, UnmapError)

    def test_argument_error_is_value_error(self) -> None:
        assert issubclass(ArgumentError, ValueError)

    def test_lookup_errors_are_builtin_lookup_errors(self) -> None:
        assert issubclass(AppNotFoundError, ResourceLookupError)
        assert issubclass(SpaceNotFoundError, ResourceLookupError)
        assert issubclass(ResourceLookupError, LookupError)

    def test_stage_error_carries_session(self) -> None:
        marker = object()
        error = StopError("foo", session=marker)  # type: ignore[arg-type]
        assert error.session is marker


class TestMessages:
    """Tests for operator-facing messages."""

    def test_provision_default_message(self) -> None:
        assert str(ProvisionError("new-foo")) == "Unable to create new-foo"

    def test_binding_message(self) -> None:
        error = BindingError("bad-service", "new-foo")
        assert str(error) == "Could not bind bad-service service to new-foo"
        assert error.service == "bad-service"

    def test_map_message(self) -> None:
        assert str(MapError(FOO, "new-foo")) == "Could not map foo.cfapps.io route to new-foo"

    def test_not_mapped_message(self) -> None:
        assert str(RouteNotMappedError(FOO, "foo")) == "foo.cfapps.io is not mapped to foo"

    def test_delete_message(self) -> None:
        error = RouteDeleteError(FOO.temporary(), "foo")
        assert str(error) == "Could not delete temp-foo.cfapps.io route from space"

    def test_drain_check_message_with_status(self) -> None:
        error = DrainCheckError("https://temp-foo.cfapps.io/drain", "foo", 404)
        assert str(error).startswith("Status code 404.")
        assert error.status_code == 404

    def test_drain_check_message_unreachable(self) -> None:
        error = DrainCheckError("https://temp-foo.cfapps.io/drain", "foo")
        assert "unreachable" in str(error)
        assert error.status_code is None

    def test_drain_timeout_message(self) -> None:
        error = DrainTimeoutError("https://temp-foo.cfapps.io/drain", "foo", 120.0)
        assert "within 120s" in str(error)
        assert "Can't safely shut down foo" in str(error)

    def test_stop_message(self) -> None:
        assert str(StopError("foo")) == "Failed to stop foo from running"

    def test_app_not_found_message(self) -> None:
        assert str(AppNotFoundError("foo")) == "Could not access foo in Cloud Foundry"

    def test_platform_command_message(self) -> None:
        error = PlatformCommandError("map-route", "route not found")
        assert str(error) == "Platform operation map-route failed: route not found"
        assert error.operation == "map-route"

    def test_endpoint_unreachable_message(self) -> None:
        error = EndpointUnreachableError("https://foo.cfapps.io", "refused")
        assert str(error) == "Could not reach https://foo.cfapps.io: refused"
