"""
Tests for server telemetry header generation.
"""

import pytest

from oidc_cache_engine.cache import InMemoryCacheManager
from oidc_cache_engine.cache.entities import ServerTelemetryEntity
from oidc_cache_engine.errors import ServerError
from oidc_cache_engine.telemetry import ServerTelemetryManager, ServerTelemetryRequest


@pytest.fixture
def cache_manager():
    return InMemoryCacheManager()


@pytest.fixture
def telemetry(cache_manager):
    return ServerTelemetryManager(
        ServerTelemetryRequest(client_id="client-123", api_id=862, correlation_id="corr-1"),
        cache_manager,
    )


class TestServerTelemetryManager:
    """Test ServerTelemetryManager"""

    def test_current_request_header(self, telemetry, cache_manager):
        assert telemetry.generate_current_request_header_value() == "2|862,0|"

        forced = ServerTelemetryManager(
            ServerTelemetryRequest("client-123", 871, "corr-2", force_refresh=True), cache_manager
        )
        assert forced.generate_current_request_header_value() == "2|871,1|"

    def test_last_request_header_empty(self, telemetry):
        assert telemetry.generate_last_request_header_value() == "2|0|||0"

    def test_failed_requests_reported(self, telemetry):
        telemetry.cache_failed_request(ServerError("invalid_grant", "expired"))
        telemetry.cache_failed_request(ServerError("invalid_grant", "expired", "bad_token"))
        telemetry.increment_cache_hits()

        assert telemetry.generate_last_request_header_value() == (
            "2|1|862,corr-1,862,corr-1|invalid_grant,bad_token|0"
        )

    def test_plain_exception_recorded(self, telemetry):
        telemetry.cache_failed_request(RuntimeError("boom"))
        telemetry.cache_failed_request(RuntimeError())

        assert telemetry.get_last_requests().errors == ["boom", "unknown_error"]

    def test_state_kept_in_cache_manager(self, telemetry, cache_manager):
        telemetry.cache_failed_request(ServerError("invalid_grant"))

        entity = cache_manager.get_server_telemetry("server-telemetry-client-123")
        assert entity.failed_requests == ["862", "corr-1"]

    def test_clear(self, telemetry, cache_manager):
        telemetry.cache_failed_request(ServerError("invalid_grant"))

        telemetry.clear_telemetry_cache()

        assert cache_manager.get_server_telemetry("server-telemetry-client-123") is None
        assert telemetry.generate_last_request_header_value() == "2|0|||0"

    def test_header_bounded_and_overflow(self, telemetry, cache_manager):
        errors = [f"error_code_{i:02d}" for i in range(20)]
        failed_requests = []
        for i in range(20):
            failed_requests.extend(["862", f"correlation-{i:02d}"])
        cache_manager.set_server_telemetry(
            "server-telemetry-client-123",
            ServerTelemetryEntity(failed_requests=failed_requests, errors=errors),
        )

        max_errors = ServerTelemetryManager.max_errors_to_send(telemetry.get_last_requests())
        header = telemetry.generate_last_request_header_value()

        assert 0 < max_errors < 20
        assert header.endswith("|1")
        assert len(header.encode("utf-8")) < 330 + 10

        telemetry.clear_telemetry_cache()

        remaining = telemetry.get_last_requests()
        assert remaining.errors == errors[max_errors:]
        assert remaining.failed_requests == failed_requests[2 * max_errors :]
