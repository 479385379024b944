"""Integration tests for the main application."""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import patch
from structlog.testing import capture_logs

from calc_service.main import app
from calc_service.breaker import BreakerConfig, CircuitBreaker
from calc_service.dependencies import get_circuit_breaker
from calc_service.exceptions import CalculatorError

client = TestClient(app, raise_server_exceptions=False)


@pytest.fixture(autouse=True)
def override_breaker(breaker):
    """Give every test a fresh breaker driven by the fake clock."""
    app.dependency_overrides[get_circuit_breaker] = lambda: breaker
    yield breaker
    del app.dependency_overrides[get_circuit_breaker]


def boom(*args):
    raise ArithmeticError("secret internal detail")


class TestArithmeticEndpoints:
    """Tests for successful operations over HTTP."""

    def test_add(self):
        response = client.get("/add", params={"num1": "5", "num2": "3"})

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/json"
        body = response.json()
        assert body["operation"] == "addition"
        assert body["num1"] == 5
        assert body["num2"] == 3
        assert body["result"] == 8
        assert body["timestamp"].endswith("Z")

    @pytest.mark.parametrize(
        "path, operation, expected",
        [
            ("/add", "addition", 0.1 + 0.2),
            ("/subtract", "subtraction", 0.1 - 0.2),
            ("/multiply", "multiplication", 0.1 * 0.2),
            ("/divide", "division", 0.1 / 0.2),
        ],
    )
    def test_binary_operations_are_exact(self, path, operation, expected):
        response = client.get(path, params={"num1": "0.1", "num2": "0.2"})

        assert response.status_code == 200
        assert response.json()["operation"] == operation
        assert response.json()["result"] == expected

    def test_scientific_notation(self):
        response = client.get("/multiply", params={"num1": "1.5e3", "num2": "-2"})

        assert response.json()["result"] == -3000

    def test_power(self):
        response = client.get("/power", params={"num1": "2", "num2": "8"})

        assert response.status_code == 200
        body = response.json()
        assert body["operation"] == "exponentiation"
        assert body["base"] == 2
        assert body["exponent"] == 8
        assert body["result"] == 256

    def test_power_nan_is_null(self):
        response = client.get("/power", params={"num1": "-8", "num2": "0.5"})

        assert response.status_code == 200
        assert response.json()["result"] is None

    def test_modulo(self):
        response = client.get("/modulo", params={"num1": "10", "num2": "3"})

        assert response.status_code == 200
        body = response.json()
        assert body["operation"] == "modulo"
        assert body["dividend"] == 10
        assert body["divisor"] == 3
        assert body["result"] == 1

    def test_sqrt(self):
        response = client.get("/sqrt", params={"num": "25"})

        assert response.status_code == 200
        body = response.json()
        assert body["operation"] == "square_root"
        assert body["radicand"] == 25
        assert body["result"] == 5

    def test_repeated_requests_are_idempotent(self):
        first = client.get("/power", params={"num1": "1.1", "num2": "3.3"}).json()
        second = client.get("/power", params={"num1": "1.1", "num2": "3.3"}).json()

        assert first["result"] == second["result"]


class TestValidationErrors:
    """Tests for 400 responses from the validator."""

    @pytest.mark.parametrize("path", ["/add", "/subtract", "/multiply", "/divide", "/power", "/modulo"])
    def test_missing_parameter(self, path):
        response = client.get(path, params={"num1": "abc"})

        assert response.status_code == 400
        assert response.json() == {
            "error": "Both num1 and num2 are required",
            "suggestion": f"Example: {path}?num1=5&num2=3",
        }

    def test_missing_sqrt_parameter(self):
        response = client.get("/sqrt")

        assert response.status_code == 400
        assert response.json() == {"error": "num parameter is required", "example": "/sqrt?num=25"}

    @pytest.mark.parametrize(
        "raw",
        ["abc", "", "NaN", "Infinity", "0x1A", " 5", "1e999", "\u0663", "\uff15", "\u0967\u0968"],
    )
    def test_invalid_number_is_echoed(self, raw):
        response = client.get("/add", params={"num1": raw, "num2": "3"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Both num1 and num2 must be valid numbers"
        assert body["received"] == {"num1": raw, "num2": "3"}
        assert "result" not in body

    def test_invalid_sqrt_number(self):
        response = client.get("/sqrt", params={"num": "four"})

        assert response.status_code == 400
        assert response.json() == {"error": "num must be a valid number", "received": "four"}

    def test_validation_failure_is_logged_with_request_context(self):
        with capture_logs() as logs:
            client.get("/add", params={"num1": "abc", "num2": "1"})

        errors = [entry for entry in logs if entry["log_level"] == "error"]
        assert len(errors) == 1
        assert errors[0]["event"] == "Invalid parameters"
        assert errors[0]["method"] == "GET"
        assert errors[0]["params"] == {"num1": "abc", "num2": "1"}
        assert "/add" in errors[0]["url"]


class TestDomainErrors:
    """Tests for 400 responses from domain checks."""

    def test_divide_by_zero(self):
        response = client.get("/divide", params={"num1": "10", "num2": "0"})

        assert response.status_code == 400
        assert response.json() == {
            "error": "Division by zero is not allowed",
            "suggestion": "Provide non-zero denominator",
        }

    def test_domain_error_is_logged_with_request_context(self):
        with capture_logs() as logs:
            client.get("/divide", params={"num1": "1", "num2": "0"})

        entry = next(e for e in logs if e["event"] == "Division by zero attempted")
        assert entry["log_level"] == "error"
        assert entry["error"] == "DIVISION_BY_ZERO"
        assert entry["method"] == "GET"
        assert "/divide" in entry["url"]
        assert entry["params"] == {"num1": "1", "num2": "0"}

    def test_modulo_by_zero(self):
        response = client.get("/modulo", params={"num1": "10", "num2": "0.0"})

        assert response.status_code == 400
        assert "result" not in response.json()
        assert response.json()["error"] == "Modulo by zero is undefined"

    def test_sqrt_of_negative(self):
        response = client.get("/sqrt", params={"num": "-4"})

        assert response.status_code == 400
        assert response.json() == {
            "error": "Square root of negative numbers is not real",
            "suggestion": "Provide non-negative number",
            "received": -4,
        }


class TestCircuitBreakerEndpoints:
    """Tests for 503 responses from the circuit breaker."""

    def test_open_breaker_rejects_guarded_operations(self, breaker, clock):
        for _ in range(3):
            breaker.call(boom)

        for path in ("/add", "/subtract", "/multiply", "/divide"):
            response = client.get(path, params={"num1": "1", "num2": "2"})
            assert response.status_code == 503
            assert response.json() == {
                "error": "Service temporarily unavailable",
                "fallback": "Try again later",
            }
            assert response.headers["Retry-After"] == "11"

    def test_rejection_is_logged_with_request_context(self, breaker):
        for _ in range(3):
            breaker.call(boom)

        with capture_logs() as logs:
            response = client.get("/multiply", params={"num1": "2", "num2": "4"})

        assert response.status_code == 503
        entry = next(e for e in logs if e["event"] == "Circuit breaker rejected operation")
        assert entry["log_level"] == "warning"
        assert entry["error"] == "BREAKER_OPEN"
        assert entry["operation"] == "multiplication"
        assert entry["method"] == "GET"
        assert "/multiply" in entry["url"]
        assert entry["params"] == {"num1": "2", "num2": "4"}

    def test_unguarded_operations_ignore_open_breaker(self, breaker):
        for _ in range(3):
            breaker.call(boom)

        assert client.get("/power", params={"num1": "2", "num2": "2"}).status_code == 200
        assert client.get("/modulo", params={"num1": "5", "num2": "2"}).status_code == 200
        assert client.get("/sqrt", params={"num": "4"}).status_code == 200

    def test_recovers_after_cooldown(self, breaker, clock):
        for _ in range(3):
            breaker.call(boom)
        clock.advance(10)

        response = client.get("/add", params={"num1": "5", "num2": "3"})

        assert response.status_code == 200
        assert response.json()["result"] == 8
        assert breaker.snapshot() == {"state": "closed", "failure_count": 0}

    def test_failure_inside_breaker_is_503(self, clock):
        breaker = CircuitBreaker(
            BreakerConfig(failure_threshold=2, protected_operations=frozenset({"exponentiation"})),
            clock=clock,
        )
        app.dependency_overrides[get_circuit_breaker] = lambda: breaker

        with capture_logs() as logs, patch("calc_service.operations.service.ieee_pow", side_effect=boom):
            first = client.get("/power", params={"num1": "2", "num2": "3"})
            second = client.get("/power", params={"num1": "2", "num2": "3"})

        assert first.status_code == 503
        assert "secret internal detail" not in first.text
        assert "Retry-After" not in first.headers
        assert second.status_code == 503
        assert breaker.snapshot()["state"] == "open"
        failure = next(e for e in logs if e["event"] == "Operation failed inside circuit breaker")
        assert failure["error"] == "OPERATION_FAILED"
        assert failure["method"] == "GET"
        assert failure["params"] == {"num1": "2", "num2": "3"}

        third = client.get("/power", params={"num1": "2", "num2": "3"})
        assert third.status_code == 503
        assert "Retry-After" in third.headers


class TestServerErrors:
    """Tests for the terminal exception handler."""

    def test_unhandled_exception_is_500(self):
        with patch("calc_service.operations.router.square_root", side_effect=boom):
            response = client.get("/sqrt", params={"num": "4"})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Internal server error"
        assert body["reference"].startswith("ErrorID-")
        assert body["support"] == "contact support@calculator.com"
        assert "secret internal detail" not in response.text

    def test_bare_calculator_error_is_500(self):
        with patch(
            "calc_service.operations.router.square_root",
            side_effect=CalculatorError("unclassified failure"),
        ):
            response = client.get("/sqrt", params={"num": "4"})

        assert response.status_code == 500
        assert response.json()["error"] == "Internal server error"
        assert "unclassified failure" not in response.text

    def test_unguarded_computation_failure_is_500(self):
        with patch("calc_service.operations.service.ieee_pow", side_effect=boom):
            response = client.get("/power", params={"num1": "2", "num2": "3"})

        assert response.status_code == 500

    def test_unhandled_exception_is_logged(self):
        with capture_logs() as logs:
            with patch("calc_service.operations.router.square_root", side_effect=boom):
                response = client.get("/sqrt", params={"num": "4"})

        entry = next(e for e in logs if e["event"] == "System error occurred")
        assert entry["log_level"] == "error"
        assert entry["error"] == "secret internal detail"
        assert entry["path"] == "/sqrt"
        assert entry["params"] == {"num": "4"}
        assert entry["reference"] == response.json()["reference"]


class TestHealthAndMiddleware:
    """Tests for the health check and request logging."""

    def test_health_check(self):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["app"] == "Calculator Service"
        assert body["uptime"] >= 0
        assert body["timestamp"].endswith("Z")
        assert body["circuit_breaker"] == {"state": "closed", "failure_count": 0}

    def test_health_reports_open_breaker(self, breaker):
        for _ in range(3):
            breaker.call(boom)

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["circuit_breaker"]["state"] == "open"

    def test_requests_are_logged(self):
        with capture_logs() as logs:
            client.get("/health", headers={"X-Test": "yes"})

        entry = next(e for e in logs if e["event"] == "Request received")
        assert entry["method"] == "GET"
        assert entry["url"].endswith("/health")
        assert entry["headers"]["x-test"] == "yes"

    def test_default_breaker_lives_on_app_state(self):
        assert isinstance(app.state.circuit_breaker, CircuitBreaker)
        assert app.state.circuit_breaker.guards("addition")
        assert not app.state.circuit_breaker.guards("square_root")

    def test_openapi_schema_generated(self):
        response = client.get("/openapi.json")

        assert response.status_code == 200
        assert "/add" in response.json()["paths"]
