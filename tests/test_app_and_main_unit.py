import logging

import pytest
from fastapi.testclient import TestClient

import main as entry
import web.app as app_module
from solver.logging_config import StructuredFormatter, setup_logging
from web.app import create_app
from web.config import Settings, load_settings


@pytest.fixture()
def client() -> TestClient:
    return TestClient(create_app(Settings(solve_delay_seconds=0)))


# ── Page ────────────────────────────────────────────────────────────────

def test_index_renders_input(client) -> None:
    response = client.get("/")
    assert response.status_code == 200
    assert "What would you like to solve?" in response.text
    assert "Recent Solutions" not in response.text


def test_index_prefills_from_example_link(client) -> None:
    response = client.get("/", params={"input": "x^2 - 4 = 0"})
    assert ">x^2 - 4 = 0</textarea>" in response.text


def test_form_solve_renders_steps_and_success_notice(client) -> None:
    response = client.post("/solve", data={"expression": "2x + 3 = 7"})
    assert response.status_code == 200
    assert "Problem solved!" in response.text
    assert "Solving for x" in response.text
    assert "Final Answer" in response.text


def test_form_solve_error_notice(client) -> None:
    response = client.post("/solve", data={"expression": "1 = 2 = 3"})
    assert "solve this problem completely" in response.text
    assert "Invalid equation format" in response.text


def test_blank_form_is_ignored(client) -> None:
    response = client.post("/solve", data={"expression": "   "})
    assert response.status_code == 200
    assert "Problem solved!" not in response.text
    assert client.get("/api/history").json()["items"] == []


def test_form_unexpected_error_is_rendered(client, monkeypatch) -> None:
    def _explode(_):
        raise RuntimeError("boom")

    monkeypatch.setattr(app_module, "solve_math", _explode)
    response = client.post("/solve", data={"expression": "1 + 1"})
    assert response.status_code == 200
    assert "Something went wrong" in response.text
    assert "boom" in response.text


def test_history_selection(client) -> None:
    client.post("/solve", data={"expression": "3 + 4 * 2"})
    client.post("/solve", data={"expression": "2x + 3 = 7"})

    page = client.get("/").text
    assert 'href="/history/1"' in page

    response = client.get("/history/1")
    assert response.status_code == 200
    assert "Evaluated to: 11" in response.text

    assert client.get("/history/7").status_code == 404


# ── JSON API ────────────────────────────────────────────────────────────

def test_api_solve_expression(client) -> None:
    response = client.post("/api/solve", json={"input": "3 + 4 * 2"})
    assert response.status_code == 200
    body = response.json()
    assert body["solution"] == 11
    assert body["type"] == "expression"
    assert body["success"] is True
    assert body["steps"] == ["Original expression: 3 + 4 * 2", "Evaluated to: 11"]


def test_api_solve_equation_without_solution(client) -> None:
    body = client.post("/api/solve", json={"input": "x^2 - 4 = 0"}).json()
    assert body["solution"] is None
    assert body["error"] is None
    assert body["success"] is False


def test_api_rejects_blank_input(client) -> None:
    response = client.post("/api/solve", json={"input": "  "})
    assert response.status_code == 400
    assert response.json()["detail"] == "Input cannot be empty."


def test_api_unexpected_error_is_500(client, monkeypatch) -> None:
    def _explode(_):
        raise RuntimeError("boom")

    monkeypatch.setattr(app_module, "solve_math", _explode)
    response = client.post("/api/solve", json={"input": "1 + 1"})
    assert response.status_code == 500
    assert "boom" in response.json()["detail"]


def test_api_history_is_bounded_and_clearable(client) -> None:
    for i in range(7):
        client.post("/api/solve", json={"input": f"{i} + 1"})

    body = client.get("/api/history").json()
    assert body["limit"] == 5
    assert [item["original_expression"] for item in body["items"]] == [
        "6 + 1", "5 + 1", "4 + 1", "3 + 1", "2 + 1",
    ]

    assert client.delete("/api/history").status_code == 204
    assert client.get("/api/history").json()["items"] == []


def test_api_examples(client) -> None:
    examples = client.get("/api/examples").json()["examples"]
    assert "2x + 3 = 7" in examples
    assert len(examples) == 5


def test_solve_waits_for_configured_delay(monkeypatch) -> None:
    slept = []

    class _FakeTime:
        @staticmethod
        def sleep(seconds):
            slept.append(seconds)

    monkeypatch.setattr(app_module, "time", _FakeTime)
    client = TestClient(create_app(Settings(solve_delay_seconds=0.25)))
    client.post("/api/solve", json={"input": "1 + 1"})
    assert slept == [0.25]


# ── Config, logging, entry point ───────────────────────────────────────

def test_load_settings_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("ALGEBRA_GENIUS_PORT", "9100")
    monkeypatch.setenv("ALGEBRA_GENIUS_LOG_LEVEL", "debug")
    monkeypatch.setenv("ALGEBRA_GENIUS_HISTORY_LIMIT", "3")
    settings = load_settings()
    assert settings.port == 9100
    assert settings.log_level == "DEBUG"
    assert settings.history_limit == 3
    assert settings.solve_delay_seconds == 1.0


def test_invalid_settings(monkeypatch) -> None:
    monkeypatch.setenv("ALGEBRA_GENIUS_PORT", "not-a-port")
    with pytest.raises(ValueError, match="ALGEBRA_GENIUS_"):
        load_settings()
    with pytest.raises(ValueError):
        Settings(solve_delay_seconds=-1)


def test_setup_logging_and_formatter() -> None:
    logger = setup_logging("debug")
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1
    assert logger.propagate is False

    # Calling again replaces, rather than stacks, handlers.
    logger = setup_logging("info")
    assert len(logger.handlers) == 1

    record = logging.LogRecord("algebra_genius.test", logging.INFO, __file__, 1,
                               "hello %s", ("world",), None)
    assert "[INFO] algebra_genius.test: hello world" in StructuredFormatter().format(record)


def test_setup_logging_shares_handler_with_uvicorn() -> None:
    app_logger = setup_logging("warning")
    server = logging.getLogger("uvicorn")
    access = logging.getLogger("uvicorn.access")

    assert server.handlers == app_logger.handlers
    assert access.handlers == app_logger.handlers
    assert access.level == logging.WARNING
    assert isinstance(server.handlers[0].formatter, StructuredFormatter)
    assert logging.getLogger("uvicorn.error").handlers == []


def test_main_entry_runs_server(monkeypatch) -> None:
    called = {}

    def _fake_run(app, **kwargs):
        called["app"] = app
        called.update(kwargs)

    monkeypatch.setattr(entry.uvicorn, "run", _fake_run)
    monkeypatch.setattr(entry, "setup_logging", lambda level: called.setdefault("level", level))
    entry.main(["--port", "9001", "--delay", "0", "--log-level", "warning"])

    assert called["port"] == 9001
    assert called["log_level"] == "warning"
    assert called["log_config"] is None
    assert called["level"] == "WARNING"
    assert called["app"].state.page.settings.solve_delay_seconds == 0
