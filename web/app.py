import time
from dataclasses import dataclass, field
from typing import Optional

from fastapi import FastAPI, Form, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse

from solver import solve_math
from solver.logging_config import get_logger
from solver.result import MathResult
from web import components
from web.config import Settings, load_settings
from web.history import ResultHistory
from web.models import (
    ExamplesResponse, HistoryResponse, SolveRequest, SolveResponse,
)

logger = get_logger(__name__)


@dataclass
class PageState:
    """What the page currently shows: the selected result and the recent history."""

    history: ResultHistory
    result: Optional[MathResult] = None
    settings: Settings = field(default_factory=Settings)

    def record(self, result: MathResult) -> None:
        self.result = result
        self.history.add(result)


def _run_solve(state: PageState, text: str) -> MathResult:
    # Fixed pause so the "Solving your problem..." indicator is visible.
    if state.settings.solve_delay_seconds:
        time.sleep(state.settings.solve_delay_seconds)
    result = solve_math(text)
    state.record(result)
    logger.info("Solved %r -> %s (success=%s)", text, result.type, result.is_success)
    return result


def _notice_for(result: MathResult) -> tuple:
    if result.error:
        return ("error", "Couldn't solve this problem completely", result.error)
    return ("success", "Problem solved!", "Check out the step-by-step solution below.")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    app = FastAPI(title="Algebra Genius")
    app.state.page = PageState(history=ResultHistory(settings.history_limit),
                               settings=settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def _state(request: Request) -> PageState:
        return request.app.state.page

    def _render(state: PageState, input_value: str = "", notice: Optional[tuple] = None) -> str:
        return components.render_page(
            result=state.result,
            history=state.history.items(),
            input_value=input_value,
            notice=notice,
        )

    # ── Page ──────────────────────────────────────────────────────────

    @app.get("/", response_class=HTMLResponse)
    def index(request: Request, input: str = ""):
        return _render(_state(request), input_value=input)

    @app.post("/solve", response_class=HTMLResponse)
    def solve_form(request: Request, expression: str = Form("")):
        state = _state(request)
        text = expression.strip()
        if not text:
            return _render(state)

        try:
            result = _run_solve(state, text)
        except Exception as e:
            logger.exception("Unexpected error while solving %r", text)
            return _render(state, input_value=text,
                           notice=("error", "Something went wrong", str(e)))
        return _render(state, input_value=text, notice=_notice_for(result))

    @app.get("/history/{index}", response_class=HTMLResponse)
    def show_history_item(request: Request, index: int):
        state = _state(request)
        item = state.history.get(index)
        if item is None:
            raise HTTPException(status_code=404, detail="No history entry at that position.")
        state.result = item
        return _render(state, input_value=item.original_expression)

    # ── JSON API ──────────────────────────────────────────────────────

    @app.post("/api/solve", response_model=SolveResponse)
    def solve_api(request: Request, req: SolveRequest):
        text = req.input.strip()
        if not text:
            raise HTTPException(status_code=400, detail="Input cannot be empty.")

        try:
            result = _run_solve(_state(request), text)
        except Exception as e:
            logger.exception("Unexpected error while solving %r", text)
            raise HTTPException(status_code=500, detail=f"Solver error: {str(e)}")

        return SolveResponse.from_result(result)

    @app.get("/api/history", response_model=HistoryResponse)
    def get_history(request: Request):
        history = _state(request).history
        return HistoryResponse(
            limit=history.limit,
            items=[SolveResponse.from_result(item) for item in history.items()],
        )

    @app.delete("/api/history", status_code=204)
    def clear_history(request: Request):
        state = _state(request)
        state.history.clear()
        state.result = None
        return Response(status_code=204)

    @app.get("/api/examples", response_model=ExamplesResponse)
    def get_examples():
        return ExamplesResponse(examples=list(components.EXAMPLE_INPUTS))

    return app
