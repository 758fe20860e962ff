from typing import Optional, Union

from pydantic import BaseModel

from solver.result import MathResult


class SolveRequest(BaseModel):
    input: str


class SolveResponse(BaseModel):
    original_expression: str
    steps: list[str]
    solution: Optional[Union[int, float, str]] = None
    error: Optional[str] = None
    type: str
    success: bool

    @classmethod
    def from_result(cls, result: MathResult) -> "SolveResponse":
        return cls(success=result.is_success, **result.to_dict())


class HistoryResponse(BaseModel):
    limit: int
    items: list[SolveResponse]


class ExamplesResponse(BaseModel):
    examples: list[str]
