"""Result record produced by every solve request."""

from dataclasses import dataclass, field
from typing import Optional, Union

EQUATION = "equation"
EXPRESSION = "expression"
SIMPLIFICATION = "simplification"
UNKNOWN = "unknown"

RESULT_TYPES = (EQUATION, EXPRESSION, SIMPLIFICATION, UNKNOWN)

_TYPE_LABELS = {
    EQUATION: "Equation",
    EXPRESSION: "Expression",
    SIMPLIFICATION: "Simplification",
    UNKNOWN: "Simplification",
}

Solution = Union[str, int, float, None]


@dataclass(frozen=True)
class MathResult:
    """One solve attempt: the input, its ordered steps and the answer.

    ``solution`` is ``None`` when nothing could be concluded. ``error`` is set
    only when the underlying library (or input validation) failed.
    """

    original_expression: str
    steps: tuple = field(default_factory=tuple)
    solution: Solution = None
    type: str = UNKNOWN
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if self.type not in RESULT_TYPES:
            raise ValueError(f"Unknown result type: {self.type!r}")
        # Accept any iterable of steps but always store a tuple.
        object.__setattr__(self, "steps", tuple(self.steps))

    @property
    def is_success(self) -> bool:
        return self.error is None and self.solution is not None

    @property
    def type_label(self) -> str:
        return _TYPE_LABELS[self.type]

    def to_dict(self) -> dict:
        return {
            "original_expression": self.original_expression,
            "steps": list(self.steps),
            "solution": self.solution,
            "error": self.error,
            "type": self.type,
        }
