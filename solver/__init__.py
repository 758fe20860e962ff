"""SymPy-backed solving for typed algebra expressions and equations."""

from solver.engine import solve_math, solve_equation, evaluate_expression, find_variables
from solver.result import MathResult

__all__ = [
    "MathResult",
    "evaluate_expression",
    "find_variables",
    "solve_equation",
    "solve_math",
]
