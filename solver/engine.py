""" Step-by-step algebra solver using SymPy."""

"""
Accepts either an equation (e.g. "2x + 3 = 7") or a plain expression
(e.g. "3 + 4 * 2"). Parsing, simplification, solving and derivatives are
all done by SymPy; this module only dispatches on the input shape and
turns the SymPy results into human-readable steps.
"""

import math
import re
from keyword import iskeyword

from sympy import (
    Abs, Pow, Symbol, diff, expand, log, postorder_traversal, simplify, solve,
)
from sympy.parsing.sympy_parser import (
    parse_expr, standard_transformations, implicit_multiplication_application,
    convert_xor, rationalize,
)

from solver.logging_config import get_logger
from solver.result import (
    MathResult, EQUATION, EXPRESSION, UNKNOWN,
)

logger = get_logger(__name__)

TRANSFORMATIONS = standard_transformations + (
    implicit_multiplication_application,
    convert_xor,
    rationalize,  # Convert decimals like "12.5" to exact Rational(25, 2)
)

# Names that are functions or constants, never unknowns.
_RESERVED_NAMES = frozenset({
    'sin', 'cos', 'tan', 'cot', 'sec', 'csc',
    'asin', 'acos', 'atan', 'sinh', 'cosh', 'tanh',
    'log', 'ln', 'exp', 'sqrt', 'abs',
    'pi', 'PI', 'Pi', 'E',
})

EQUALITY_TOLERANCE = 1e-10
MAX_DECIMALS = 10
MAX_RESULT_DIGITS = 10000
# Largest float whose integer part is still exact.
MAX_EXACT_FLOAT = 2 ** 53

EMPTY_INPUT_MESSAGE = "Please enter an expression or equation."
INVALID_FORMAT_MESSAGE = "Invalid equation format. Please use x = y format."
COMPLEX_EQUATION_MESSAGES = (
    "Complex equations with multiple variables require a more sophisticated solver.",
    "Consider simplifying your equation or specifying which variable to solve for.",
)


# ── Input helpers ───────────────────────────────────────────────────────

def _normalize(text: str) -> str:
    """Map display symbols and bracket styles to parser-friendly text."""
    s = re.sub(r'√(\d+(?:\.\d+)?|[A-Za-z])', r'sqrt(\1)', text)
    s = s.replace('√', 'sqrt')
    s = s.replace('π', '(pi)')
    s = re.sub(r'(?<![A-Za-z])(?:PI|Pi)(?![A-Za-z])', 'pi', s)
    s = s.replace('[', '(').replace(']', ')')
    return s.replace('{', '(').replace('}', ')')


def _validate_characters(text: str) -> None:
    """Reject input that contains characters outside the allowed set.

    Allowed: letters, digits, whitespace, and the math symbols
    + - * / ^ = ( ) . , ; :
    """
    allowed = set("abcdefghijklmnopqrstuvwxyz"
                  "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
                  "0123456789"
                  " \t\n+-*/^=().,;:")
    bad = {ch for ch in text if ch not in allowed}
    if bad:
        bad_sorted = " ".join(sorted(bad))
        raise ValueError(
            f"Invalid character(s): {bad_sorted}. "
            f"Only letters, numbers, and math symbols "
            f"(+ - * / ^ = ( ) .) are allowed."
        )


def find_variables(text: str) -> list:
    """Return the unknowns named in *text*, in order of first appearance.

    Every alphabetic run is a candidate (``xy`` is one variable, not two);
    reserved function and constant names are dropped.
    """
    found = []
    for token in re.findall(r'[a-zA-Z]+', text):
        if token in _RESERVED_NAMES or token in found:
            continue
        found.append(token)
    return found


def _placeholder(name: str) -> str:
    """Parser-safe stand-in for a variable named like a Python keyword."""
    return f"KW_{name}"


def _check_magnitude(expr, text: str) -> None:
    """Reject numeric powers whose value would run past MAX_RESULT_DIGITS.

    *expr* must be unevaluated; nodes are visited innermost first so every
    exponent examined here is already known to be of bounded size.
    """
    for node in postorder_traversal(expr):
        if not (isinstance(node, Pow) and node.base.is_number and node.exp.is_number):
            continue
        base = Abs(node.base.evalf())
        exponent = Abs(node.exp.evalf())
        if not (base.is_finite and exponent.is_finite) or base <= 1:
            continue
        digits = exponent * log(base, 10)
        if digits.is_comparable and digits > MAX_RESULT_DIGITS:
            raise ValueError(f"Number too large to evaluate: '{text}'.")


def _parse(text: str, variables=()):
    """Parse *text* with SymPy, keeping each name in *variables* as one symbol.

    Variables named like Python keywords (``in``, ``as``, ``lambda``) are
    swapped for placeholders bound to a symbol of the original name, so
    they print back unchanged.
    """
    s = text.strip()
    local = {}
    for name in variables:
        if iskeyword(name):
            s = re.sub(rf'(?<![A-Za-z]){name}(?![A-Za-z])', _placeholder(name), s)
            local[_placeholder(name)] = Symbol(name)
        else:
            local[name] = Symbol(name)

    try:
        unevaluated = parse_expr(s, local_dict=local, transformations=TRANSFORMATIONS,
                                 evaluate=False)
    except Exception:
        # The evaluating parse below reports the syntax error.
        unevaluated = None
    if unevaluated is not None:
        _check_magnitude(unevaluated, text.strip())

    try:
        return parse_expr(s, local_dict=local, transformations=TRANSFORMATIONS)
    except Exception as e:
        raise ValueError(f"Could not parse expression: '{text.strip()}'. Error: {e}")


# ── Output helpers ──────────────────────────────────────────────────────

def _format_expr(expr) -> str:
    """Format a SymPy expression with caret powers and implicit coefficients."""
    s = str(expr).replace('**', '^')
    # 2*x -> 2x, but leave 5*sqrt(2) alone
    s = re.sub(r'(\d)\*([A-Za-z]+)\b(?!\()', r'\1\2', s)
    s = re.sub(r'\)\*([A-Za-z]+)\b(?!\()', r')\1', s)
    return s


def _fmt_num(value: float, max_decimals: int = MAX_DECIMALS) -> str:
    """Format a float with trailing zeros removed; integral values lose the point."""
    if abs(value) >= MAX_EXACT_FLOAT:
        return str(value)
    if abs(value - round(value)) < 1e-12:
        return str(int(round(value)))
    return f"{value:.{max_decimals}f}".rstrip("0").rstrip(".")


def _to_number(expr):
    """Evaluate a SymPy expression to an ``int``, ``float`` or complex string.

    Raises ValueError when the expression still has free symbols or does
    not evaluate to a finite number.
    """
    if expr.is_Integer:
        return int(expr)
    value = expr.evalf()
    if not value.is_number:
        raise ValueError(f"'{_format_expr(expr)}' does not evaluate to a number.")
    try:
        number = complex(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"'{_format_expr(expr)}' is not a finite number.") from exc
    if not (math.isfinite(number.real) and math.isfinite(number.imag)):
        raise ValueError(f"'{_format_expr(expr)}' is not a finite number.")
    if abs(number.imag) > 1e-12:
        sign = "-" if number.imag < 0 else "+"
        return f"{_fmt_num(number.real)} {sign} {_fmt_num(abs(number.imag))}i"
    if abs(number.real) >= MAX_EXACT_FLOAT:
        return number.real
    if abs(number.real - round(number.real)) < 1e-12:
        return int(round(number.real))
    return round(number.real, MAX_DECIMALS)


def _numeric_difference(left, right) -> float:
    """Absolute difference of two evaluated sides (complex-aware)."""
    return abs(complex(left.evalf()) - complex(right.evalf()))


# ── Solving ─────────────────────────────────────────────────────────────

def _is_linear(left: str, right: str, variable: str) -> bool:
    """Return True when ``left - right`` is a polynomial of degree <= 1 in *variable*."""
    combined = expand(_parse(left, (variable,)) - _parse(right, (variable,)))
    poly = combined.as_poly(Symbol(variable))
    return poly is not None and bool(poly.degree() <= 1)


def _slope_intercept(lhs, rhs, var, cause: Exception) -> str:
    """Solve ``a·v + b = c·v + d`` as ``v = (d - b) / (a - c)``.

    Used only when SymPy's symbolic solve throws. Slopes come from the
    derivative, intercepts from substituting zero.
    """
    try:
        coef = simplify(diff(lhs, var) - diff(rhs, var))
        if coef == 0 or var in coef.free_symbols:
            raise ValueError("the variable has no constant non-zero coefficient")
        const_term = rhs.subs(var, 0) - lhs.subs(var, 0)
        return _format_expr(simplify(const_term / coef))
    except Exception as exc:
        raise ValueError(f"Could not solve for {var}: {cause}") from exc


def solve_linear(left: str, right: str, variable: str) -> str:
    """Solve ``left = right`` for *variable* and return the formatted value.

    Raises ValueError for identities, contradictions, and equations that
    neither SymPy nor the slope/intercept fallback can solve.
    """
    var = Symbol(variable)
    lhs = _parse(left, (variable,))
    rhs = _parse(right, (variable,))

    difference = expand(lhs - rhs)
    if var not in difference.free_symbols:
        if simplify(difference) == 0:
            raise ValueError("This equation is always true (identity). Infinite solutions.")
        raise ValueError("This equation has no solution (contradiction).")

    try:
        solutions = solve(difference, var)
    except Exception as exc:
        logger.warning("Symbolic solve for %s failed (%s); trying slope/intercept", variable, exc)
        return _slope_intercept(lhs, rhs, var, exc)

    if isinstance(solutions, (list, tuple)):
        if not solutions:
            raise ValueError(f"Could not solve for {variable}: no solution found.")
        return _format_expr(solutions[0])
    return _format_expr(solutions)


def solve_equation(equation: str) -> MathResult:
    """Solve an input that contains ``=``.

    One variable: solve symbolically. No variables: compare both sides.
    Anything else: explain that a more capable solver is needed.
    """
    parts = equation.split('=')
    if len(parts) != 2:
        return MathResult(
            original_expression=equation,
            steps=(INVALID_FORMAT_MESSAGE,),
            solution=None,
            error="Invalid equation format",
            type=EQUATION,
        )

    try:
        steps = [f"Starting with: {equation}"]
        left = _normalize(parts[0]).strip()
        right = _normalize(parts[1]).strip()
        _validate_characters(f"{left} {right}")

        variables = find_variables(f"{left} {right}")

        if len(variables) == 1 and _is_linear(left, right, variables[0]):
            variable = variables[0]
            steps.append(f"Solving for {variable}")
            solution = solve_linear(left, right, variable)
            steps.append(f"{variable} = {solution}")
            return MathResult(
                original_expression=equation,
                steps=steps,
                solution=solution,
                type=EQUATION,
            )

        if not variables:
            left_expr = _parse(left)
            right_expr = _parse(right)
            left_value = _to_number(left_expr)
            right_value = _to_number(right_expr)
            steps.append(f"Left side evaluates to: {left_value}")
            steps.append(f"Right side evaluates to: {right_value}")

            is_equal = _numeric_difference(left_expr, right_expr) < EQUALITY_TOLERANCE
            steps.append(f"The equation is {'valid' if is_equal else 'invalid'}")
            return MathResult(
                original_expression=equation,
                steps=steps,
                solution='True' if is_equal else 'False',
                type=EQUATION,
            )

        logger.info("Not solving %r: variables=%s", equation, variables)
        steps.extend(COMPLEX_EQUATION_MESSAGES)
        return MathResult(
            original_expression=equation,
            steps=steps,
            solution=None,
            type=EQUATION,
        )
    except Exception as exc:
        logger.warning("Error solving equation %r: %s", equation, exc)
        return MathResult(
            original_expression=equation,
            steps=(f"Error solving equation: {exc}",),
            solution=None,
            error=str(exc),
            type=EQUATION,
        )


def evaluate_expression(expression: str) -> MathResult:
    """Simplify an input without ``=`` and evaluate it numerically when possible."""
    try:
        text = _normalize(expression)
        _validate_characters(text)
        parsed = _parse(text, find_variables(text))
        simplified = simplify(parsed)
        simplified_text = _format_expr(simplified)

        try:
            evaluated = _to_number(parsed)
        except ValueError:
            evaluated = None

        steps = [f"Original expression: {expression}"]
        if (simplified_text.replace(' ', '') != expression.replace(' ', '')
                and simplified_text != str(evaluated)):
            steps.append(f"Simplified to: {simplified_text}")

        if evaluated is None:
            # Free symbols remain, so the simplified form is the answer.
            return MathResult(
                original_expression=expression,
                steps=steps,
                solution=simplified_text,
                type=EXPRESSION,
            )

        steps.append(f"Evaluated to: {evaluated}")
        return MathResult(
            original_expression=expression,
            steps=steps,
            solution=evaluated,
            type=EXPRESSION,
        )
    except Exception as exc:
        logger.warning("Error evaluating expression %r: %s", expression, exc)
        return MathResult(
            original_expression=expression,
            steps=(f"Error evaluating expression: {exc}",),
            solution=None,
            error=str(exc),
            type=EXPRESSION,
        )


def solve_math(text: str) -> MathResult:
    """Solve or evaluate *text*; always returns a MathResult, never raises."""
    cleaned = text.strip()
    if not cleaned:
        return MathResult(
            original_expression=cleaned,
            steps=(EMPTY_INPUT_MESSAGE,),
            solution=None,
            error="Empty input",
            type=UNKNOWN,
        )

    try:
        if '=' in cleaned:
            result = solve_equation(cleaned)
        else:
            result = evaluate_expression(cleaned)
    except Exception as exc:
        logger.exception("Unexpected failure analysing %r", cleaned)
        return MathResult(
            original_expression=cleaned,
            steps=(f"Error analyzing input: {exc}",),
            solution=None,
            error=str(exc),
            type=UNKNOWN,
        )

    logger.debug("Solved %r as %s (success=%s)", cleaned, result.type, result.is_success)
    return result
