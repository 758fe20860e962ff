"""
Algebra Genius — HTML components

Each ``render_*`` function returns an HTML fragment; ``render_page``
composes them into the full document. All user-provided text goes
through ``html.escape``.
"""

from datetime import date
from html import escape
from typing import Optional
from urllib.parse import quote

from solver.result import MathResult, EQUATION

APP_NAME = "Algebra Genius"

EXAMPLE_INPUTS = (
    "2x + 3 = 7",
    "x^2 - 4 = 0",
    "sqrt(16) + 5",
    "(3 + 4) * (2 - 1)",
    "5 * sin(pi/4)",
)

FEATURES = (
    ("&#129504;", "AI-Powered Solutions",
     "Our advanced algorithms solve algebra problems with step-by-step explanations."),
    ("&#128425;", "Comprehensive Math Support",
     "From basic arithmetic to complex algebraic equations, we've got you covered."),
    ("&#10133;", "Learn While Solving",
     "Understand concepts better with our detailed solution breakdowns."),
)

PLACEHOLDER = "Enter an equation like '2x + 3 = 7' or expression like '3 + 4 * 2'"

_STYLE = """
    :root {
      --bg: #f8fafc;
      --panel: #ffffff;
      --ink: #111827;
      --muted: #6b7280;
      --accent: #6d28d9;
      --line: #e5e7eb;
    }
    body { margin: 0; font-family: "Segoe UI", "Helvetica Neue", Arial, sans-serif;
           background: var(--bg); color: var(--ink); }
    header, footer { background: var(--panel); border-bottom: 1px solid var(--line); }
    footer { border-top: 1px solid var(--line); border-bottom: none; color: var(--muted); }
    .bar { max-width: 1024px; margin: 0 auto; padding: 14px 20px;
           display: flex; justify-content: space-between; align-items: center; }
    main { max-width: 1024px; margin: 0 auto; padding: 32px 20px; }
    .hero { text-align: center; margin-bottom: 48px; }
    .chip { display: inline-block; padding: 3px 10px; border-radius: 999px;
            background: #ede9fe; color: var(--accent); font-size: 0.85rem; }
    .chip.ok { background: #dcfce7; color: #166534; }
    .chip.warn { background: #fef3c7; color: #92400e; }
    .card { background: var(--panel); border: 1px solid var(--line); border-radius: 12px;
            padding: 16px; margin: 0 0 16px; text-align: left; }
    .narrow { max-width: 672px; margin: 0 auto; }
    textarea { width: 100%; box-sizing: border-box; min-height: 56px; padding: 12px;
               border: 1px solid var(--line); border-radius: 10px; font-size: 1.05rem;
               font-family: Consolas, monospace; resize: none; }
    button { background: var(--accent); color: #fff; border: none; border-radius: 999px;
             padding: 8px 18px; cursor: pointer; margin-top: 8px; }
    button:disabled { opacity: 0.5; cursor: default; }
    .examples a { display: inline-block; margin: 4px; padding: 6px 12px; border-radius: 8px;
                  background: #f1f5f9; color: var(--ink); text-decoration: none; font-size: 0.9rem; }
    ol.steps { margin: 0; padding-left: 24px; }
    ol.steps li { padding: 6px 0; border-bottom: 1px solid var(--line); }
    ol.steps li:last-child { border-bottom: none; }
    .answer { font-family: Consolas, monospace; font-size: 1.3rem; }
    .notice { border-radius: 10px; padding: 12px 16px; margin: 0 auto 24px; max-width: 672px; }
    .notice.success { background: #dcfce7; }
    .notice.error { background: #fee2e2; }
    .features { display: grid; grid-template-columns: repeat(3, 1fr); gap: 24px; }
    .history a { display: flex; justify-content: space-between; text-decoration: none;
                 color: var(--ink); }
    #processing { display: none; }
    @media (max-width: 720px) { .features { grid-template-columns: 1fr; } }
"""

# Disables the submit button on blank input and shows a spinner while solving.
_SCRIPT = """
  const form = document.getElementById('solve-form');
  const field = document.getElementById('expression');
  const submit = document.getElementById('solve-button');
  const sync = () => { submit.disabled = field.value.trim() === ''; };
  field.addEventListener('input', sync);
  form.addEventListener('submit', () => {
    submit.disabled = true;
    document.getElementById('processing').style.display = 'block';
  });
  sync();
"""


def render_header() -> str:
    return (
        '<header><div class="bar">'
        f'<strong>&#10024; {APP_NAME}</strong>'
        '<nav><a href="https://github.com" target="_blank" rel="noopener noreferrer">GitHub</a></nav>'
        '</div></header>'
    )


def render_footer(year: Optional[int] = None) -> str:
    year = year or date.today().year
    return (
        '<footer><div class="bar">'
        f'<span>&copy; {year} {APP_NAME}. All rights reserved.</span>'
        '<span>Terms &middot; Privacy &middot; Help</span>'
        '</div></footer>'
    )


def render_math_input(value: str = "") -> str:
    """Textarea form plus the example shortcuts.

    Examples are plain links that reload the page with the textarea
    pre-filled, so they work without JavaScript.
    """
    disabled = "" if value.strip() else " disabled"
    examples = "".join(
        f'<a href="/?input={quote(example)}">{escape(example)}</a>'
        for example in EXAMPLE_INPUTS
    )
    return (
        '<div class="narrow">'
        '<div class="chip">Enter a math problem</div>'
        '<h2>What would you like to solve?</h2>'
        '<form id="solve-form" method="post" action="/solve">'
        f'<textarea id="expression" name="expression" placeholder="{escape(PLACEHOLDER)}">'
        f'{escape(value)}</textarea>'
        f'<button id="solve-button" type="submit"{disabled}>Solve &rarr;</button>'
        '</form>'
        '<div class="examples"><p>Try these examples:</p>'
        f'{examples}</div>'
        '</div>'
    )


def render_math_result(result: MathResult) -> str:
    """Type chip, status badge, original problem, numbered steps and the answer."""
    if result.is_success:
        badge = '<span class="chip ok">&#10003; Solved</span>'
    else:
        badge = '<span class="chip warn">&#9888; Incomplete</span>'

    steps = "".join(f"<li>{escape(step)}</li>" for step in result.steps)

    parts = [
        '<div class="narrow result">',
        f'<div class="bar"><span class="chip">{result.type_label}</span>{badge}</div>',
        '<h3>Original Problem</h3>',
        f'<div class="card"><code>{escape(result.original_expression)}</code></div>',
        '<h3>Solution Steps</h3>',
        f'<div class="card"><ol class="steps">{steps}</ol></div>',
    ]
    if result.is_success:
        parts.append('<h3>Final Answer</h3>')
        parts.append(f'<div class="card answer">{escape(str(result.solution))}</div>')
    parts.append('</div>')
    return "".join(parts)


def render_features() -> str:
    cards = "".join(
        f'<div class="card"><div>{icon}</div><h3>{escape(title)}</h3><p>{escape(text)}</p></div>'
        for icon, title, text in FEATURES
    )
    return (
        '<section><h2 style="text-align:center">Why Use Algebra Genius?</h2>'
        f'<div class="features">{cards}</div></section>'
    )


def render_history(history: list) -> str:
    """Recent Solutions: every entry except the newest, which is already shown."""
    if not history:
        return ""
    rows = "".join(
        '<div class="card history">'
        f'<a href="/history/{index}"><code>{escape(item.original_expression)}</code>'
        f'<span class="chip">{"Equation" if item.type == EQUATION else "Expression"}</span></a>'
        '</div>'
        for index, item in enumerate(history)
        if index > 0
    )
    return f'<section><h2>Recent Solutions</h2>{rows}</section>'


def render_notice(notice: Optional[tuple]) -> str:
    """Render a ``(kind, title, description)`` notice; kind is success or error."""
    if not notice:
        return ""
    kind, title, description = notice
    return (
        f'<div class="notice {escape(kind)}"><strong>{escape(title)}</strong>'
        f'<div>{escape(description)}</div></div>'
    )


def render_page(result: Optional[MathResult] = None, history: Optional[list] = None,
                input_value: str = "", notice: Optional[tuple] = None) -> str:
    """Compose the whole page."""
    result_html = render_math_result(result) if result is not None else ""
    return (
        '<!doctype html>\n'
        '<html lang="en"><head><meta charset="utf-8" />'
        '<meta name="viewport" content="width=device-width, initial-scale=1" />'
        f'<title>{APP_NAME}</title><style>{_STYLE}</style></head><body>'
        f'{render_header()}'
        '<main><section class="hero">'
        '<div class="chip">Algebra made simple</div>'
        '<h1>Solve math problems with AI precision</h1>'
        '<p>Get step-by-step solutions for algebra equations, expressions, '
        'and more with our powerful math solving engine.</p>'
        f'{render_notice(notice)}'
        f'{render_math_input(input_value)}'
        '<div id="processing" class="notice">Solving your problem...</div>'
        f'{result_html}'
        '</section>'
        f'{render_features()}'
        f'{render_history(history or [])}'
        '</main>'
        f'{render_footer()}'
        f'<script>{_SCRIPT}</script>'
        '</body></html>'
    )
