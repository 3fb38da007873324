"""
visualization.py
─────────────────────────────────────────────────────────────────────────────
Picks a chart for a query result and renders it as Plotly JSON.

Question / result → Chart mapping
  trend / over time                 → Line chart
  count / group                     → Bar chart
  distribution (+ numeric column)   → Pie chart (first 10 rows)
  > 2 columns, >= 2 of them numeric → Bar chart
  anything else                     → no chart (table only)
  radar                             → only when requested explicitly
─────────────────────────────────────────────────────────────────────────────
"""

import plotly.graph_objects as go
from typing import List, Optional
from src.ask_your_data.config import settings
from src.ask_your_data.core.values import as_number, is_empty, render_text, to_number_or_zero
from src.ask_your_data.models import Row
from src.ask_your_data.utils.exceptions import VisualizationError
from src.ask_your_data.utils.logger import get_logger

logger = get_logger(__name__)

CHART_TYPES = ("table", "bar", "line", "pie", "radar")

# ── colour palette ────────────────────────────────────────────────────────────
COLORS = [
    "rgba(54, 162, 235, 0.8)",
    "rgba(255, 99, 132, 0.8)",
    "rgba(255, 205, 86, 0.8)",
    "rgba(75, 192, 192, 0.8)",
    "rgba(153, 102, 255, 0.8)",
    "rgba(255, 159, 64, 0.8)",
]
CLR_BG = "rgba(0,0,0,0)"

LAYOUT_BASE = dict(
    paper_bgcolor=CLR_BG,
    plot_bgcolor=CLR_BG,
    font=dict(size=13),
    margin=dict(l=60, r=40, t=70, b=80),
)

PIE_MAX_SLICES = 10
RADAR_MAX_AXES = 6
NUMERIC_SCAN_ROWS = 10


# ── chart selection ───────────────────────────────────────────────────────────
def _numeric_cols(rows: List[Row], scan_rows: Optional[int] = NUMERIC_SCAN_ROWS) -> list:
    """Columns whose cells all read as numbers (only the first `scan_rows` when set)."""
    scanned = rows[:scan_rows] if scan_rows else rows
    return [
        c for c in rows[0].keys()
        if all(not is_empty(r.get(c)) and as_number(r.get(c)) is not None for r in scanned)
    ]


def choose_chart_type(rows: List[Row], question: str) -> str:
    if not rows:
        return "table"

    q = question.lower()
    columns = list(rows[0].keys())
    numeric = _numeric_cols(rows, scan_rows=None)

    if "trend" in q or "over time" in q:
        return "line"
    if "count" in q or "group" in q:
        return "bar"
    if "distribution" in q and numeric:
        return "pie"
    if len(columns) > 2 and len(numeric) >= 2:
        return "bar"
    return "table"


# ── helpers ───────────────────────────────────────────────────────────────────
def _labels(rows: List[Row], numeric: list) -> list:
    columns = list(rows[0].keys())
    text_cols = [c for c in columns if c not in numeric]
    label_col = text_cols[0] if text_cols else columns[0]
    return [
        render_text(row.get(label_col)) if not is_empty(row.get(label_col)) else f"Row {i + 1}"
        for i, row in enumerate(rows)
    ]


def _apply_layout(fig: go.Figure, title: str, show_axes: bool = True) -> go.Figure:
    updates = dict(**LAYOUT_BASE, title=dict(text=title, font=dict(size=18)))
    if show_axes:
        updates["yaxis"] = dict(rangemode="tozero")
    fig.update_layout(**updates)
    return fig


def _title(question: str) -> str:
    suffix = "..." if len(question) > 50 else ""
    return f"Data Visualization - {question[:50]}{suffix}"


# ── chart builders ────────────────────────────────────────────────────────────
def _chart_series(rows: List[Row], chart_type: str, title: str) -> Optional[go.Figure]:
    numeric = _numeric_cols(rows)
    if not numeric:
        return None

    shown = rows[:settings.CHART_MAX_POINTS]
    labels = _labels(shown, numeric)

    fig = go.Figure()
    for i, col in enumerate(numeric[:3]):  # max 3 series for readability
        values = [to_number_or_zero(r.get(col)) for r in shown]
        if chart_type == "line":
            trace = go.Scatter(x=labels, y=values, name=col, mode="lines+markers",
                               line=dict(color=COLORS[i], shape="spline"))
        else:
            trace = go.Bar(x=labels, y=values, name=col, marker_color=COLORS[i])
        fig.add_trace(trace)

    return _apply_layout(fig, title)


def _chart_pie(rows: List[Row], title: str) -> Optional[go.Figure]:
    numeric = _numeric_cols(rows)
    columns = list(rows[0].keys())
    value_col = numeric[0] if numeric else (columns[1] if len(columns) > 1 else None)
    if value_col is None:
        return None

    shown = rows[:PIE_MAX_SLICES]
    fig = go.Figure(go.Pie(
        labels=_labels(shown, numeric),
        values=[to_number_or_zero(r.get(value_col)) for r in shown],
        marker=dict(colors=COLORS),
    ))
    return _apply_layout(fig, title, show_axes=False)


def _chart_radar(rows: List[Row], title: str) -> Optional[go.Figure]:
    axes = _numeric_cols(rows)[:RADAR_MAX_AXES]
    if not axes:
        return None

    averages = [
        sum(to_number_or_zero(r.get(col)) for r in rows) / len(rows)
        for col in axes
    ]
    fig = go.Figure(go.Scatterpolar(
        r=averages, theta=axes, fill="toself", name="Values",
        line=dict(color=COLORS[0]),
    ))
    return _apply_layout(fig, title, show_axes=False)


# ── PUBLIC ENTRY POINT ────────────────────────────────────────────────────────
def validate_chart_type(chart_type: Optional[str]) -> None:
    """Raise VisualizationError unless chart_type is None or a known chart."""
    if chart_type is not None and chart_type not in CHART_TYPES:
        raise VisualizationError(
            f"Unsupported chart type '{chart_type}'. Choose one of: {', '.join(CHART_TYPES)}."
        )


def generate_plotly_json(
    rows: List[Row], question: str = "", chart_type: Optional[str] = None
) -> Optional[str]:
    """
    Render result rows as a Plotly chart.

    Args:
        rows: Query result rows.
        question: The question that produced them; drives the automatic choice.
        chart_type: Explicit chart ('table', 'bar', 'line', 'pie', 'radar');
            chosen from the question and the data when omitted.

    Returns:
        Plotly figure JSON, or None when the result is better shown as a table.

    Raises:
        VisualizationError: If an unknown chart type is requested.
    """
    validate_chart_type(chart_type)

    if not rows:
        logger.info("Result is empty, skipping chart.")
        return None

    chart_type = chart_type or choose_chart_type(rows, question)
    if chart_type == "table":
        return None

    title = _title(question)
    try:
        if chart_type == "pie":
            fig = _chart_pie(rows, title)
        elif chart_type == "radar":
            fig = _chart_radar(rows, title)
        else:
            fig = _chart_series(rows, chart_type, title)

        if fig is None:
            logger.warning(f"No numeric data for a {chart_type} chart, no visualization generated.")
            return None

        logger.info(f"Visualization generated successfully (type={chart_type}).")
        return fig.to_json()

    except Exception as e:
        logger.error(f"Visualization generation failed: {e}", exc_info=True)
        return None
