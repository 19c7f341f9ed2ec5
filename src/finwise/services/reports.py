"""Chart rendering for the monthly analysis."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Sequence

from markupsafe import Markup, escape
from matplotlib.figure import Figure

from .analysis import PIE_CENTER_X, PIE_CENTER_Y, PIE_RADIUS, CategoryBreakdownEntry, PieSegment

# Spans this close to a full turn start and end on the same point, which SVG
# draws as nothing; those are rendered as a circle instead.
_FULL_TURN_EPSILON = 1e-6


def render_pie_svg(segments: Sequence[PieSegment], *, size: int = 200) -> Markup:
    """Return inline SVG markup drawing ``segments`` as filled wedges."""

    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 200 200" '
        f'width="{int(size)}" height="{int(size)}" role="img" aria-label="Expenses by category">'
    ]
    if not segments:
        parts.append(
            f'<circle cx="{PIE_CENTER_X}" cy="{PIE_CENTER_Y}" r="{PIE_RADIUS}" '
            'fill="none" stroke="#e5e7eb" stroke-width="2"/>'
        )
    for segment in segments:
        span = segment.end_angle - segment.start_angle
        if span >= 360 - _FULL_TURN_EPSILON:
            parts.append(
                f'<circle cx="{PIE_CENTER_X}" cy="{PIE_CENTER_Y}" r="{PIE_RADIUS}" '
                f'fill="{escape(segment.color)}"/>'
            )
        elif span > 0:
            parts.append(
                f'<path d="{escape(segment.path)}" fill="{escape(segment.color)}" '
                'stroke="#ffffff" stroke-width="1"/>'
            )
    parts.append("</svg>")
    return Markup("".join(parts))


def build_spending_chart(
    breakdown: Sequence[CategoryBreakdownEntry],
    *,
    title: str = "Spending by Category",
    currency_symbol: str = "$",
) -> Figure:
    """Create a matplotlib donut chart of an expense breakdown.

    Wedge colours come from the category catalog so the PNG matches the inline SVG.
    """

    fig = Figure(figsize=(8, 5))
    ax = fig.subplots()

    amounts = [entry.amount for entry in breakdown if entry.amount > 0]
    if amounts:
        shown = [entry for entry in breakdown if entry.amount > 0]
        total = sum(amounts)
        wedges, _ = ax.pie(
            amounts,
            colors=[entry.color for entry in shown],
            startangle=90,
            counterclock=False,
            wedgeprops={"width": 0.45, "edgecolor": "white", "linewidth": 1.5},
        )
        ax.text(0, 0.08, "Total", ha="center", va="center", fontsize=10, color="#666")
        ax.text(
            0,
            -0.08,
            f"{currency_symbol}{total:,.2f}",
            ha="center",
            va="center",
            fontsize=14,
            fontweight="bold",
            color="#1F2937",
        )
        ax.legend(
            wedges,
            [f"{entry.name}: {currency_symbol}{entry.amount:,.2f} ({entry.percentage:.1f}%)" for entry in shown],
            title="Categories",
            loc="center left",
            bbox_to_anchor=(1.0, 0.5),
            fontsize=9,
        )
        ax.axis("equal")
    else:
        ax.text(0.5, 0.5, "No expense data", ha="center", va="center", fontsize=14, color="#666")
        ax.axis("off")

    ax.set_title(title, fontsize=14, fontweight="bold")
    fig.tight_layout()
    return fig


def spending_png_bytes(breakdown: Sequence[CategoryBreakdownEntry], **chart_kwargs) -> bytes:
    """Render the donut chart to PNG bytes for streaming over HTTP."""

    fig = build_spending_chart(breakdown, **chart_kwargs)
    buffer = io.BytesIO()
    fig.savefig(buffer, format="png", bbox_inches="tight", dpi=120)
    return buffer.getvalue()


def export_spending_png(
    breakdown: Sequence[CategoryBreakdownEntry],
    *,
    output_path: Path,
    **chart_kwargs,
) -> Path:
    """Render the donut chart to ``output_path`` and return the path."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(spending_png_bytes(breakdown, **chart_kwargs))
    return output_path
