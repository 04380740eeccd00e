"""
Plotly charts of recommendation match percentages.

Returns Plotly JSON for client-side rendering.
"""

from __future__ import annotations

from typing import Dict, Optional

import plotly.graph_objects as go

from ..core.ranking import RecommendationResult

# Human-readable labels for categories
CATEGORY_LABELS: Dict[str, str] = {
    "web": "Web Development",
    "photo": "Photography",
    "cinema": "Video & Film",
    "automation": "Automation",
    "ai": "AI Solutions",
    "tech": "Tech Consulting",
}

DETAILED_COLOR = "#4A90D9"
SURFACED_COLOR = "rgba(74, 144, 217, 0.35)"


def _label(category: str) -> str:
    return CATEGORY_LABELS.get(category, category.replace("_", " ").title())


def create_match_chart(
    result: RecommendationResult,
    title: str = "Your Service Match",
) -> str:
    """
    Horizontal bar chart of the surfaced recommendations.

    Entries qualifying for a detailed recommendation are drawn in the solid
    color; the rest are faded. A fallback result renders an empty chart.

    Returns:
        JSON string for Plotly.js rendering
    """
    # Reverse so the top match sits at the top of a horizontal bar chart
    entries = list(reversed(result.entries))

    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=[e.percentage for e in entries],
        y=[_label(e.category) for e in entries],
        orientation="h",
        marker=dict(
            color=[DETAILED_COLOR if e.is_detailed else SURFACED_COLOR for e in entries],
        ),
        hovertemplate="%{y}: %{x:.0f}% match<extra></extra>",
        name="Match",
    ))

    fig.update_layout(
        xaxis=dict(range=[0, 100], ticksuffix="%", gridcolor="rgba(200, 200, 200, 0.3)"),
        yaxis=dict(automargin=True),
        showlegend=False,
        title=dict(text=title, x=0.5, font=dict(size=16)),
        paper_bgcolor="rgba(0, 0, 0, 0)",
        plot_bgcolor="rgba(0, 0, 0, 0)",
        margin=dict(t=60, b=40, l=40, r=40),
        height=max(200, 60 * len(entries) + 100),
        width=500,
    )

    return fig.to_json()


def create_match_radar(
    result: RecommendationResult,
    title: Optional[str] = None,
) -> str:
    """
    Radar chart of every category's percentage, including filtered ones.

    Returns:
        JSON string for Plotly.js rendering
    """
    categories = list(result.percentages.keys())
    labels = [_label(c) for c in categories]
    values = [result.percentages[c] for c in categories]

    # Close the polygon
    labels_closed = labels + labels[:1]
    values_closed = values + values[:1]

    fig = go.Figure()
    fig.add_trace(go.Scatterpolar(
        r=values_closed,
        theta=labels_closed,
        fill="toself",
        name="Match",
        line=dict(color=DETAILED_COLOR, width=2),
        fillcolor="rgba(74, 144, 217, 0.25)",
        hovertemplate="%{theta}: %{r:.0f}%<extra></extra>",
    ))

    # Mark the primary category
    if not result.is_fallback and result.primary_category in result.percentages:
        fig.add_trace(go.Scatterpolar(
            r=[result.percentages[result.primary_category]],
            theta=[_label(result.primary_category)],
            mode="markers",
            name="Primary",
            marker=dict(color="#E74C3C", size=12, symbol="diamond"),
            hovertemplate="%{theta}: %{r:.0f}% (primary)<extra></extra>",
        ))

    top = max(values) if values else 0.0
    fig.update_layout(
        polar=dict(
            radialaxis=dict(
                visible=True,
                range=[0, max(50.0, top)],
                gridcolor="rgba(200, 200, 200, 0.3)",
            ),
            angularaxis=dict(gridcolor="rgba(200, 200, 200, 0.3)"),
            bgcolor="rgba(0, 0, 0, 0)",
        ),
        showlegend=True,
        legend=dict(orientation="h", yanchor="bottom", y=-0.15, xanchor="center", x=0.5),
        title=dict(text=title or "Category Breakdown", x=0.5, font=dict(size=16)),
        paper_bgcolor="rgba(0, 0, 0, 0)",
        margin=dict(t=60, b=60, l=60, r=60),
        height=450,
        width=500,
    )

    return fig.to_json()
