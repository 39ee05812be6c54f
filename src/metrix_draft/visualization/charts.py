"""
Plotly Chart Generators

Generates the draft wheel and its companion charts.
All charts return HTML strings for embedding or standalone use.
"""

import math
import random
from collections.abc import Sequence

import plotly.graph_objects as go

from metrix_draft.models.draft import WinnerEntry
from metrix_draft.models.participant import Participant
from metrix_draft.models.wheel import Segment


DARK_THEME = {
    "paper_bgcolor": "#1a1a2e",
    "plot_bgcolor": "#16213e",
    "font_color": "#e8e8e8",
    "gridcolor": "#2d3a4f",
    "colorway": [
        "#00d9ff",
        "#ff6b6b",
        "#4ecdc4",
        "#ffe66d",
        "#a855f7",
        "#f97316",
        "#10b981",
        "#ec4899",
        "#3b82f6",
        "#84cc16",
    ],
}


def random_color(rng: random.Random) -> str:
    """A vivid pastel colour for a wheel segment."""
    return f"hsl({rng.randrange(360)}, 70%, 60%)"


def _apply_dark_theme(fig: go.Figure) -> go.Figure:
    """Apply dark theme styling to a figure."""
    fig.update_layout(
        paper_bgcolor=DARK_THEME["paper_bgcolor"],
        plot_bgcolor=DARK_THEME["plot_bgcolor"],
        font={"color": DARK_THEME["font_color"], "family": "Inter, sans-serif"},
        colorway=DARK_THEME["colorway"],
        margin={"l": 60, "r": 40, "t": 60, "b": 60},
    )
    fig.update_xaxes(
        gridcolor=DARK_THEME["gridcolor"],
        linecolor=DARK_THEME["gridcolor"],
    )
    fig.update_yaxes(
        gridcolor=DARK_THEME["gridcolor"],
        linecolor=DARK_THEME["gridcolor"],
    )
    return fig


def pie_rotation_degrees(rotation: float) -> float:
    """
    Convert a wheel rotation to plotly's pie rotation.

    The wheel measures clockwise from three o'clock; plotly starts the first
    slice at twelve o'clock and also turns clockwise.
    """
    return (math.degrees(rotation) + 90) % 360


def wheel_figure(
    segments: Sequence[Segment], rotation: float, title: str = "Draft Wheel"
) -> go.Figure:
    """
    Build the wheel as a plotly pie, turned by rotation radians.

    Args:
        segments: Wheel segments
        rotation: Current wheel rotation in radians
        title: Chart title

    Returns:
        Plotly figure
    """
    colors = [s.participant.color for s in segments]
    if not all(colors):
        colors = None

    fig = go.Figure(
        go.Pie(
            labels=[s.participant.name for s in segments],
            values=[s.span for s in segments],
            customdata=[s.participant.weight for s in segments],
            marker={
                "colors": colors,
                "line": {"color": "#000000", "width": 1},
            },
            sort=False,
            direction="clockwise",
            rotation=pie_rotation_degrees(rotation),
            textinfo="label",
            textposition="inside",
            insidetextorientation="radial",
            hovertemplate="<b>%{label}</b><br>Tickets: %{customdata}<br>%{percent}<extra></extra>",
        )
    )

    # Fixed pointer at twelve o'clock
    fig.add_annotation(
        x=0.5,
        y=1.02,
        xref="paper",
        yref="paper",
        text="▼",
        showarrow=False,
        font={"size": 28, "color": "#ffffff"},
    )

    fig.update_layout(
        title={"text": title, "x": 0.5, "xanchor": "center"},
        height=600,
        showlegend=False,
    )

    _apply_dark_theme(fig)
    return fig


def wheel_chart(
    segments: Sequence[Segment], rotation: float, title: str = "Draft Wheel"
) -> str:
    """
    Create the wheel chart.

    Args:
        segments: Wheel segments
        rotation: Current wheel rotation in radians
        title: Chart title

    Returns:
        HTML string containing the chart
    """
    if not segments:
        return "<div>All players picked</div>"

    fig = wheel_figure(segments, rotation, title)
    return fig.to_html(full_html=False, include_plotlyjs="cdn")


def tickets_chart(participants: Sequence[Participant], title: str = "Tickets") -> str:
    """
    Create a horizontal bar chart of tickets per participant.

    Unrated participants are listed with zero tickets.
    """
    if not participants:
        return "<div>No participants</div>"

    names = [p.name for p in reversed(participants)]
    tickets = [p.weight or 0 for p in reversed(participants)]
    colors = [
        (p.color or "#00d9ff") if p.active else "#4b5563" for p in reversed(participants)
    ]
    hover = [
        f"Score: {p.raw_score:g}<br>Rated: {p.derived_rating}<br>Prior: {p.baseline_rating or 'unknown'}"
        for p in reversed(participants)
    ]

    fig = go.Figure(
        go.Bar(
            y=names,
            x=tickets,
            orientation="h",
            marker_color=colors,
            text=[f"{t} tix" for t in tickets],
            textposition="inside",
            hovertext=hover,
            hovertemplate="<b>%{y}</b><br>%{hovertext}<extra></extra>",
        )
    )

    fig.update_layout(
        title={"text": title, "x": 0.5, "xanchor": "center"},
        xaxis_title="Tickets",
        height=max(400, len(participants) * 30),
        showlegend=False,
    )

    _apply_dark_theme(fig)
    return fig.to_html(full_html=False, include_plotlyjs="cdn")


def winners_chart(winners: Sequence[WinnerEntry], title: str = "Draft Order") -> str:
    """Create a bar chart of winners in pick order with their tickets."""
    if not winners:
        return "<div>No winners yet</div>"

    labels = [f"{w.pick_number}. {w.name}" for w in reversed(winners)]
    tickets = [w.tickets for w in reversed(winners)]

    fig = go.Figure(
        go.Bar(
            y=labels,
            x=tickets,
            orientation="h",
            marker_color="#10b981",
            text=[f"Tickets: {t}" for t in tickets],
            textposition="inside",
        )
    )

    fig.update_layout(
        title={"text": title, "x": 0.5, "xanchor": "center"},
        xaxis_title="Tickets",
        height=max(300, len(winners) * 35),
        showlegend=False,
    )

    _apply_dark_theme(fig)
    return fig.to_html(full_html=False, include_plotlyjs="cdn")


class PlotlyWheelSink:
    """
    Rendering sink that keeps the latest wheel frame and the winners.

    Frames are stored, not rendered; html() renders the latest one.
    """

    def __init__(self, title: str = "Draft Wheel"):
        self.title = title
        self.frames = 0
        self.segments: list[Segment] = []
        self.rotation = 0.0
        self.winners: list[Participant] = []

    def render_frame(self, segments: Sequence[Segment], rotation: float) -> None:
        self.frames += 1
        self.segments = list(segments)
        self.rotation = rotation

    def render_winner(self, winner: Participant) -> None:
        self.winners.append(winner)

    def html(self) -> str:
        return wheel_chart(self.segments, self.rotation, self.title)


def generate_draft_page(
    wheel_html: str,
    tickets_html: str,
    winners_html: str,
    title: str = "Draft Wheel",
) -> str:
    """
    Generate a standalone HTML page with the wheel, tickets and draft order.

    Args:
        wheel_html: Wheel chart HTML
        tickets_html: Tickets chart HTML
        winners_html: Winners chart HTML
        title: Page title

    Returns:
        Complete HTML page as string
    """
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <script src="https://cdn.plot.ly/plotly-latest.min.js"></script>
    <style>
        * {{
            box-sizing: border-box;
            margin: 0;
            padding: 0;
        }}

        body {{
            font-family: 'Inter', -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            background: linear-gradient(135deg, #0f0c29 0%, #1a1a2e 50%, #16213e 100%);
            color: #e8e8e8;
            min-height: 100vh;
            padding: 20px;
        }}

        .header {{
            text-align: center;
            padding: 30px 20px;
            margin-bottom: 30px;
        }}

        .header h1 {{
            font-size: 2.5rem;
            color: #00d9ff;
        }}

        .row {{
            display: grid;
            grid-template-columns: repeat(auto-fit, minmax(500px, 1fr));
            gap: 30px;
            max-width: 1600px;
            margin: 0 auto;
        }}

        .chart-section {{
            background: rgba(255, 255, 255, 0.03);
            border-radius: 16px;
            padding: 20px;
            border: 1px solid rgba(255, 255, 255, 0.1);
        }}

        .chart-section h2 {{
            font-size: 1.3rem;
            margin-bottom: 15px;
            color: #00d9ff;
        }}
    </style>
</head>
<body>
    <div class="header">
        <h1>{title}</h1>
    </div>

    <div class="row">
        <section id="wheel" class="chart-section">
            <h2>Wheel</h2>
            {wheel_html}
        </section>

        <section id="winners" class="chart-section">
            <h2>Draft Order</h2>
            {winners_html}
        </section>
    </div>

    <div class="row">
        <section id="tickets" class="chart-section">
            <h2>Tickets</h2>
            {tickets_html}
        </section>
    </div>
</body>
</html>"""
