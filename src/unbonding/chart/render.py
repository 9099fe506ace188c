"""Static bar chart rendering via matplotlib.

Styling is passed in explicitly as a ChartStyle; rcParams are only
overridden inside a scoped rc_context and pyplot is never used. The
figure background is filled solid so the exported PNG stays readable
outside a dark viewer.
"""

import io
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path

from matplotlib import rc_context
from matplotlib.figure import Figure

from unbonding.config import ChartSettings
from unbonding.exceptions import ChartRenderError
from unbonding.logging import get_logger
from unbonding.models import ChartSeries

logger = get_logger(__name__)

DPI = 100


@dataclass(frozen=True)
class ChartStyle:
    """Visual configuration for the unbonding chart."""

    title: str = "SCRT Unbonding"
    width: int = 800  # pixels
    height: int = 400  # pixels
    background_color: str = "#2d2e2f"
    text_color: str = "white"
    font_weight: int = 500
    grid_color: str = "#1f1f1f"
    bar_color: str = "#007bff80"
    bar_edge_color: str = "#007bff"
    bar_edge_width: float = 1.0
    title_size: int = 24
    subtitle_size: int = 16
    y_tick_size: int = 16

    @classmethod
    def from_settings(cls, settings: ChartSettings) -> "ChartStyle":
        return cls(
            title=settings.title,
            width=settings.width,
            height=settings.height,
            background_color=settings.background_color,
            text_color=settings.text_color,
            grid_color=settings.grid_color,
            bar_color=settings.bar_color,
            bar_edge_color=settings.bar_edge_color,
        )


def format_total_label(total: float, denom: str) -> str:
    """Format the chart subtitle, e.g. "Total: 1,234,568 SCRT".

    Rounds half up, matching how the total is shown to people.
    """
    rounded = Decimal(str(total)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return f"Total: {int(rounded):,} {denom}"


def _build_figure(series: ChartSeries, total_label: str, style: ChartStyle) -> Figure:
    fig = Figure(
        figsize=(style.width / DPI, style.height / DPI),
        dpi=DPI,
        facecolor=style.background_color,
        layout="tight",
    )
    ax = fig.add_subplot()
    ax.set_facecolor(style.background_color)

    positions = list(range(len(series)))
    ax.bar(
        positions,
        series.values,
        color=style.bar_color,
        edgecolor=style.bar_edge_color,
        linewidth=style.bar_edge_width,
    )
    ax.set_xticks(positions, series.labels)
    ax.set_ylim(bottom=0)

    ax.grid(True, color=style.grid_color)
    ax.set_axisbelow(True)
    for spine in ax.spines.values():
        spine.set_color(style.grid_color)

    ax.tick_params(axis="x", colors=style.text_color)
    ax.tick_params(axis="y", colors=style.text_color, labelsize=style.y_tick_size)

    fig.suptitle(
        style.title,
        color=style.text_color,
        fontsize=style.title_size,
        fontweight=style.font_weight,
    )
    ax.set_title(
        total_label,
        color=style.text_color,
        fontsize=style.subtitle_size,
        fontweight=style.font_weight,
        pad=10,
    )
    return fig


def render(
    series: ChartSeries,
    total_label: str,
    output_path: str | Path,
    style: ChartStyle | None = None,
) -> Path:
    """Render the series as a single bar chart PNG.

    The image is rendered fully in memory before the file is touched, so a
    rendering failure never leaves a truncated chart behind.

    Raises:
        ChartRenderError: If rendering or writing the image fails.
    """
    style = style or ChartStyle()
    path = Path(output_path)

    try:
        # tick labels are created at draw time
        with rc_context({"font.weight": style.font_weight}):
            fig = _build_figure(series, total_label, style)
            buffer = io.BytesIO()
            fig.savefig(buffer, format="png", facecolor=style.background_color)
        path.write_bytes(buffer.getvalue())
    except (OSError, ValueError, RuntimeError) as e:
        raise ChartRenderError(f"Failed to render chart to {path}: {e}") from e

    logger.info("chart_saved", path=str(path), bars=len(series))
    return path
