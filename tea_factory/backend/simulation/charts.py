"""
History Charts

Renders a batch history as a 2x2 PNG dashboard:
- Temperature vs time
- Moisture vs time
- Aroma and color vs time
- Quality score with GOOD / OK thresholds

Uses the object-oriented Figure API; pyplot is never imported.
"""

from typing import BinaryIO, Union

from matplotlib.figure import Figure

from .history import BatchHistory
from .physics.quality import GOOD_THRESHOLD, OK_THRESHOLD


def render_history(history: BatchHistory, target: Union[str, BinaryIO],
                   title: str = "Tea Batch", dpi: int = 100) -> None:
    """
    Draw history to a PNG file path or binary buffer.

    Args:
        history: Samples to plot (may be empty)
        target: Output path or writable binary stream
        title: Figure title
        dpi: Output resolution
    """
    time_data = history.series('elapsed_seconds')

    fig = Figure(figsize=(12, 8))
    fig.suptitle(title, fontsize=14, fontweight='bold')
    axes = fig.subplots(2, 2)

    # Plot 1: Temperature vs Time
    axes[0, 0].plot(time_data, history.series('temperature_c'), 'r-', linewidth=2, label='Temperature')
    axes[0, 0].set_xlabel('Time (s)')
    axes[0, 0].set_ylabel('Temperature (°C)')
    axes[0, 0].set_title('Leaf Temperature')
    axes[0, 0].grid(True, alpha=0.3)
    axes[0, 0].legend()

    # Plot 2: Moisture vs Time
    axes[0, 1].plot(time_data, history.series('moisture'), 'b-', linewidth=2, label='Moisture')
    axes[0, 1].set_xlabel('Time (s)')
    axes[0, 1].set_ylabel('Moisture (fraction)')
    axes[0, 1].set_ylim([0.0, 1.0])
    axes[0, 1].set_title('Moisture')
    axes[0, 1].grid(True, alpha=0.3)
    axes[0, 1].legend()

    # Plot 3: Aroma / Color
    axes[1, 0].plot(time_data, history.series('aroma'), 'g-', linewidth=2, label='Aroma')
    axes[1, 0].plot(time_data, history.series('color'), 'y-', linewidth=2, label='Color')
    axes[1, 0].set_xlabel('Time (s)')
    axes[1, 0].set_ylabel('Index (0-100)')
    axes[1, 0].set_ylim([0.0, 100.0])
    axes[1, 0].set_title('Aroma / Color')
    axes[1, 0].grid(True, alpha=0.3)
    axes[1, 0].legend()

    # Plot 4: Quality
    axes[1, 1].plot(time_data, history.series('quality_score'), 'k-', linewidth=2, label='Quality')
    axes[1, 1].axhline(y=GOOD_THRESHOLD, color='g', linestyle='--', label='GOOD')
    axes[1, 1].axhline(y=OK_THRESHOLD, color='orange', linestyle='--', label='OK')
    axes[1, 1].set_xlabel('Time (s)')
    axes[1, 1].set_ylabel('Score')
    axes[1, 1].set_ylim([0.0, 100.0])
    axes[1, 1].set_title('Quality Score')
    axes[1, 1].grid(True, alpha=0.3)
    axes[1, 1].legend()

    fig.tight_layout()
    fig.savefig(target, format='png', dpi=dpi)
