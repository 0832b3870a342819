import os
from typing import List, Optional

import matplotlib

matplotlib.use("Agg")  # Must be set before importing pyplot
import matplotlib.pyplot as plt  # noqa: E402

from acp.models import Active, Instance, Schedule  # noqa: E402


def _ensure_dir(path: str):
    if path:
        os.makedirs(path, exist_ok=True)


def plot_production_timeline(
    schedule: Schedule,
    instance: Instance,
    save_path: str,
    show_legend: Optional[bool] = None,
) -> str:
    """Draw the production timeline of a schedule and save it.

    One bar per active period on the row of its product; a marker on the
    same row shows the due date of the item produced there, so earliness is
    the gap between bar and marker.

    Returns:
        Path of the written PNG file.
    """
    m = instance.num_products
    n = instance.num_periods
    due_dates = [due for dates in instance.due_dates_per_product for due in dates]
    fig, ax = plt.subplots(
        figsize=(min(10 + n * 0.1, 18), min(0.5 * m + 2, 16)),
        constrained_layout=True,
    )
    cmap = plt.get_cmap("tab20")
    for period, (item, product) in enumerate(zip(schedule.items, schedule.products)):
        if not isinstance(product, Active):
            continue
        row = product.product
        ax.barh(
            row,
            1,
            left=period,
            height=0.8,
            color=cmap(row % 20),
            alpha=0.85,
            edgecolor="black",
            linewidth=0.6,
        )
        ax.plot(due_dates[item] + 0.5, row, marker="v", color="black", markersize=4)
    ax.set_xlabel("Period", fontsize=12)
    ax.set_ylabel("Product", fontsize=12)
    ax.set_title(
        f"Production plan - cost = {schedule.objective} "
        f"(inventory {schedule.inventory_cost}, transitions {schedule.transition_cost})",
        fontsize=13,
        fontweight="bold",
    )
    ax.set_yticks(range(m))
    ax.set_yticklabels([f"P{i}" for i in range(m)])
    ax.set_xlim(0, n)
    ax.set_ylim(-0.5, m - 0.5)
    ax.grid(True, alpha=0.25, axis="x", linestyle="--", linewidth=0.7)

    if show_legend is None:
        show_legend = m <= 40
    if show_legend:
        legend_elements = [
            plt.Rectangle(
                (0, 0), 1, 1, facecolor=cmap(i % 20), alpha=0.85, edgecolor="black", label=f"P{i}"
            )
            for i in range(m)
        ]
        ax.legend(
            handles=legend_elements,
            bbox_to_anchor=(1.02, 1),
            loc="upper left",
            borderaxespad=0.0,
            fontsize=8,
            frameon=False,
        )

    _ensure_dir(os.path.dirname(save_path))
    fig.savefig(save_path, dpi=180)
    plt.close(fig)
    return save_path


def plot_cost_progress(
    times_ms: List[int],
    costs: List[int],
    save_path: str,
) -> str:
    """Save the best-cost-over-time curve of one search run."""
    fig, ax = plt.subplots(figsize=(10, 6), constrained_layout=True)
    ax.step(times_ms, costs, where="post", color="tab:blue", linewidth=1.8, label="best cost")
    ax.scatter(times_ms, costs, color="tab:blue", s=12, zorder=3)
    if costs:
        ax.annotate(
            f"final: {costs[-1]}",
            xy=(times_ms[-1], costs[-1]),
            xytext=(10, 10),
            textcoords="offset points",
            fontsize=9,
        )
    ax.set_xlabel("Time [ms]", fontsize=12)
    ax.set_ylabel("Cost", fontsize=12)
    ax.set_title("Convergence", fontsize=14, fontweight="bold")
    ax.grid(True, alpha=0.3)
    ax.legend(loc="upper right", fontsize=9, frameon=False)
    _ensure_dir(os.path.dirname(save_path))
    fig.savefig(save_path, dpi=180)
    plt.close(fig)
    return save_path
