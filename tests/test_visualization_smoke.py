"""Smoke test: charts are rendered to PNG files without a display."""

from acp.decoder import decode_schedule
from acp.parser import parse_instance
from acp.visualization import plot_cost_progress, plot_production_timeline


def test_charts_written(tmp_path) -> None:
    inst = parse_instance("4\n2\n0 1 0 1\n0 0 1 0\n3\n0 5\n7 0\n")
    sched = decode_schedule(inst, [3, 0, 2, 1])
    plan = plot_production_timeline(sched, inst, save_path=str(tmp_path / "out" / "plan.png"))
    progress = plot_cost_progress([0, 5, 12], [21, 15, 12], save_path=str(tmp_path / "p.png"))
    assert (tmp_path / "out" / "plan.png").stat().st_size > 0
    assert (tmp_path / "p.png").stat().st_size > 0
    assert plan.endswith("plan.png")
    assert progress.endswith("p.png")
