"""Headless-safe cost curve plotting."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List


class PlotAdapter:
    """Collect the cost of every iteration, one curve per cross-validation fold.

    Pass the adapter to the trainer as a callback (``on_step``) and to the
    driver as a sink (``on_fold``); the costs seen since the previous fold
    become that fold's curve.
    """

    def __init__(self, run_dir: str | Path, enable_plots: bool = False):
        self.enable_plots = enable_plots
        self.run_dir = Path(run_dir)
        self._pending: List[float] = []
        self._curves: Dict[str, List[float]] = {}
        if self.enable_plots:
            self.run_dir.mkdir(parents=True, exist_ok=True)

    def on_step(self, step: int, metrics):
        if not self.enable_plots:
            return
        self._pending.append(float(metrics.get("cost", 0.0)))

    def on_fold(self, fold: int, metrics) -> None:
        if self._pending:
            self._curves[f"fold {fold}"] = self._pending
        self._pending = []

    def curves(self) -> Dict[str, List[float]]:
        return {label: list(costs) for label, costs in self._curves.items()}

    def close(self) -> Path | None:
        curves = self.curves()
        if self._pending:
            curves["training"] = list(self._pending)
        if not self.enable_plots or not curves:
            return None
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt  # imported lazily for headless safety

        fig, ax = plt.subplots()
        for label, costs in curves.items():
            ax.plot(range(1, len(costs) + 1), costs, label=label)
        ax.set_xlabel("Iteration")
        ax.set_ylabel("Cost")
        ax.set_title("Training Cost")
        if len(curves) > 1:
            ax.legend()
        plot_path = self.run_dir / "cost.png"
        fig.savefig(plot_path)
        plt.close(fig)
        return plot_path
