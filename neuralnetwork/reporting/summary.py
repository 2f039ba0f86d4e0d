"""Text summaries of fold and cross-validation statistics."""

from __future__ import annotations

from typing import List, Mapping, Tuple

_LABELS = (
    ("tp", "True Positives"),
    ("fp", "False Positives"),
    ("tn", "True Negatives"),
    ("fn", "False Negatives"),
    ("precision", "Precision"),
    ("recall", "Recall"),
    ("f1", "F1"),
)


def format_fold(metrics: Mapping[str, float]) -> List[str]:
    """Return one ``<Label> <value>`` line per confusion statistic."""

    lines = []
    for key, label in _LABELS:
        value = metrics[key]
        if key in {"tp", "fp", "tn", "fn"}:
            lines.append(f"{label} {int(value)}")
        else:
            lines.append(f"{label} {value:.6f}")
    return lines


def format_summary(stats: Mapping[str, Tuple[float, float]]) -> List[str]:
    """Return ``Overall Statistics`` followed by ``<Label> mean (variance)`` lines."""

    lines = ["Overall Statistics"]
    for key, label in _LABELS:
        mean, variance = stats[key]
        lines.append(f"{label} {mean:.6f} ({variance:.6f})")
    return lines


__all__ = ["format_fold", "format_summary"]
