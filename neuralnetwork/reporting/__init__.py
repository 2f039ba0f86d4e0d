"""Reporting utilities for training runs."""

from .metrics import CsvSink, JsonlSink
from .plots import PlotAdapter
from .summary import format_fold, format_summary

__all__ = ["CsvSink", "JsonlSink", "PlotAdapter", "format_fold", "format_summary"]
