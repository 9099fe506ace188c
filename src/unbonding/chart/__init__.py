"""Unbonding chart -- date bucketing, series building and matplotlib rendering."""

from unbonding.chart.builder import ChartBuilder, bucket_by_date, to_chart_series
from unbonding.chart.render import ChartStyle, format_total_label, render

__all__ = [
    "ChartBuilder",
    "ChartStyle",
    "bucket_by_date",
    "format_total_label",
    "render",
    "to_chart_series",
]
