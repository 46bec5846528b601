"""
Productivity data model: per-contributor commit-activity series and chart errors.
The dataset is supplied by the caller; nothing here fetches or parses repositories.
"""

from productivity.errors import (
    ChartError,
    DomainDegenerateError,
    EmptySeriesError,
    UnknownContributorError,
)
from productivity.series import (
    ALL_CONTRIBUTORS,
    Series,
    as_series,
    combine_series,
    get_series,
    heading_for,
    normalize_dataset,
    plot_order,
    with_all_contributors,
)

__all__ = [
    "ALL_CONTRIBUTORS",
    "ChartError",
    "DomainDegenerateError",
    "EmptySeriesError",
    "Series",
    "UnknownContributorError",
    "as_series",
    "combine_series",
    "get_series",
    "heading_for",
    "normalize_dataset",
    "plot_order",
    "with_all_contributors",
]
