"""Human-readable summaries of a draw plan and its results."""

from __future__ import annotations

from collections import Counter
from datetime import date as date_type
from typing import Iterable, Optional, Sequence

from ..records import DrawingGroup

DEFAULT_RESULTS_TITLE = "[AP Systems Executive Golf Pairings]"


def describe_distribution(sizes: Sequence[int]) -> str:
    """Summarize a plan as ``"3-person x1, 2-person x2"``, largest size first."""
    counts = Counter(sizes)
    return ", ".join(
        f"{size}-person x{counts[size]}" for size in sorted(counts, reverse=True)
    )


def format_results(
    groups: Iterable[DrawingGroup],
    *,
    title: str = DEFAULT_RESULTS_TITLE,
    on_date: Optional[date_type] = None,
) -> str:
    """Render the final groups as shareable plain text.

    Parameters
    ----------
    groups : Iterable[DrawingGroup]
        Groups in draw order.
    title : str
        Heading line.
    on_date : Optional[date], default: None
        Date printed at the bottom. Today's date is used when omitted.
    """

    on_date = on_date or date_type.today()
    lines = [title, ""]
    lines.extend(f"Group {group.id}: {', '.join(group.members)}" for group in groups)
    lines.extend(["", f"Date: {on_date.isoformat()}"])
    return "\n".join(lines)


__all__ = ["DEFAULT_RESULTS_TITLE", "describe_distribution", "format_results"]
