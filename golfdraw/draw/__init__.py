"""Group planning and the random pairing draw."""

from .planner import ALLOWED_TARGET_SIZES, GroupSizePolicy, plan_group_sizes
from .sequencer import DrawSequencer, DrawState, draw_all
from .summary import describe_distribution, format_results

__all__ = [
    "ALLOWED_TARGET_SIZES",
    "DrawSequencer",
    "DrawState",
    "GroupSizePolicy",
    "describe_distribution",
    "draw_all",
    "format_results",
    "plan_group_sizes",
]
