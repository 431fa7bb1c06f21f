"""Helpers for splitting a participant count into ordered group sizes."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ALLOWED_TARGET_SIZES = (2, 3, 4)
"""Target sizes offered by the settings screen. Not enforced by the planner."""


def _validate_count(value: int, name: str) -> int:
    """Reject booleans and non-integers so ``True`` never plans as ``1``."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    return value


def plan_group_sizes(total: int, target_size: int, balanced: bool) -> list[int]:
    """Return the ordered group sizes for ``total`` participants.

    Parameters
    ----------
    total : int
        Number of participants to place. ``0`` yields an empty plan.
    target_size : int
        Preferred number of members per group. Must be positive.
    balanced : bool
        When ``True`` sizes are spread evenly (they differ by at most one and
        larger groups come first). When ``False`` groups are filled to
        ``target_size`` and any remainder forms one smaller trailing group.

    Returns
    -------
    list[int]
        Group sizes in draw order. The sizes always sum to ``total``.

    Raises
    ------
    ConfigurationError
        If ``target_size`` is not positive or ``total`` is negative.
    """

    total = _validate_count(total, "total")
    target_size = _validate_count(target_size, "target_size")
    if target_size <= 0:
        raise ConfigurationError(f"target_size must be positive, got {target_size}")
    if total < 0:
        raise ConfigurationError(f"total must not be negative, got {total}")

    if total == 0:
        return []

    if not balanced:
        full_groups, leftover = divmod(total, target_size)
        sizes = [target_size] * full_groups
        if leftover > 0:
            sizes.append(leftover)
    else:
        num_groups = -(-total // target_size)
        base, extra = divmod(total, num_groups)
        sizes = [base + 1 if idx < extra else base for idx in range(num_groups)]

    logger.debug(
        f"Planned {len(sizes)} groups for {total} participants "
        f"(target={target_size}, balanced={balanced}): {sizes}"
    )
    return sizes


@dataclass(frozen=True)
class GroupSizePolicy:
    """Caller-configured sizing policy.

    Attributes
    ----------
    target_size : int
        Preferred members per group.
    balanced : bool
        Whether to spread members evenly across groups.
    """

    target_size: int = 3
    balanced: bool = True

    def plan(self, total: int) -> list[int]:
        """Return :func:`plan_group_sizes` for ``total`` under this policy."""
        return plan_group_sizes(total, self.target_size, self.balanced)


__all__ = ["ALLOWED_TARGET_SIZES", "GroupSizePolicy", "plan_group_sizes"]
