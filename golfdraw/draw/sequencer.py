"""Group-by-group random draw of participants into planned groups."""

from __future__ import annotations

from enum import Enum
import logging
import random
from typing import Iterable, Optional, Sequence

from ..exceptions import InvariantViolation
from ..records import DrawingGroup

logger = logging.getLogger(__name__)


class DrawState(str, Enum):
    """Lifecycle of a :class:`DrawSequencer`.

    ``DRAWING`` only holds while :meth:`DrawSequencer.draw_next` samples a
    group; callers observe ``IDLE``, ``PENDING`` or ``FINALIZED``.
    """

    IDLE = "idle"
    DRAWING = "drawing"
    PENDING = "pending"
    FINALIZED = "finalized"


class DrawSequencer:
    """Draw participants into groups one group at a time.

    Every group is a uniform, no-replacement sample of the names still in the
    pool. A drawn group stays *pending* until the caller confirms it; the next
    group cannot be drawn before that. Confirming the last group finalizes the
    sequence, after which no further operation is allowed.

    The pool is kept as an indexable list with a shrinking live length: a
    drawn index is swapped to the end of the live region so removal is O(1).
    """

    def __init__(
        self,
        participant_names: Iterable[str],
        plan: Sequence[int],
        *,
        rng: Optional[random.Random] = None,
    ) -> None:
        """Create a sequencer for ``participant_names`` split per ``plan``.

        Parameters
        ----------
        participant_names : Iterable[str]
            Unique member names to distribute.
        plan : Sequence[int]
            Ordered positive group sizes, usually from
            :func:`golfdraw.draw.planner.plan_group_sizes`.
        rng : Optional[random.Random], default: None
            Random source. A fresh :class:`random.Random` is used when
            omitted; pass a seeded instance for reproducible draws.

        Raises
        ------
        InvariantViolation
            If names repeat, a size is not positive, or the plan does not sum
            to the number of participants.
        """

        names = list(participant_names)
        if len(set(names)) != len(names):
            raise InvariantViolation("Participant names must be unique")
        for name in names:
            if not isinstance(name, str):
                raise InvariantViolation(f"Participant name must be a string, got {name!r}")

        sizes = list(plan)
        for size in sizes:
            if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
                raise InvariantViolation(f"Group sizes must be positive integers, got {size!r}")
        if sum(sizes) != len(names):
            raise InvariantViolation(
                f"Plan sizes sum to {sum(sizes)} but there are {len(names)} participants"
            )

        self._rng = rng or random.Random()
        self._plan: tuple[int, ...] = tuple(sizes)
        self._pool: list[str] = names
        self._live = len(names)
        self._completed: list[DrawingGroup] = []
        self._pending: Optional[DrawingGroup] = None
        self._state = DrawState.IDLE

    @property
    def state(self) -> DrawState:
        return self._state

    @property
    def plan(self) -> tuple[int, ...]:
        return self._plan

    @property
    def total_groups(self) -> int:
        return len(self._plan)

    @property
    def remaining(self) -> int:
        """Number of names not yet drawn into any group."""
        return self._live

    @property
    def completed_groups(self) -> tuple[DrawingGroup, ...]:
        return tuple(self._completed)

    @property
    def pending_group(self) -> Optional[DrawingGroup]:
        return self._pending

    @property
    def next_group_id(self) -> Optional[int]:
        """1-based id of the group the next :meth:`draw_next` call produces."""
        drawn = len(self._completed) + (1 if self._pending is not None else 0)
        if drawn >= len(self._plan):
            return None
        return drawn + 1

    @property
    def is_finalized(self) -> bool:
        return self._state is DrawState.FINALIZED

    def _ensure_open(self) -> None:
        if self._state is DrawState.FINALIZED:
            raise InvariantViolation("Draw sequence is already finalized")

    def _sample(self, size: int) -> list[str]:
        live = self._live
        members: list[str] = []
        for _ in range(size):
            if live <= 0:
                raise InvariantViolation(
                    f"Participant pool exhausted with {size - len(members)} slots left"
                )
            idx = self._rng.randrange(live)
            last = live - 1
            self._pool[idx], self._pool[last] = self._pool[last], self._pool[idx]
            members.append(self._pool[last])
            live = last
        # Only shrink the pool once the whole group has been drawn.
        self._live = live
        return members

    def draw_next(self) -> DrawingGroup:
        """Draw the next group and hold it as pending.

        Returns
        -------
        DrawingGroup
            The freshly drawn group, not yet confirmed.

        Raises
        ------
        InvariantViolation
            If a group is still pending, every planned group has been drawn,
            the sequence is finalized, or the pool runs out mid-group.
        """

        self._ensure_open()
        if self._pending is not None:
            raise InvariantViolation(
                f"Group {self._pending.id} must be confirmed before drawing the next one"
            )
        group_id = self.next_group_id
        if group_id is None:
            raise InvariantViolation("All planned groups have already been drawn")

        self._state = DrawState.DRAWING
        try:
            members = self._sample(self._plan[group_id - 1])
        except InvariantViolation:
            self._state = DrawState.IDLE
            raise

        self._pending = DrawingGroup(id=group_id, members=tuple(members))
        self._state = DrawState.PENDING
        logger.debug(f"Drew group {group_id}/{len(self._plan)} with {len(members)} members")
        return self._pending

    def confirm(self, group_id: Optional[int] = None) -> list[DrawingGroup]:
        """Confirm the pending group.

        Parameters
        ----------
        group_id : Optional[int], default: None
            Id the caller believes it is confirming. When given it must match
            the pending group.

        Returns
        -------
        list[DrawingGroup]
            Groups confirmed so far, in draw order. After the final
            confirmation this is the complete result of the draw.

        Raises
        ------
        InvariantViolation
            If nothing is pending, ``group_id`` does not match the pending
            group, or the sequence is already finalized.
        """

        self._ensure_open()
        if self._pending is None:
            if not self._plan:
                self._state = DrawState.FINALIZED
                return []
            raise InvariantViolation("There is no drawn group waiting for confirmation")
        if group_id is not None and group_id != self._pending.id:
            raise InvariantViolation(
                f"Cannot confirm group {group_id} while group {self._pending.id} is pending"
            )

        is_last = len(self._completed) + 1 == len(self._plan)
        if is_last and self._live != 0:
            raise InvariantViolation(
                f"{self._live} participants left undrawn after the final group"
            )

        self._completed.append(self._pending)
        self._pending = None
        if is_last:
            self._state = DrawState.FINALIZED
            logger.debug(f"Draw finalized with {len(self._completed)} groups")
        else:
            self._state = DrawState.IDLE
        return list(self._completed)


def draw_all(
    participant_names: Iterable[str],
    plan: Sequence[int],
    *,
    rng: Optional[random.Random] = None,
) -> list[DrawingGroup]:
    """Run a whole draw without pauses and return every group in order."""

    sequencer = DrawSequencer(participant_names, plan, rng=rng)
    groups: list[DrawingGroup] = []
    if sequencer.total_groups == 0:
        return sequencer.confirm()
    while not sequencer.is_finalized:
        sequencer.draw_next()
        groups = sequencer.confirm()
    return groups


__all__ = ["DrawSequencer", "DrawState", "draw_all"]
