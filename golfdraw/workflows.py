import logging
import random
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional, Sequence

from sqlalchemy.orm import Session

from .draw.planner import GroupSizePolicy
from .draw.sequencer import DrawSequencer
from .exceptions import ConfigurationError
from .models import Match, Member, StoreRevision
from .models.utils import generate_record_id
from .records import DrawingGroup, HistorySnapshot, MatchRecord, ScoredGroup
from .scoring.ranking import LeaderboardEntry, MatchRanking, build_leaderboard, rank_match

logger = logging.getLogger(__name__)

MIN_PARTICIPANTS = 2

DEFAULT_ROSTER = (
    "유호선프로",
    "모종규프로",
    "황명진프로",
    "배준용프로",
    "정희광프로",
    "박상현프로",
    "나용균프로",
    "유형석프로",
    "김상순프로",
    "장성욱프로",
    "유정필프로",
    "진대규프로",
    "이태훈프로",
    "공석민프로",
    "김현중프로",
)


def _normalize_name(name: str) -> str:
    if not isinstance(name, str):
        raise TypeError("member name must be a string")
    normalized = name.strip()
    if not normalized:
        raise ValueError("member name must not be empty")
    return normalized


def seed_default_roster(session: Session) -> list[Member]:
    """Insert the default roster when no member exists yet.

    Returns
    -------
    list[Member]
        The roster after seeding. An existing roster is returned untouched.
    """

    existing = Member.roster(session)
    if existing:
        return existing

    for position, name in enumerate(DEFAULT_ROSTER):
        session.add(Member(id=str(position + 1), name=name, position=position))
    session.flush()
    StoreRevision.bump(session)
    logger.info(f"Seeded default roster with {len(DEFAULT_ROSTER)} members")
    return Member.roster(session)


def list_members(session: Session) -> list[Member]:
    return Member.roster(session)


def add_member(session: Session, name: str) -> Member:
    """Append a member called ``name`` to the roster.

    Raises
    ------
    ValueError
        If the name is blank or already on the roster. Names key every score,
        so they must stay unique.
    """

    normalized = _normalize_name(name)
    if Member.get_by_name(session, normalized) is not None:
        raise ValueError(f"A member named '{normalized}' already exists")

    member = Member(
        id=generate_record_id("MBR", session, Member),
        name=normalized,
        position=Member.next_position(session),
    )
    session.add(member)
    session.flush()
    StoreRevision.bump(session)
    logger.info(f"Added member {member.id}")
    return member


def remove_member(session: Session, member_id: str) -> None:
    """Delete a member from the roster. Recorded matches keep their names."""

    member = session.get(Member, member_id)
    if member is None:
        raise LookupError(f"Unknown member '{member_id}'")
    session.delete(member)
    session.flush()
    StoreRevision.bump(session)
    logger.info(f"Removed member {member_id}")


def start_draw(
    session: Session,
    member_ids: Sequence[str],
    policy: Optional[GroupSizePolicy] = None,
    *,
    rng: Optional[random.Random] = None,
) -> DrawSequencer:
    """Plan groups for the selected members and return a fresh sequencer.

    Parameters
    ----------
    session : Session
        Session used to resolve member ids to names.
    member_ids : Sequence[str]
        Ids of the participating members. Participants are passed to the
        sequencer in roster order regardless of selection order.
    policy : Optional[GroupSizePolicy], default: None
        Sizing policy. Defaults to balanced groups of three.
    rng : Optional[random.Random], default: None
        Random source forwarded to the sequencer.

    Raises
    ------
    ConfigurationError
        If fewer than two members are selected or the policy is invalid.
    ValueError
        If an id is not on the roster.
    """

    policy = policy or GroupSizePolicy()
    selected = set(member_ids)
    if len(selected) < MIN_PARTICIPANTS:
        raise ConfigurationError(
            f"At least {MIN_PARTICIPANTS} participants are required, got {len(selected)}"
        )

    roster = Member.roster(session)
    known = {member.id for member in roster}
    unknown = sorted(selected - known)
    if unknown:
        raise ValueError(f"Unknown member ids: {', '.join(unknown)}")

    names = [member.name for member in roster if member.id in selected]
    plan = policy.plan(len(names))
    logger.debug(f"Starting draw for {len(names)} participants with plan {plan}")
    return DrawSequencer(names, plan, rng=rng)


def record_match(
    session: Session,
    groups: Iterable[DrawingGroup],
    scores: Optional[Mapping[str, Any]] = None,
    *,
    golf_course: Optional[str] = None,
    played_at: Optional[datetime] = None,
) -> MatchRecord:
    """Persist a finalized draw together with its raw scores.

    Parameters
    ----------
    session : Session
        Active session used for persistence.
    groups : Iterable[DrawingGroup]
        Groups returned by the final :meth:`DrawSequencer.confirm` call.
    scores : Optional[Mapping[str, Any]], default: None
        Raw score input keyed by member name. Missing or malformed values are
        stored as ``0`` (unscored).
    golf_course : Optional[str], default: None
        Optional course name.
    played_at : Optional[datetime], default: None
        When the match took place. Defaults to now (UTC).

    Returns
    -------
    MatchRecord
        The stored record.
    """

    scored_groups = tuple(ScoredGroup.from_group(group, scores) for group in groups)
    if not scored_groups:
        raise ValueError("A match record needs at least one group")

    record = MatchRecord(
        id=generate_record_id("MATCH", session, Match),
        date=played_at or datetime.now(timezone.utc),
        groups=scored_groups,
        golf_course=(golf_course or "").strip() or None,
    )
    session.add(Match.from_record(record))
    session.flush()
    StoreRevision.bump(session)
    logger.info(f"Recorded match {record.id} with {len(scored_groups)} groups")
    return record


def _get_match(session: Session, match_id: str) -> Match:
    match = session.get(Match, match_id)
    if match is None:
        raise LookupError(f"Unknown match record '{match_id}'")
    return match


def update_golf_course(session: Session, match_id: str, golf_course: Optional[str]) -> MatchRecord:
    """Set or clear the course name of a recorded match."""

    match = _get_match(session, match_id)
    match.golf_course = (golf_course or "").strip() or None
    session.flush()
    StoreRevision.bump(session)
    logger.info(f"Updated golf course of match {match_id}")
    return match.to_record()


def delete_match(session: Session, match_id: str) -> None:
    """Delete a recorded match and all of its groups and scores."""

    match = _get_match(session, match_id)
    session.delete(match)
    session.flush()
    StoreRevision.bump(session)
    logger.info(f"Deleted match {match_id}")


def load_snapshot(session: Session) -> HistorySnapshot:
    """Return the roster and match history as an immutable snapshot."""

    return HistorySnapshot.build(
        version=StoreRevision.current(session),
        members=(member.to_record() for member in Member.roster(session)),
        matches=(match.to_record() for match in Match.history(session)),
    )


def match_rankings(
    snapshot: HistorySnapshot,
    *,
    limit: Optional[int] = None,
) -> dict[str, list[MatchRanking]]:
    """Return the standings of every match in ``snapshot`` keyed by match id."""

    return {record.id: rank_match(record, limit=limit) for record in snapshot.matches}


def leaderboard(snapshot: HistorySnapshot) -> list[LeaderboardEntry]:
    """Return the cumulative leaderboard across every match in ``snapshot``."""

    return build_leaderboard(snapshot.matches)
