from __future__ import annotations

from datetime import datetime, timedelta, timezone
import random
import unittest

from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from golfdraw.draw import GroupSizePolicy, draw_all
from golfdraw.exceptions import ConfigurationError
from golfdraw.models import Base, Match, MatchScore, Member, StoreRevision
from golfdraw.workflows import (
    DEFAULT_ROSTER,
    add_member,
    delete_match,
    leaderboard,
    list_members,
    load_snapshot,
    match_rankings,
    record_match,
    remove_member,
    seed_default_roster,
    start_draw,
    update_golf_course,
)


class WorkflowTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(
            bind=self.engine, future=True, expire_on_commit=False
        )

    def tearDown(self) -> None:
        self.engine.dispose()

    def _finish_draw(self, sequencer):
        groups = []
        while not sequencer.is_finalized:
            sequencer.draw_next()
            groups = sequencer.confirm()
        return groups


class RosterWorkflowTests(WorkflowTestCase):
    def test_seed_default_roster_only_once(self) -> None:
        with self.Session.begin() as session:
            roster = seed_default_roster(session)
            self.assertEqual([m.name for m in roster], list(DEFAULT_ROSTER))
            version = StoreRevision.current(session)
            self.assertEqual(version, 1)

            again = seed_default_roster(session)
            self.assertEqual(len(again), len(DEFAULT_ROSTER))
            self.assertEqual(StoreRevision.current(session), version)

    def test_add_and_remove_member(self) -> None:
        with self.Session.begin() as session:
            seed_default_roster(session)
            member = add_member(session, "  New Pro  ")
            self.assertEqual(member.name, "New Pro")
            self.assertTrue(member.id.startswith("MBR-"))
            self.assertEqual(list_members(session)[-1].id, member.id)

            with self.assertRaises(ValueError):
                add_member(session, "New Pro")
            with self.assertRaises(ValueError):
                add_member(session, "   ")

            remove_member(session, member.id)
            self.assertIsNone(session.get(Member, member.id))
            with self.assertRaises(LookupError):
                remove_member(session, member.id)


class DrawWorkflowTests(WorkflowTestCase):
    def test_start_draw_plans_and_partitions_selected_members(self) -> None:
        with self.Session.begin() as session:
            roster = seed_default_roster(session)
            selected = [m.id for m in reversed(roster[:7])]

            sequencer = start_draw(session, selected, rng=random.Random(1))
            self.assertEqual(list(sequencer.plan), [3, 2, 2])

            groups = self._finish_draw(sequencer)
            drawn = [name for group in groups for name in group.members]
            self.assertEqual(sorted(drawn), sorted(m.name for m in roster[:7]))
            self.assertEqual([len(g.members) for g in groups], [3, 2, 2])

    def test_start_draw_uses_policy(self) -> None:
        with self.Session.begin() as session:
            roster = seed_default_roster(session)
            sequencer = start_draw(
                session,
                [m.id for m in roster],
                GroupSizePolicy(target_size=4, balanced=False),
            )
            self.assertEqual(list(sequencer.plan), [4, 4, 4, 3])

    def test_start_draw_rejects_bad_selection(self) -> None:
        with self.Session.begin() as session:
            roster = seed_default_roster(session)
            with self.assertRaises(ConfigurationError):
                start_draw(session, [roster[0].id])
            with self.assertRaises(ValueError):
                start_draw(session, [roster[0].id, "nope"])
            with self.assertRaises(ConfigurationError):
                start_draw(
                    session,
                    [roster[0].id, roster[1].id],
                    GroupSizePolicy(target_size=0),
                )


class MatchHistoryWorkflowTests(WorkflowTestCase):
    def _record_two_matches(self, session):
        roster = seed_default_roster(session)
        names = [m.name for m in roster[:4]]
        sequencer = start_draw(
            session, [m.id for m in roster[:4]], GroupSizePolicy(target_size=2), rng=random.Random(5)
        )
        groups = self._finish_draw(sequencer)
        now = datetime(2024, 6, 2, tzinfo=timezone.utc)

        older = record_match(
            session,
            groups,
            {names[0]: 80, names[1]: 85, names[2]: "abc", names[3]: None},
            golf_course="Lakeside",
            played_at=now - timedelta(days=7),
        )
        newer = record_match(
            session,
            groups,
            {names[0]: 90, names[1]: 85, names[2]: 0},
            played_at=now,
        )
        return names, older, newer

    def test_record_and_load_snapshot(self) -> None:
        with self.Session.begin() as session:
            names, older, newer = self._record_two_matches(session)
            snapshot = load_snapshot(session)

            self.assertEqual(snapshot.version, StoreRevision.current(session))
            self.assertEqual([m.id for m in snapshot.matches], [newer.id, older.id])
            self.assertEqual(snapshot.match(older.id).golf_course, "Lakeside")
            self.assertEqual(len(snapshot.members), len(DEFAULT_ROSTER))

            stored = {
                e.member_name: e.score for e in snapshot.match(older.id).score_entries()
            }
            self.assertEqual(stored[names[2]], 0)
            self.assertEqual(stored[names[3]], 0)

    def test_rankings_and_leaderboard_from_snapshot(self) -> None:
        with self.Session.begin() as session:
            names, older, newer = self._record_two_matches(session)
            snapshot = load_snapshot(session)

            rankings = match_rankings(snapshot)
            self.assertEqual(
                [(r.member_name, r.rank) for r in rankings[older.id]],
                [(names[0], 1), (names[1], 2)],
            )

            board = leaderboard(snapshot)
            by_name = {entry.name: entry for entry in board}
            self.assertEqual(by_name[names[0]].avg_score, "85.0")
            self.assertEqual(by_name[names[1]].avg_score, "85.0")
            self.assertEqual(by_name[names[0]].rank, 1)
            self.assertEqual(by_name[names[1]].rank, 1)
            self.assertEqual(by_name[names[2]].count, 0)
            self.assertEqual(by_name[names[2]].rank, 3)

    def test_update_golf_course_and_delete(self) -> None:
        with self.Session.begin() as session:
            _, older, newer = self._record_two_matches(session)
            version = StoreRevision.current(session)

            updated = update_golf_course(session, newer.id, "  Hillside  ")
            self.assertEqual(updated.golf_course, "Hillside")
            self.assertEqual(update_golf_course(session, newer.id, "").golf_course, None)
            self.assertEqual(StoreRevision.current(session), version + 2)

            delete_match(session, older.id)
            self.assertIsNone(session.get(Match, older.id))
            remaining_scores = session.scalar(select(func.count()).select_from(MatchScore))
            self.assertEqual(remaining_scores, 4)
            self.assertEqual([m.id for m in load_snapshot(session).matches], [newer.id])

            with self.assertRaises(LookupError):
                delete_match(session, older.id)
            with self.assertRaises(LookupError):
                update_golf_course(session, "missing", "x")

    def test_record_match_requires_groups(self) -> None:
        with self.Session.begin() as session:
            with self.assertRaises(ValueError):
                record_match(session, [], {})


class PlayedAtTimezoneTests(unittest.TestCase):
    def setUp(self) -> None:
        # One shared connection so a second session sees the same in-memory DB.
        self.engine = create_engine(
            "sqlite+pysqlite:///:memory:",
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(bind=self.engine, future=True)

    def tearDown(self) -> None:
        self.engine.dispose()

    def _record(self, session, played_at):
        groups = draw_all(["Kim", "Lee"], [2], rng=random.Random(1))
        return record_match(session, groups, {"Kim": 80, "Lee": 82}, played_at=played_at)

    def test_offset_aware_played_at_survives_reload(self) -> None:
        kst = timezone(timedelta(hours=9))
        played_at = datetime(2024, 6, 2, 8, 0, tzinfo=kst)
        with self.Session.begin() as session:
            recorded = self._record(session, played_at)

        with self.Session.begin() as session:
            reloaded = load_snapshot(session).match(recorded.id)

        self.assertEqual(reloaded.date, played_at)
        self.assertEqual(reloaded.date, datetime(2024, 6, 1, 23, 0, tzinfo=timezone.utc))
        self.assertIs(reloaded.date.tzinfo, timezone.utc)

    def test_history_orders_by_instant_across_offsets(self) -> None:
        kst = timezone(timedelta(hours=9))
        with self.Session.begin() as session:
            # 09:00 KST is 00:00 UTC, earlier than 01:00 UTC.
            earlier = self._record(session, datetime(2024, 6, 2, 9, 0, tzinfo=kst))
            later = self._record(session, datetime(2024, 6, 2, 1, 0, tzinfo=timezone.utc))

        with self.Session.begin() as session:
            matches = load_snapshot(session).matches

        self.assertEqual([m.id for m in matches], [later.id, earlier.id])


if __name__ == "__main__":
    unittest.main()
