import logging
import random
from datetime import datetime, timedelta, timezone

from golfdraw.db.engine import get_sessionmaker, make_engine
from golfdraw.draw.planner import GroupSizePolicy
from golfdraw.draw.summary import describe_distribution, format_results
from golfdraw.models import Base
from golfdraw.workflows import (
    leaderboard,
    load_snapshot,
    record_match,
    seed_default_roster,
    start_draw,
)


def main() -> None:
    """Seed the development database with the roster and two sample matches."""
    logging.basicConfig(level=logging.INFO)
    engine = make_engine()

    # Start from a clean schema every time.
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    Session = get_sessionmaker(engine)

    rng = random.Random(2024)
    now = datetime.now(timezone.utc)

    with Session.begin() as session:
        roster = seed_default_roster(session)
        member_ids = [member.id for member in roster]

        for weeks_ago, course in ((2, "Lakeside CC"), (1, None)):
            sequencer = start_draw(
                session, member_ids, GroupSizePolicy(target_size=4), rng=rng
            )
            print(describe_distribution(sequencer.plan))
            groups = []
            while not sequencer.is_finalized:
                sequencer.draw_next()
                groups = sequencer.confirm()
            print(format_results(groups))

            scores = {member.name: rng.randint(72, 98) for member in roster}
            record_match(
                session,
                groups,
                scores,
                golf_course=course,
                played_at=now - timedelta(weeks=weeks_ago),
            )

        for entry in leaderboard(load_snapshot(session)):
            print(f"{entry.rank:>2}. {entry.name} {entry.avg_score} ({entry.count})")

    print("Development database seeded.")


if __name__ == "__main__":
    main()
