from .base import Base

# import models so metadata.create_all discovers every table
from .member import Member  # noqa: F401
from .match import Match, MatchGroup, MatchScore  # noqa: F401
from .revision import StoreRevision  # noqa: F401

__all__ = [
    "Base",
    "Member",
    "Match",
    "MatchGroup",
    "MatchScore",
    "StoreRevision",
]
