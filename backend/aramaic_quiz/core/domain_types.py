"""Domain Types — identity wrappers, session states and game constants.

Invariants:
    - SessionId, OwnerId, QuestionId wrap UUIDs — never use bare UUID in domain logic
    - SessionStatus has exactly two states; FINISHED is terminal
    - TIMEOUT_SELECTION (-1) is the only negative selection index accepted

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and to the DB status column without converters
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

SessionId = NewType("SessionId", UUID)
OwnerId = NewType("OwnerId", UUID)
QuestionId = NewType("QuestionId", UUID)


# ─── Game Constants ──────────────────────────────────────────────

INITIAL_LIVES = 3
BONUS_LIFE_INTERVAL = 50
TIMEOUT_SELECTION = -1
OPTIONS_PER_QUESTION = 4

USERNAME_MIN_LENGTH = 2
USERNAME_MAX_LENGTH = 20

LEADERBOARD_DEFAULT_SIZE = 10
LEADERBOARD_MAX_SIZE = 100


# ─── Enums ───────────────────────────────────────────────────────

class SessionStatus(str, Enum):
    """Session lifecycle states — maps to DB `status` column."""
    ACTIVE = "active"
    FINISHED = "finished"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
