"""ORM Models — SQLAlchemy declarative models for players, questions and games.

Invariants:
    - All models inherit from Base (db/base.py)
    - GameSession is the only row mutated by gameplay; GameResult is append-only

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from aramaic_quiz.models.player import Player  # noqa: F401
from aramaic_quiz.models.question import Question  # noqa: F401
from aramaic_quiz.models.game_session import GameSession  # noqa: F401
from aramaic_quiz.models.game_result import GameResult  # noqa: F401
