"""Error Hierarchy — typed, categorized exceptions for all quiz failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Caller errors (400-level) are recoverable; store errors (503) are retryable
    - SessionNotFoundError never reveals whether a session is missing, foreign, or finished
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with QuizError base: FastAPI global handler catches all
    - ErrorContext is mutable: the engine fills in session/owner ids as an
      error crosses its boundary (attach_caller)
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    CONFLICT = "conflict"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Which game, player and question an error concerns."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    session_id: str | None = None
    owner_id: str | None = None
    question_id: str | None = None
    user_message: str | None = None
    retry_after_ms: int | None = None


class QuizError(Exception):
    """Base exception for all quiz backend errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def attach_caller(self, session_id=None, owner_id=None) -> "QuizError":
        """Fill in ids the raising layer did not know; never overwrites."""
        if session_id is not None and self.context.session_id is None:
            self.context.session_id = str(session_id)
        if owner_id is not None and self.context.owner_id is None:
            self.context.owner_id = str(owner_id)
        return self

    @property
    def retryable(self) -> bool:
        return self.category in (ErrorCategory.CONFLICT, ErrorCategory.DATABASE)

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "retryable": self.retryable,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "session_id": self.context.session_id,
                    "question_id": self.context.question_id,
                    "retry_after_ms": self.context.retry_after_ms,
                },
            }
        }


# ─── Caller Errors (400-level) ──────────────────────────────────

class InvalidUsernameError(QuizError):
    """Guest username failed validation."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = "username"


class UnknownOwnerError(QuizError):
    """Owner id does not resolve to a player profile."""
    def __init__(self, owner_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.owner_id = owner_id
        super().__init__(
            f"Player '{owner_id}' not found",
            "UNKNOWN_OWNER", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.ERROR, ctx, 401,
        )


class SessionNotFoundError(QuizError):
    """Session missing, owned by someone else, or already finished."""
    def __init__(self, session_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.session_id = session_id
        ctx.user_message = "Your game session has ended, please start a new game"
        super().__init__(
            f"Game session '{session_id}' not found",
            "SESSION_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )


class PlayerNotFoundError(QuizError):
    """Looked-up player (not the caller) does not exist."""
    def __init__(self, player_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"Player '{player_id}' not found",
            "PLAYER_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class QuestionNotFoundError(QuizError):
    """Question id unknown to the question source (or inactive).

    question_id None means no question was left to serve at all.
    """
    def __init__(
        self, question_id: str | None = None, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        if question_id is None:
            message = "No more questions available"
        else:
            ctx.question_id = question_id
            message = f"Question '{question_id}' not found"
        super().__init__(
            message,
            "QUESTION_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )


# ─── Store Errors (409 / 503) ───────────────────────────────────

class ConcurrentModificationError(QuizError):
    """Record changed by another operation since it was read."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONCURRENT_MODIFICATION", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


class StoreUnavailableError(QuizError):
    """Store call failed or exceeded its timeout."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Store {operation} failed: {message}",
            "STORE_UNAVAILABLE", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
