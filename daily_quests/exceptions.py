"""
Standardized exception hierarchy for daily-quests
Provides rich context, consistent logging, and user-friendly error messages
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import json
import logging

import pydantic


logger = logging.getLogger(__name__)


class DailyQuestsError(Exception):
    """
    Base for every error raised by daily-quests

    Errors log themselves once at creation with a request id and the
    failing operation, so callers only need to show user_message.
    """

    log_level: int = logging.ERROR
    default_user_message = "An error occurred. Please try again."

    def __init__(
        self,
        message: str,
        request_id: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.request_id = request_id or str(uuid4())
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = user_message or self.default_user_message
        self.timestamp = datetime.now(timezone.utc)

        self._log_error()

    def _log_error(self) -> None:
        # "message" is reserved on LogRecord, hence error_message
        extra = {
            "error_type": type(self).__name__,
            "error_message": self.message,
            "request_id": self.request_id,
            "operation": self.operation,
            "error_context": self.context,
        }
        if self.cause is not None:
            extra["cause"] = repr(self.cause)

        where = f" during {self.operation}" if self.operation else ""
        logger.log(
            self.log_level,
            f"{type(self).__name__}{where}: {self.message}",
            extra=extra,
            exc_info=self.cause,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serializable summary for CLI/JSON output"""
        return {
            "error": type(self).__name__,
            "message": self.message,
            "user_message": self.user_message,
            "operation": self.operation,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat(),
        }


# ==========================================
# Validation Errors (User Input)
# ==========================================

class ValidationError(DailyQuestsError):
    """
    Raised when quest input fails validation

    Examples:
    - Empty quest name
    - Unknown quest kind or frequency

    Example:
        raise ValidationError(
            message="Quest name cannot be empty",
            field="name",
            value="   "
        )
    """

    log_level = logging.WARNING

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        self.field = field
        self.value = value
        kwargs.setdefault("user_message", f"Invalid {field}: {message}" if field else message)
        kwargs.setdefault("context", {"field": field, "value": value})
        super().__init__(message=message, **kwargs)


class DuplicateQuestNameError(ValidationError):
    """A quest with the same name (ignoring case) already exists"""

    def __init__(self, name: str, conflicting_quest: Any, **kwargs):
        self.conflicting_quest = conflicting_quest
        conflicting_name = getattr(conflicting_quest, "name", str(conflicting_quest))
        super().__init__(
            message=f"Quest name '{name}' conflicts with existing quest '{conflicting_name}'",
            field="name",
            value=name,
            user_message=f"A quest named '{conflicting_name}' already exists.",
            **kwargs
        )


class QuestNotFoundError(DailyQuestsError):
    """Requested quest does not exist"""

    log_level = logging.WARNING

    def __init__(self, quest_id: Any, **kwargs):
        self.quest_id = quest_id
        super().__init__(
            message=f"Quest {quest_id} not found",
            user_message="Quest not found.",
            context={"quest_id": str(quest_id)},
            **kwargs
        )


# ==========================================
# Persistence Errors
# ==========================================

class PersistenceError(DailyQuestsError):
    """Snapshot storage is unavailable or a write failed"""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        **kwargs
    ):
        self.path = path
        kwargs.setdefault("context", {"path": path})
        super().__init__(
            message=message,
            user_message="We couldn't save your progress. It is kept for this session.",
            **kwargs
        )


class SnapshotDecodeError(PersistenceError):
    """Stored snapshot could not be parsed"""

    log_level = logging.WARNING


# ==========================================
# Session Errors
# ==========================================

class SessionNotReadyError(DailyQuestsError):
    """A quest operation was attempted before the session finished loading"""

    def __init__(self, operation: str, **kwargs):
        super().__init__(
            message=f"Session is not loaded yet, refusing {operation}",
            operation=operation,
            user_message="Still loading your quests. Please try again in a moment.",
            **kwargs
        )


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(DailyQuestsError):
    """System configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            user_message="The application is not properly configured. Check your .env file.",
            context={"config_key": config_key},
            **kwargs
        )


# ==========================================
# Helper Functions
# ==========================================

def wrap_storage_exception(
    error: Exception,
    operation: str,
    path: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None
) -> PersistenceError:
    """
    Wrap storage exceptions (OSError, JSON, pydantic) into our exception hierarchy

    Args:
        error: Original exception
        operation: What operation was being performed
        path: Storage location involved
        context: Additional context

    Returns:
        Appropriate PersistenceError subclass

    Example:
        try:
            path.write_text(payload)
        except OSError as e:
            raise wrap_storage_exception(e, operation="save_snapshot", path=str(path))
    """
    context = {"path": path, **(context or {})}

    if isinstance(error, (json.JSONDecodeError, pydantic.ValidationError, UnicodeDecodeError)):
        return SnapshotDecodeError(
            message=f"Snapshot is malformed: {error}",
            path=path,
            operation=operation,
            context=context,
            cause=error
        )

    return PersistenceError(
        message=f"{operation} failed: {error}",
        path=path,
        operation=operation,
        context=context,
        cause=error
    )
