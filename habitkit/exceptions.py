"""Exceptions raised by HabitKit.

Every error the library raises derives from HabitKitError so callers can catch
the whole family, and each kind also derives from the closest built-in
exception (ValueError, KeyError, PermissionError) so generic handlers still
behave sensibly.

Calculators never raise on well-typed input; only mutations (builders,
lifecycle transitions, manager operations) and stores raise these.
"""

from __future__ import annotations


class HabitKitError(Exception):
    """Base class for all HabitKit errors."""


class ValidationError(HabitKitError, ValueError):
    """Validation error with field-specific information for form highlighting.

    Raised when a mutation's preconditions fail: empty frequency mask,
    end_date before start_date, deleting a locked habit, re-locking a locked
    habit, and so on. The field attribute lets a form layer map the error
    back to the input that caused it.

    Attributes:
        field: The DATA_* constant identifying the offending field
        translation_key: The TRANS_KEY_* constant for the error message
        placeholders: Optional dict for translation string placeholders

    Example:
        raise ValidationError(
            field=const.DATA_HABIT_FREQUENCY,
            translation_key=const.TRANS_KEY_EMPTY_FREQUENCY,
        )
    """

    def __init__(
        self,
        field: str,
        translation_key: str,
        placeholders: dict[str, str] | None = None,
    ) -> None:
        """Initialize ValidationError.

        Args:
            field: The DATA_* constant for the field that failed validation
            translation_key: The TRANS_KEY_* constant for the error message
            placeholders: Optional dict for translation placeholders
        """
        self.field = field
        self.translation_key = translation_key
        self.placeholders = placeholders or {}
        super().__init__(translation_key)


class NotFoundError(HabitKitError, KeyError):
    """Raised when an operation addresses a habit, entry or goal that is not loaded.

    Attributes:
        item_type: ITEM_TYPE_* constant ("habit", "entry", "goal")
        item_id: The id that could not be resolved
    """

    def __init__(self, item_type: str, item_id: str) -> None:
        """Initialize NotFoundError."""
        self.item_type = item_type
        self.item_id = item_id
        super().__init__(f"{item_type} not found: {item_id}")

    def __str__(self) -> str:
        """Return the plain message (KeyError would repr() it)."""
        return str(self.args[0])


class PermissionDeniedError(HabitKitError, PermissionError):
    """Raised when the caller is not the owner of the addressed item.

    Attributes:
        owner_id: The caller's owner id
        item_id: The id of the item the caller tried to mutate
    """

    def __init__(self, owner_id: str, item_id: str) -> None:
        """Initialize PermissionDeniedError."""
        self.owner_id = owner_id
        self.item_id = item_id
        super().__init__(f"Owner {owner_id} may not modify {item_id}")


class PersistenceError(HabitKitError):
    """Raised by a store when loading, saving or deleting fails.

    HabitManager does not retry and does not wrap this error: it reaches the
    caller unchanged and the in-memory snapshot stays as it was.
    """
