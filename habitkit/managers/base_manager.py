"""Base manager class for HabitKit managers."""

from __future__ import annotations

from abc import ABC, abstractmethod
import inspect
from typing import TYPE_CHECKING, Any

from .. import const

if TYPE_CHECKING:
    from collections.abc import Callable

    from ..store import HabitStore
    from ..type_defs import HabitOptions, OwnerId


class BaseManager(ABC):
    """Base class for all HabitKit managers with scoped event support.

    Provides:
    - Access to the store, the owner id and the options mapping
    - Instance-scoped event emitting (async_emit)
    - Instance-scoped event listening (listen), returning an unsubscribe callable

    Data Persistence:
    - Every mutation awaits the store first and only then updates the
      in-memory snapshot (confirm-then-update)

    Subclasses must implement:
    - async_setup(): Load state from the store
    """

    def __init__(
        self,
        store: HabitStore,
        owner_id: OwnerId,
        options: HabitOptions | None = None,
    ) -> None:
        """Initialize manager.

        Args:
            store: Persistence collaborator
            owner_id: Identity of the caller; scopes loads and mutations
            options: CONF_* keyed options; missing keys use const.DEFAULT_*
        """
        self.store = store
        self.owner_id = owner_id
        self.options: HabitOptions = dict(options or {})
        self._listeners: dict[str, list[Callable[..., Any]]] = {}

    def get_option(self, key: str, default: Any) -> Any:
        """Return an option value, falling back to the default."""
        return self.options.get(key, default)

    async def async_emit(self, suffix: str, **payload: Any) -> None:
        """Emit instance-scoped event to listeners.

        Listener exceptions are logged and never reach the caller.

        Args:
            suffix: Signal suffix constant (e.g., const.SIGNAL_SUFFIX_HABIT_DELETED)
            **payload: Event data dict passed to listeners

        Example:
            await self.async_emit(
                const.SIGNAL_SUFFIX_COMPLETION_CHANGED,
                habit_id=habit_id,
                date="2024-01-05",
                completed=True,
            )
        """
        listeners = list(self._listeners.get(suffix, []))
        const.LOGGER.debug(
            "Emitting event '%s' for owner %s to %d listeners with payload keys: %s",
            suffix,
            self.owner_id,
            len(listeners),
            list(payload.keys()),
        )
        for callback in listeners:
            try:
                result = callback(payload)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                # The mutation is already committed; listener errors stay here
                const.LOGGER.exception(
                    "Error in listener %r for event '%s'", callback, suffix
                )

    def listen(self, suffix: str, callback: Callable[..., Any]) -> Callable[[], None]:
        """Subscribe to instance-scoped event.

        Supports both sync and async callbacks; async ones are awaited in
        emit order.

        Args:
            suffix: Signal suffix constant to listen for
            callback: Function called when event fires (receives payload dict as arg)

        Returns:
            Callable that removes the subscription.

        Example:
            def _on_completion_changed(payload: dict[str, Any]) -> None:
                refresh_badge(payload["habit_id"])

            unsub = manager.listen(
                const.SIGNAL_SUFFIX_COMPLETION_CHANGED, _on_completion_changed
            )
        """
        self._listeners.setdefault(suffix, []).append(callback)
        const.LOGGER.debug(
            "Manager %s listening to event '%s' for owner %s",
            self.__class__.__name__,
            suffix,
            self.owner_id,
        )

        def _unsubscribe() -> None:
            callbacks = self._listeners.get(suffix, [])
            if callback in callbacks:
                callbacks.remove(callback)

        return _unsubscribe

    @abstractmethod
    async def async_setup(self) -> None:
        """Set up the manager (load state from the store).

        Called once by the embedder before any other operation.
        """
