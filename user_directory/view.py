#!/usr/bin/env python3
"""
The user directory view: the page state and every operation that changes it.

State moves along two independent axes, {empty, populated} driven by
``load_users`` and {no selection, selection} driven by ``select_user`` /
``clear_selection``.

The FastAPI app runs sync routes on a worker thread pool, so two loads can
be in flight at once. Each load takes a generation number when it starts and
only the most recently started load may replace ``users``; a slower, older
response is dropped. In-flight requests are never cancelled.
"""

import logging
import threading
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, List, Optional, Tuple

from .api_client import RandomUserClient
from .config import Variant
from .errors import FeatureUnavailable, FetchError
from .models import DEFAULT_REQUEST_COUNT, RequestCountError, UserRecord, validate_request_count
from .transformations import users_frame

logger = logging.getLogger(__name__)

MAX_NOTIFICATIONS = 20 # oldest toasts fall off when nobody renders the page


@dataclass(frozen=True)
class Notification:
    kind: str  # "success" or "error"
    message: str


class DirectoryView:
    def __init__(self, client: RandomUserClient, variant: Optional[Variant] = None):
        self.client = client
        self.variant = variant if variant is not None else client.variant

        self.users: Tuple[UserRecord, ...] = ()
        self.selected_user: Optional[UserRecord] = None
        self.request_count: int = DEFAULT_REQUEST_COUNT
        self.form_error: Optional[str] = None
        self.last_error: Optional[FetchError] = None

        self._notifications: Deque[Notification] = deque(maxlen=MAX_NOTIFICATIONS)
        self._generation = 0
        self._mounted = False
        self._lock = threading.RLock()

    # --------------------------------------------------------------------------------------------------
    # Loading
    # --------------------------------------------------------------------------------------------------
    def mount(self) -> bool:
        """Run the initial load of DEFAULT_REQUEST_COUNT users, once per view."""
        with self._lock:
            if self._mounted:
                return False
            self._mounted = True
        self.load_users(DEFAULT_REQUEST_COUNT)
        return True

    @property
    def mounted(self) -> bool:
        return self._mounted

    def load_users(self, count: int) -> bool:
        """
        Fetch ``count`` users and replace ``users`` with them.

        Returns True when the response was applied. A FetchError is logged,
        kept in ``last_error`` and (extended page) turned into an error toast;
        ``users`` is left as it was. A response or failure that arrives
        after a newer load has started is dropped without touching state
        (the failure is still logged) and also returns False.
        """
        with self._lock:
            self._generation += 1
            generation = self._generation

        try:
            users = self.client.fetch_users(count)
        except FetchError as exc:
            logger.error("Error fetching users: %s", exc, exc_info=exc.cause)
            with self._lock:
                if generation != self._generation:
                    # a newer load owns the page state now
                    return False
                self.last_error = exc
                if self.variant.is_extended:
                    self._notify("error", f"Failed to fetch {count} users")
            return False

        with self._lock:
            if generation != self._generation:
                logger.info("discarding response for %d users, a newer request was issued", count)
                return False
            self.users = tuple(users)
            # the old selection may reference a record that is no longer listed
            self.selected_user = None
            self.last_error = None
        logger.info("loaded %d users", len(users))
        return True

    # --------------------------------------------------------------------------------------------------
    # Selection (modal)
    # --------------------------------------------------------------------------------------------------
    def _require_modal(self) -> None:
        if not self.variant.has_modal:
            raise FeatureUnavailable(f"the {self.variant.value} page has no user modal")

    def select_user(self, user: UserRecord) -> None:
        self._require_modal()
        with self._lock:
            self.selected_user = user

    def select_index(self, index: int) -> UserRecord:
        """Select the card at ``index``; IndexError if there is none."""
        self._require_modal()
        with self._lock:
            if not 0 <= index < len(self.users):
                raise IndexError(f"no user card at position {index}")
            user = self.users[index]
            self.selected_user = user
        return user

    def clear_selection(self) -> None:
        self._require_modal()
        with self._lock:
            self.selected_user = None

    @property
    def selected_index(self) -> Optional[int]:
        with self._lock:
            for i, user in enumerate(self.users):
                if user is self.selected_user:
                    return i
        return None

    # --------------------------------------------------------------------------------------------------
    # Request count form (extended page)
    # --------------------------------------------------------------------------------------------------
    def submit_request_count(self, raw: Any) -> bool:
        """
        Validate the "Number of Users" field and load that many users.

        Invalid input only sets ``form_error``: no request, no log entry.
        """
        if not self.variant.is_extended:
            raise FeatureUnavailable(f"the {self.variant.value} page has no request count form")

        try:
            count = validate_request_count(raw)
        except RequestCountError as exc:
            with self._lock:
                self.form_error = str(exc)
            return False

        with self._lock:
            self.form_error = None
            self.request_count = count

        applied = self.load_users(count)
        if applied:
            with self._lock:
                self._notify("success", f"Fetched {count} users")
        return applied

    # --------------------------------------------------------------------------------------------------
    # Notifications
    # --------------------------------------------------------------------------------------------------
    def _notify(self, kind: str, message: str) -> None:
        self._notifications.append(Notification(kind, message))

    @property
    def notifications(self) -> Tuple[Notification, ...]:
        return tuple(self._notifications)

    def drain_notifications(self) -> List[Notification]:
        """Return pending toasts and forget them; each toast is shown once."""
        with self._lock:
            pending = list(self._notifications)
            self._notifications.clear()
        return pending

    # --------------------------------------------------------------------------------------------------
    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            users = list(self.users)
            last_error = str(self.last_error) if self.last_error is not None else None
            form_error = self.form_error
            request_count = self.request_count
        return {
            "variant": self.variant.value,
            "users": users_frame(users).to_dict(orient="records"),
            "selected_index": self.selected_index,
            "request_count": request_count,
            "form_error": form_error,
            "last_error": last_error,
        }
