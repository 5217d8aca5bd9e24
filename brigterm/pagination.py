"""Continuation-token stack for paging through listings."""

from __future__ import annotations

import threading

FIRST_PAGE = ""


class PaginationCursorStack:
    """
    Stack of opaque continuation tokens for a paged listing.

    The bottom of the stack is always the empty token that fetches the first
    page, and the top is the token for the page currently shown. The stack is
    never empty.

    Attributes:
        parent_id: Identifier of the listing's parent (e.g. a project ID).
    """

    def __init__(self, parent_id: str | None = None) -> None:
        self.parent_id = parent_id
        self._tokens: list[str] = [FIRST_PAGE]
        self._lock = threading.Lock()

    @property
    def current(self) -> str:
        """Token for the page currently shown."""
        with self._lock:
            return self._tokens[-1]

    @property
    def tokens(self) -> list[str]:
        """A copy of the stack, bottom first."""
        with self._lock:
            return list(self._tokens)

    @property
    def has_previous(self) -> bool:
        """True if there is a page before the current one."""
        with self._lock:
            return len(self._tokens) > 1

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)

    def push(self, token: str) -> bool:
        """
        Advance to the page identified by ``token``.

        Args:
            token: Continuation token returned by the server.

        Returns:
            False (and no change) if the token is empty, meaning there are no
            more results.
        """
        if not token:
            return False
        with self._lock:
            self._tokens.append(token)
        return True

    def pop(self) -> bool:
        """
        Go back one page.

        Returns:
            False (and no change) if already on the first page.
        """
        with self._lock:
            if len(self._tokens) <= 1:
                return False
            self._tokens.pop()
            return True

    def reset(self) -> None:
        """Return to the first page."""
        with self._lock:
            self._tokens = [FIRST_PAGE]

    def track(self, parent_id: str) -> bool:
        """
        Point the stack at ``parent_id``, resetting it if the parent changed.

        Returns:
            True if the parent changed and the stack was reset.
        """
        if parent_id == self.parent_id:
            return False
        self.parent_id = parent_id
        self.reset()
        return True
