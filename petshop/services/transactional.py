"""Optimistic local state with rollback on a failed remote commit"""

import logging
from typing import Awaitable, Callable, Generic, Optional, TypeVar

from kungfu import Result, Ok, Error

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")
E = TypeVar("E")


class Transactional(Generic[T]):
    """
    Holds a value that is changed locally before the remote write resolves.

    run() applies the local change, awaits the commit and, when the commit
    returns an Error, puts back the value seen before the change.
    """

    def __init__(self, value: T):
        self.value = value

    async def run(
        self,
        change: Callable[[T], T],
        commit: Callable[[], Awaitable[Result[R, E]]],
        reconcile: Optional[Callable[[T, R], T]] = None,
    ) -> Result[R, E]:
        """
        Apply change, then commit.

        Args:
            change: Builds the optimistic value from the current one
            commit: Remote write
            reconcile: Folds the committed result into the value

        Returns:
            The commit's result
        """
        previous = self.value
        self.value = change(previous)

        try:
            result = await commit()
        except Exception:
            self.value = previous
            raise

        match result:
            case Ok(committed):
                if reconcile is not None:
                    self.value = reconcile(self.value, committed)
            case Error(e):
                logger.warning(f"Remote commit failed, reverting local change: {e}")
                self.value = previous
        return result
