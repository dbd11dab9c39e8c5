"""
Difference registry.

Session state of one comparison run: the identifier counter, the set of
claimed nodes and the ordered list of registered differences.
"""

import dataclasses
import logging
from typing import Hashable

from .models import Difference

logger = logging.getLogger(__name__)

ID_PREFIX = "pce-diff-"


class DiffRegistry:
    """
    Assigns identities to differences and prevents double counting.

    A difference with a target is keyed by the target's node handle; a
    removal (no target) is keyed by its category and detail. A key can only
    be registered once until reset() is called.
    """

    def __init__(self, key_of=id):
        """
        Initialize an empty registry.

        Args:
            key_of: Callable mapping a target node to its identity handle
        """
        self.key_of = key_of
        self._counter = 0
        self._claimed: set[Hashable] = set()
        self._differences: list[Difference] = []

    def reset(self, key_of=None) -> None:
        """
        Clear the counter, the claimed keys and the registered differences.

        Args:
            key_of: Optional new identity callable for the next run's document
        """
        if key_of is not None:
            self.key_of = key_of
        self._counter = 0
        self._claimed.clear()
        self._differences = []

    def claim_key(self, difference: Difference) -> Hashable:
        if difference.target is not None:
            return ("node", self.key_of(difference.target))
        return ("removal", difference.category, difference.detail)

    def is_claimed(self, difference: Difference) -> bool:
        """Check if the node or removal behind a difference was already registered."""
        return self.claim_key(difference) in self._claimed

    def register(self, difference: Difference) -> Difference | None:
        """
        Register a difference.

        Args:
            difference: Difference produced by the classifier

        Returns:
            Copy of the difference carrying its identifier, or None when its
            key was already claimed
        """
        key = self.claim_key(difference)
        if key in self._claimed:
            logger.debug("Skipping already classified %s: %s", difference.category.label, difference.detail)
            return None

        self._counter += 1
        registered = dataclasses.replace(difference, id=f"{ID_PREFIX}{self._counter}")
        self._claimed.add(key)
        self._differences.append(registered)

        logger.debug("Registered %s %s: %s", registered.id, registered.category.label, registered.detail)
        return registered

    @property
    def count(self) -> int:
        return self._counter

    @property
    def differences(self) -> list[Difference]:
        """Registered differences in registration order."""
        return list(self._differences)
