"""Ordered registry of policies keyed by name."""

import logging
from typing import Iterable, Iterator, Optional

from .base import Policy
from .policies import BUILTIN_POLICIES

logger = logging.getLogger(__name__)


class PolicyRegistry:
    """
    Holds policies by unique name, remembering registration order.

    Registration order is the tie-breaker when two policies share a
    priority, so it is part of the pipeline's observable behaviour.
    """

    def __init__(self, policies: Optional[Iterable[Policy]] = None):
        self._policies: dict[str, Policy] = {}
        for policy in policies or []:
            self.register(policy)

    def register(self, policy: Policy) -> "PolicyRegistry":
        """
        Add a policy (fluent API).

        Registering a name twice replaces the earlier policy but keeps its
        original position.
        """
        if policy.name in self._policies:
            logger.warning(f"Replacing already registered policy: {policy.name}")
        self._policies[policy.name] = policy
        return self

    def get(self, name: str) -> Optional[Policy]:
        return self._policies.get(name)

    def names(self) -> list[str]:
        return list(self._policies)

    def __iter__(self) -> Iterator[Policy]:
        return iter(list(self._policies.values()))

    def __contains__(self, name: object) -> bool:
        return name in self._policies

    def __len__(self) -> int:
        return len(self._policies)


def default_registry() -> PolicyRegistry:
    """Create a new registry holding the built-in policies."""
    return PolicyRegistry(BUILTIN_POLICIES)
