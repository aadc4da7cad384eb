"""Dispute agent selection.

Chooses one dispute agent for a new trade from the agents currently known
on the network, either:
- least used: the agent that appears least often among the arbitrators of
  the most recent LOOK_BACK_RANGE trades, ties broken by address order
- random: uniformly from the candidates

Both strategies take one snapshot of each collaborator at the start of
the call and only work on those copies afterwards, so they need no locks
and are safe to call from several threads at once.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Generic, Union

from ..core.config import get_config
from ..core.exceptions import SelectionInvariantError, ValidationException
from ..core.logging import correlation_context, log_event
from .agents import AgentT, DisputeAgentRegistry, NodeAddress
from .statistics import TradeStatisticsProvider, TradeStatisticsRecord

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Number of most recent trades considered when counting arbitrator usage
LOOK_BACK_RANGE = 100

_random_source = random.Random()


def get_random_source() -> random.Random:
    """Process-wide random source used when the caller injects none."""
    return _random_source


class SelectionStrategy(str, Enum):
    """How a dispute agent is picked from the candidates."""

    LEAST_USED = "least_used"
    RANDOM = "random"


# =============================================================================
# BUILDING BLOCKS
# =============================================================================


# One address, or any collection of addresses
Excluded = Union[NodeAddress, str, Iterable[Union[NodeAddress, str]]]


def _excluded_addresses(excluded: Excluded | None) -> set[str]:
    if excluded is None:
        return set()
    # A single address is a str, which is itself iterable
    if isinstance(excluded, (NodeAddress, str)):
        excluded = (excluded,)
    return {
        address.full_address if isinstance(address, NodeAddress) else address
        for address in excluded
    }


def recent_arbitrator_prefixes(records: Iterable[TradeStatisticsRecord]) -> list[str]:
    """Arbitrator prefixes of the LOOK_BACK_RANGE most recent trades.

    Records without an arbitrator still occupy a slot in the window but
    contribute no prefix.
    """
    recent = sorted(records, key=lambda record: record.date, reverse=True)[:LOOK_BACK_RANGE]
    return [record.arbitrator for record in recent if record.arbitrator is not None]


def candidate_addresses(
    agents: Mapping[NodeAddress, AgentT],
    excluded: Excluded | None = None,
) -> set[str]:
    """Full addresses of all agents that are not excluded.

    ``excluded`` may be a single NodeAddress or full address string, or any
    iterable of them.
    """
    addresses = {agent.node_address.full_address for agent in agents.values()}
    return addresses - _excluded_addresses(excluded)


def count_usages(prefixes: Iterable[str], addresses: Iterable[str]) -> dict[str, int]:
    """Count, for every address, how many prefixes it starts with."""
    prefixes = list(prefixes)
    return {
        address: sum(1 for prefix in prefixes if address.startswith(prefix))
        for address in addresses
    }


def least_used_address(prefixes: Iterable[str], addresses: Iterable[str]) -> str:
    """Pick the address with the fewest usages, lowest address on ties.

    Raises:
        ValueError: If addresses is empty
    """
    counts = count_usages(prefixes, addresses)
    if not counts:
        raise ValueError("addresses must not be empty")
    return min(counts, key=lambda address: (counts[address], address))


def _resolve(agents: Mapping[NodeAddress, AgentT], address: str) -> AgentT:
    for agent in agents.values():
        if agent.node_address.full_address == address:
            return agent
    log_event(
        logger,
        logging.ERROR,
        "Selected dispute agent is missing from its own snapshot",
        address=address,
        snapshot_size=len(agents),
    )
    raise SelectionInvariantError(
        "Selected dispute agent is not present in the agent snapshot",
        address=address,
    )


# =============================================================================
# SELECTORS
# =============================================================================


def get_least_used_dispute_agent(
    statistics: TradeStatisticsProvider,
    registry: DisputeAgentRegistry[AgentT],
    excluded: Excluded | None = None,
) -> AgentT | None:
    """Select the dispute agent used least in recent trades.

    Args:
        statistics: Provider of all known trade statistics records
        registry: Provider of the currently known dispute agents
        excluded: Address or addresses that must not be selected

    Returns:
        The selected agent, or None if no candidate remains
    """
    records = list(statistics.get_trade_statistics())
    agents = dict(registry.get_dispute_agents())

    prefixes = recent_arbitrator_prefixes(records)
    window = min(len(records), LOOK_BACK_RANGE)
    candidates = candidate_addresses(agents, excluded)
    if not candidates:
        log_event(
            logger,
            logging.DEBUG,
            "No dispute agent candidates left",
            strategy=SelectionStrategy.LEAST_USED.value,
            pool_size=len(agents),
        )
        return None

    counts = count_usages(prefixes, candidates)
    address = least_used_address(prefixes, candidates)
    log_event(
        logger,
        logging.DEBUG,
        "Selected dispute agent",
        strategy=SelectionStrategy.LEAST_USED.value,
        address=address,
        usage_count=counts[address],
        candidates=len(candidates),
        window=window,
    )
    return _resolve(agents, address)


def get_random_dispute_agent(
    registry: DisputeAgentRegistry[AgentT],
    excluded: Excluded | None = None,
    rng: random.Random | None = None,
) -> AgentT | None:
    """Select a dispute agent uniformly at random.

    Args:
        registry: Provider of the currently known dispute agents
        excluded: Address or addresses that must not be selected
        rng: Random source, defaults to the shared process-wide one

    Returns:
        The selected agent, or None if no candidate remains
    """
    agents = dict(registry.get_dispute_agents())

    candidates = candidate_addresses(agents, excluded)
    if not candidates:
        log_event(
            logger,
            logging.DEBUG,
            "No dispute agent candidates left",
            strategy=SelectionStrategy.RANDOM.value,
            pool_size=len(agents),
        )
        return None

    # Sorted so a seeded source gives the same pick regardless of set order
    address = (rng or _random_source).choice(sorted(candidates))
    log_event(
        logger,
        logging.DEBUG,
        "Selected dispute agent",
        strategy=SelectionStrategy.RANDOM.value,
        address=address,
        candidates=len(candidates),
    )
    return _resolve(agents, address)


class DisputeAgentSelector(Generic[AgentT]):
    """Selects dispute agents of one role for new trades.

    Binds the two collaborators and a random source so callers only pass
    what varies per trade. Holds no state beyond those references.

    Example:
        selector = DisputeAgentSelector(statistics_store, arbitrator_store)
        arbitrator = selector.select(excluded={maker_address, taker_address}, trade_id=offer.id)
    """

    def __init__(
        self,
        statistics: TradeStatisticsProvider,
        registry: DisputeAgentRegistry[AgentT],
        rng: random.Random | None = None,
    ):
        self.statistics = statistics
        self.registry = registry
        self.rng = rng or _random_source

    def least_used(self, excluded: Excluded | None = None) -> AgentT | None:
        return get_least_used_dispute_agent(self.statistics, self.registry, excluded)

    def random(self, excluded: Excluded | None = None) -> AgentT | None:
        return get_random_dispute_agent(self.registry, excluded, self.rng)

    def select(
        self,
        strategy: SelectionStrategy | str | None = None,
        excluded: Excluded | None = None,
        trade_id: str | None = None,
    ) -> AgentT | None:
        """Select with the given strategy, or the configured default.

        Args:
            strategy: Strategy or its name; None uses ARBITER_SELECTION_STRATEGY
            excluded: Address or addresses that must not be selected
            trade_id: Correlation ID for the selection's log records; when
                None the caller's current correlation ID is kept

        Raises:
            ValidationException: If the strategy name is unknown
        """
        if strategy is None:
            strategy = get_config().default_selection_strategy
        try:
            strategy = SelectionStrategy(strategy)
        except ValueError:
            raise ValidationException(
                f"Unknown selection strategy: {strategy}",
                field="strategy",
                value=strategy,
            ) from None

        if trade_id is None:
            return self._select(strategy, excluded)
        with correlation_context(trade_id):
            return self._select(strategy, excluded)

    def _select(self, strategy: SelectionStrategy, excluded: Excluded | None) -> AgentT | None:
        if strategy is SelectionStrategy.RANDOM:
            return self.random(excluded)
        return self.least_used(excluded)
