"""Dispute agents, trade statistics and dispute agent selection."""

from .agents import (
    Arbitrator,
    DisputeAgent,
    DisputeAgentRegistry,
    DisputeAgentStore,
    Mediator,
    NodeAddress,
)
from .selection import (
    LOOK_BACK_RANGE,
    DisputeAgentSelector,
    SelectionStrategy,
    get_least_used_dispute_agent,
    get_random_dispute_agent,
)
from .statistics import (
    ARBITRATOR_PREFIX_LENGTH,
    TradeStatisticsProvider,
    TradeStatisticsRecord,
    TradeStatisticsStore,
    arbitrator_prefix,
)

__all__ = [
    # Agents
    "NodeAddress",
    "DisputeAgent",
    "Arbitrator",
    "Mediator",
    "DisputeAgentRegistry",
    "DisputeAgentStore",
    # Trade statistics
    "ARBITRATOR_PREFIX_LENGTH",
    "TradeStatisticsRecord",
    "TradeStatisticsProvider",
    "TradeStatisticsStore",
    "arbitrator_prefix",
    # Selection
    "LOOK_BACK_RANGE",
    "SelectionStrategy",
    "DisputeAgentSelector",
    "get_least_used_dispute_agent",
    "get_random_dispute_agent",
]
