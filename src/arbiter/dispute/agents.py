"""Dispute agents and the registry that exposes them.

A dispute agent is any peer that can resolve trade disputes. Its role
(arbitrator, mediator, ...) does not matter to selection; only its
node address does. Roles are modelled as independent types that satisfy
the DisputeAgent protocol rather than as subclasses of a common base.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, Protocol, TypeVar, runtime_checkable

from ..core.exceptions import NotFoundError, ValidationException

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeAddress:
    """Network address of a peer, e.g. an onion service host and port."""

    host_name: str
    port: int

    @property
    def full_address(self) -> str:
        return f"{self.host_name}:{self.port}"

    @classmethod
    def from_full_address(cls, full_address: str) -> NodeAddress:
        """Parse a ``host:port`` string.

        Raises:
            ValidationException: If the string has no port or the port is not numeric.
        """
        host_name, sep, port = full_address.rpartition(":")
        if not sep or not host_name or not port.isdigit():
            raise ValidationException(
                f"Invalid node address: {full_address!r}",
                field="full_address",
                value=full_address,
            )
        return cls(host_name=host_name, port=int(port))

    def __str__(self) -> str:
        return self.full_address


@runtime_checkable
class DisputeAgent(Protocol):
    """Anything that can act as a dispute agent: it only needs an address."""

    @property
    def node_address(self) -> NodeAddress: ...


AgentT = TypeVar("AgentT", bound=DisputeAgent)
AgentT_co = TypeVar("AgentT_co", bound=DisputeAgent, covariant=True)


@dataclass(frozen=True)
class Arbitrator:
    """A registered arbitrator."""

    node_address: NodeAddress
    languages: tuple[str, ...] = ()
    registration_date: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class Mediator:
    """A registered mediator."""

    node_address: NodeAddress
    languages: tuple[str, ...] = ()
    registration_date: datetime = field(default_factory=datetime.now)


class DisputeAgentRegistry(Protocol[AgentT_co]):
    """Source of the currently known dispute agents of one role.

    Implementations are usually fed by network gossip and may change at any
    time; consumers must copy the returned mapping before iterating it more
    than once.
    """

    def get_dispute_agents(self) -> Mapping[NodeAddress, AgentT_co]: ...


class DisputeAgentStore(Generic[AgentT]):
    """In-memory, thread-safe registry of dispute agents keyed by address.

    Satisfies the DisputeAgentRegistry protocol. Network code adds and
    removes agents as registrations are gossiped; selection code reads
    copies via get_dispute_agents().
    """

    def __init__(self, agents: Mapping[NodeAddress, AgentT] | None = None):
        self._agents: dict[NodeAddress, AgentT] = {}
        self._lock = threading.RLock()
        for agent in (agents or {}).values():
            self.add_agent(agent)

    def add_agent(self, agent: AgentT) -> AgentT:
        """Add or replace the agent registered at ``agent.node_address``."""
        with self._lock:
            replaced = agent.node_address in self._agents
            self._agents[agent.node_address] = agent
        if replaced:
            logger.debug(f"Replaced dispute agent {agent.node_address}")
        else:
            logger.debug(f"Added dispute agent {agent.node_address}")
        return agent

    def remove_agent(self, address: NodeAddress) -> bool:
        """Remove an agent.

        Returns:
            True if an agent was removed, False if none was registered
        """
        with self._lock:
            removed = self._agents.pop(address, None)
        if removed is not None:
            logger.debug(f"Removed dispute agent {address}")
        return removed is not None

    def get_agent(self, address: NodeAddress) -> AgentT:
        """Get the agent registered at an address.

        Raises:
            NotFoundError: If no agent is registered at the address
        """
        with self._lock:
            agent = self._agents.get(address)
        if agent is None:
            raise NotFoundError("DisputeAgent", address.full_address)
        return agent

    def get_dispute_agents(self) -> dict[NodeAddress, AgentT]:
        """Return a copy of the current address -> agent mapping."""
        with self._lock:
            return dict(self._agents)

    def __len__(self) -> int:
        with self._lock:
            return len(self._agents)

    def __contains__(self, address: object) -> bool:
        with self._lock:
            return address in self._agents

    def __iter__(self) -> Iterator[AgentT]:
        return iter(self.get_dispute_agents().values())
