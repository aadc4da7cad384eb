"""Trade statistics records as seen by dispute agent selection.

Each completed trade is gossiped as a statistics record. To keep records
small, the arbitrator used in the trade is stored only as the first
ARBITRATOR_PREFIX_LENGTH characters of its full address.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from ..core.exceptions import ValidationException
from .agents import NodeAddress

logger = logging.getLogger(__name__)

# Fixed by the statistics record format; changing it breaks existing history
ARBITRATOR_PREFIX_LENGTH = 4


def arbitrator_prefix(address: NodeAddress | str) -> str:
    """Truncate a full arbitrator address to the prefix stored in trade records."""
    full_address = address.full_address if isinstance(address, NodeAddress) else address
    return full_address[:ARBITRATOR_PREFIX_LENGTH]


@dataclass(frozen=True)
class TradeStatisticsRecord:
    """One completed trade.

    Only ``date`` and ``arbitrator`` are used for dispute agent selection;
    the remaining fields describe the trade itself. Naive dates are taken
    as UTC and stored timezone-aware, so records from different peers sort
    against each other.
    """

    date: datetime
    arbitrator: str | None = None
    currency: str = ""
    price: int = 0
    amount: int = 0
    payment_method: str = ""

    def __post_init__(self) -> None:
        if self.date.tzinfo is None:
            object.__setattr__(self, "date", self.date.replace(tzinfo=UTC))
        if self.arbitrator is not None and len(self.arbitrator) != ARBITRATOR_PREFIX_LENGTH:
            raise ValidationException(
                f"Arbitrator prefix must be {ARBITRATOR_PREFIX_LENGTH} characters",
                field="arbitrator",
                value=self.arbitrator,
            )

    @classmethod
    def for_trade(
        cls,
        date: datetime,
        arbitrator_address: NodeAddress | str | None,
        currency: str = "",
        price: int = 0,
        amount: int = 0,
        payment_method: str = "",
    ) -> TradeStatisticsRecord:
        """Build a record from the full address of the trade's arbitrator.

        Raises:
            ValidationException: If the address is shorter than the stored prefix
        """
        prefix = None
        if arbitrator_address:
            full_address = (
                arbitrator_address.full_address
                if isinstance(arbitrator_address, NodeAddress)
                else arbitrator_address
            )
            if len(full_address) < ARBITRATOR_PREFIX_LENGTH:
                raise ValidationException(
                    f"Arbitrator address {full_address!r} is shorter than "
                    f"{ARBITRATOR_PREFIX_LENGTH} characters",
                    field="arbitrator_address",
                    value=full_address,
                )
            prefix = arbitrator_prefix(full_address)
        return cls(
            date=date,
            arbitrator=prefix,
            currency=currency,
            price=price,
            amount=amount,
            payment_method=payment_method,
        )


class TradeStatisticsProvider(Protocol):
    """Source of all trade statistics records known to this node."""

    def get_trade_statistics(self) -> Iterable[TradeStatisticsRecord]: ...


class TradeStatisticsStore:
    """In-memory, thread-safe set of trade statistics records.

    Satisfies the TradeStatisticsProvider protocol. Duplicate records
    (equal in every field) are stored once.
    """

    def __init__(self, records: Iterable[TradeStatisticsRecord] = ()):
        self._records: set[TradeStatisticsRecord] = set(records)
        self._lock = threading.RLock()

    def add(self, record: TradeStatisticsRecord) -> bool:
        """Add a record.

        Returns:
            True if the record was new
        """
        with self._lock:
            if record in self._records:
                return False
            self._records.add(record)
            return True

    def add_all(self, records: Iterable[TradeStatisticsRecord]) -> int:
        """Add several records, returning how many were new."""
        added = 0
        with self._lock:
            for record in records:
                if record not in self._records:
                    self._records.add(record)
                    added += 1
        logger.debug(f"Added {added} trade statistics records")
        return added

    def remove(self, record: TradeStatisticsRecord) -> bool:
        with self._lock:
            if record not in self._records:
                return False
            self._records.discard(record)
            return True

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def get_trade_statistics(self) -> frozenset[TradeStatisticsRecord]:
        """Return an immutable copy of all records."""
        with self._lock:
            return frozenset(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
