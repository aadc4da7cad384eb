"""Global test fixtures for the Arbiter test suite."""

from __future__ import annotations

import logging
import os
from datetime import datetime, timedelta

import pytest

from arbiter.dispute.agents import Arbitrator, DisputeAgentStore, NodeAddress
from arbiter.dispute.statistics import TradeStatisticsRecord, TradeStatisticsStore

BASE_DATE = datetime(2026, 1, 1, 12, 0, 0)


# ============================================================================
# Environment and global state
# ============================================================================


@pytest.fixture
def clean_env(monkeypatch):
    """Remove all ARBITER_ environment variables."""
    for key in list(os.environ.keys()):
        if key.startswith("ARBITER_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def reset_config():
    """Reset the config singleton around each test."""
    from arbiter.core.config import clear_config_cache

    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level after configure_logging()."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


# ============================================================================
# Agent and trade statistics factories
# ============================================================================


def make_arbitrator(host_name: str, port: int = 9999) -> Arbitrator:
    """Create an arbitrator at ``host_name:port``."""
    return Arbitrator(node_address=NodeAddress(host_name, port))


def make_registry(*host_names: str) -> DisputeAgentStore[Arbitrator]:
    """Create an agent store holding one arbitrator per host name."""
    store: DisputeAgentStore[Arbitrator] = DisputeAgentStore()
    for host_name in host_names:
        store.add_agent(make_arbitrator(host_name))
    return store


def make_history(*prefixes: str | None) -> TradeStatisticsStore:
    """Create a statistics store with one trade per prefix, newest first."""
    return TradeStatisticsStore(
        TradeStatisticsRecord(date=BASE_DATE - timedelta(minutes=i), arbitrator=prefix)
        for i, prefix in enumerate(prefixes)
    )


@pytest.fixture
def arbitrator_store():
    """Three arbitrators with distinct prefixes."""
    return make_registry("abcd1111", "wxyz2222", "qrst3333")


@pytest.fixture
def empty_history():
    return TradeStatisticsStore()


@pytest.fixture
def registry_factory():
    """Factory fixture for agent stores, see make_registry."""
    return make_registry


@pytest.fixture
def history_factory():
    """Factory fixture for statistics stores, see make_history."""
    return make_history
