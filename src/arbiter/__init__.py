# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Arbiter Contributors

"""Arbiter - dispute agent selection for peer-to-peer trading nodes.

A trading node picks one dispute agent (arbitrator or mediator) from the
agents currently known on the network whenever a trade is opened. Arbiter
makes that choice from two locally visible inputs:

  Trade statistics (gossiped, arbitrator stored as a 4 char address prefix)
    + Dispute agent registry (live, keyed by full node address)
    → Selection (least recently used, or uniformly random)

Both inputs are owned by other parts of the node and are only ever read
through a snapshot taken at the start of a selection call.
"""

__version__ = "0.1.0"

from . import (
    core as core,
    dispute as dispute,
)
