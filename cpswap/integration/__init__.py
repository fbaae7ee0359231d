"""
In-process collaborators and the host shell around the swap core.
"""

from .authorization import SwapAuthorizer, identity_from_pubkey
from .clock import FixedClock, SystemClock
from .derivation import InvalidSeeds, PoolAddressDeriver, create_address, find_address
from .notifier import EventLog, LoggingNotifier, event_to_dict
from .swap_service import PoolInfo, SwapService

__all__ = [
    "SwapAuthorizer",
    "identity_from_pubkey",
    "FixedClock",
    "SystemClock",
    "InvalidSeeds",
    "PoolAddressDeriver",
    "create_address",
    "find_address",
    "EventLog",
    "LoggingNotifier",
    "event_to_dict",
    "PoolInfo",
    "SwapService",
]
