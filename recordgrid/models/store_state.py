from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union

from .dataset import DataSet
from .errors import RecordGridError

"""DataStore state variants.

The store is always in exactly one of four states; each state is its own
frozen dataclass so a payload can only exist on the variant that owns it.

State transitions: idle → loading → (loaded | error), reset() → idle
"""

__all__ = [
    "StoreStatus",
    "IdleState",
    "LoadingState",
    "LoadedState",
    "ErrorState",
    "StoreState",
]


class StoreStatus(Enum):
    """Status enum for the DataStore lifecycle.

    - IDLE: nothing loaded
    - LOADING: a load is in progress
    - LOADED: a fully validated DataSet is available
    - ERROR: the last load failed
    """
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


@dataclass(frozen=True)
class IdleState:
    status: ClassVar[StoreStatus] = StoreStatus.IDLE


@dataclass(frozen=True)
class LoadingState:
    status: ClassVar[StoreStatus] = StoreStatus.LOADING


@dataclass(frozen=True)
class LoadedState:
    data: DataSet
    status: ClassVar[StoreStatus] = StoreStatus.LOADED


@dataclass(frozen=True)
class ErrorState:
    error: RecordGridError
    status: ClassVar[StoreStatus] = StoreStatus.ERROR


StoreState = Union[IdleState, LoadingState, LoadedState, ErrorState]
