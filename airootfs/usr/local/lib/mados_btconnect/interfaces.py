"""madOS Bluetooth Connect - Abstract interfaces.

Defines the data types exchanged with the menu and the contract every
backend implements, so the menu can be driven without real hardware.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class DeviceEntry:
    """A preconfigured device: a display label and its hardware address."""
    label: str
    address: str


@dataclass
class DeviceStatus:
    """What bluetoothctl knows about a device."""

    paired: bool = False
    connected: bool = False
    battery: Optional[str] = None


class PairResult(Enum):
    """Outcome of a remove-and-pair attempt."""

    CONNECTED = "connected"
    PAIRED_NOT_CONNECTED = "paired_not_connected"
    PAIR_FAILED = "pair_failed"

    @property
    def ok(self) -> bool:
        return self is PairResult.CONNECTED


class BackendInterface(ABC):
    """Abstract interface for Bluetooth device operations.

    Each method performs a single operation; retry policy belongs to the
    caller.
    """

    @abstractmethod
    def power_on(self) -> None:
        """Power the adapter on, ignoring failure."""

    @abstractmethod
    def connect(self, address: str) -> bool:
        """Power on and connect to a device."""

    @abstractmethod
    def remove_and_pair(self, address: str) -> PairResult:
        """Forget a device, pair it again and connect."""

    @abstractmethod
    def status(self, address: str) -> DeviceStatus:
        """Report paired/connected state and battery level."""
