"""madOS Bluetooth Connect - Mock backend for testing.

Simulates an adapter and a set of devices without calling bluetoothctl.
"""

from typing import Dict, List, Optional, Set

from .interfaces import BackendInterface, DeviceStatus, PairResult


class MockBluetoothBackend(BackendInterface):
    """Mock implementation for unit testing and headless demos.

    Devices must be made visible with :meth:`add_device` before they can
    be paired.  ``calls`` records every operation in order.
    """

    def __init__(self):
        """Initialize mock backend state."""
        self._powered = False
        self._scanning = False
        self._in_range: Set[str] = set()
        self._paired: Set[str] = set()
        self._connected: Set[str] = set()
        self._battery: Dict[str, str] = {}
        self._unreachable: Set[str] = set()
        self.calls: List[tuple] = []

    # -- test helpers -------------------------------------------------------

    def add_device(self, address: str, paired: bool = False,
                   battery: Optional[str] = None) -> None:
        """Make a device visible, optionally already paired."""
        address = address.upper()
        self._in_range.add(address)
        if paired:
            self._paired.add(address)
        if battery is not None:
            self._battery[address] = battery

    def set_unreachable(self, address: str, unreachable: bool = True) -> None:
        """Make connect attempts to *address* fail (device out of range)."""
        address = address.upper()
        if unreachable:
            self._unreachable.add(address)
        else:
            self._unreachable.discard(address)

    def clear_devices(self) -> None:
        """Forget every simulated device."""
        self._in_range.clear()
        self._paired.clear()
        self._connected.clear()
        self._battery.clear()
        self._unreachable.clear()

    @property
    def scanning(self) -> bool:
        return self._scanning

    # -- BackendInterface ---------------------------------------------------

    def power_on(self) -> None:
        self.calls.append(('power_on',))
        self._powered = True

    def connect(self, address: str) -> bool:
        self.calls.append(('connect', address))
        self._powered = True
        return self._try_connect(address.upper())

    def remove_and_pair(self, address: str) -> PairResult:
        self.calls.append(('remove_and_pair', address))
        address = address.upper()
        self._paired.discard(address)
        self._connected.discard(address)
        self._scanning = True
        try:
            if address not in self._in_range:
                return PairResult.PAIR_FAILED
            self._paired.add(address)
            if self._try_connect(address):
                return PairResult.CONNECTED
            return PairResult.PAIRED_NOT_CONNECTED
        finally:
            self._scanning = False

    def status(self, address: str) -> DeviceStatus:
        self.calls.append(('status', address))
        address = address.upper()
        if address not in self._paired:
            return DeviceStatus(paired=False)
        return DeviceStatus(
            paired=True,
            connected=address in self._connected,
            battery=self._battery.get(address),
        )

    def _try_connect(self, address: str) -> bool:
        if (not self._powered or address not in self._paired
                or address in self._unreachable):
            return False
        self._connected.add(address)
        return True
