"""madOS Bluetooth Connect - Interactive menu.

Lists the configured devices, dispatches the user's choice to the backend
and offers a single recovery menu when a connection attempt fails.
Retrying is always the user's decision; nothing here loops on failure.
"""

import re
import time
from typing import Callable, List, Optional

from .console import Console
from .interfaces import BackendInterface, DeviceEntry, PairResult
from .translations import get_text
from . import config

_NUMBER_RE = re.compile(r'[0-9]+')

RECOVERY_RETRY = '1'
RECOVERY_REPAIR = '2'
RECOVERY_STATUS = '3'


class MenuController:
    """Terminal menu over a fixed list of devices.

    Args:
        devices: Devices in display order; menu number ``n`` selects
            ``devices[n - 1]``.
        backend: Performs the Bluetooth operations.
        console: Where messages are printed.
        input_func: Reads one line of user input; ``EOFError`` ends the menu.
        sleep: Used for the pause after an invalid selection.
        language: Translation language name.
    """

    def __init__(self, devices: List[DeviceEntry], backend: BackendInterface,
                 console: Optional[Console] = None,
                 input_func: Optional[Callable[[str], str]] = None,
                 sleep: Callable[[float], None] = time.sleep,
                 language: str = 'English'):
        self.devices = list(devices)
        self.backend = backend
        self.console = console or Console()
        self._input = input_func or input
        self._sleep = sleep
        self._lang = language

    def _t(self, key, **kwargs):
        return get_text(key, self._lang, **kwargs)

    def _prompt(self, key) -> Optional[str]:
        """Read a line of input, or None at end of input."""
        try:
            return self._input(self._t(key)).strip()
        except EOFError:
            self.console.line()
            return None

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    def run(self) -> int:
        """Show the menu until the user quits.

        Returns:
            The process exit status (always 0).
        """
        while True:
            self.show_device_menu()
            choice = self._prompt('select_prompt')

            if choice is None or choice.lower() == 'q':
                self.console.info(self._t('goodbye'))
                return 0

            if choice.lower() == 's':
                self.console.line()
                self.show_all_status()
                continue

            index = self.parse_selection(choice)
            if index is None:
                self.console.error(self._t('invalid_selection'))
                self._sleep(config.INVALID_PAUSE)
                continue

            self.handle_device(self.devices[index])

    def parse_selection(self, choice: str) -> Optional[int]:
        """Map a 1-based menu number to a list index.

        Returns:
            The 0-based index, or None for non-numeric or out-of-range input.
        """
        if not _NUMBER_RE.fullmatch(choice):
            return None
        number = int(choice)
        if 1 <= number <= len(self.devices):
            return number - 1
        return None

    def show_device_menu(self) -> None:
        self.console.line()
        self.console.info(self._t('available_devices'))
        self.console.line('=' * 32)
        for number, device in enumerate(self.devices, start=1):
            self.console.line(f"{number:2d}) {device.label:<20s} ({device.address})")
        self.console.line()
        self.console.line(self._t('options'))
        self.console.line('  ' + self._t('opt_quit'))
        self.console.line('  ' + self._t('opt_status'))
        self.console.line()

    # ------------------------------------------------------------------
    # Device actions
    # ------------------------------------------------------------------

    def handle_device(self, device: DeviceEntry) -> None:
        """Connect to *device*, offering recovery choices on failure."""
        self.console.line()
        self.console.info(self._t('selected', label=device.label, address=device.address))

        if self.connect(device):
            self.console.line()
            self._prompt('press_enter')
            return

        self.console.line()
        choice = self.recovery_menu()
        if choice == RECOVERY_RETRY:
            self.connect(device)
        elif choice == RECOVERY_REPAIR:
            self.remove_and_pair(device)
        elif choice == RECOVERY_STATUS:
            self.show_status(device)
        else:
            return

        self.console.line()
        self._prompt('press_enter')

    def recovery_menu(self) -> Optional[str]:
        """Show the options offered after a failed connection."""
        self.console.line(self._t('recovery_title'))
        for key in ('recovery_retry', 'recovery_repair',
                    'recovery_status', 'recovery_back'):
            self.console.line(self._t(key))
        self.console.line()
        return self._prompt('recovery_prompt')

    def connect(self, device: DeviceEntry) -> bool:
        self.console.status(self._t('connecting', label=device.label, address=device.address))
        if self.backend.connect(device.address):
            self.console.status(self._t('connect_ok', label=device.label))
            return True
        self.console.error(self._t('connect_failed', label=device.label))
        return False

    def remove_and_pair(self, device: DeviceEntry) -> bool:
        self.console.warning(self._t('repairing', label=device.label, address=device.address))
        self.console.info(self._t('repair_steps'))

        result = self.backend.remove_and_pair(device.address)
        if result is PairResult.CONNECTED:
            self.console.status(self._t('pair_ok', label=device.label))
        elif result is PairResult.PAIRED_NOT_CONNECTED:
            self.console.error(self._t('pair_partial'))
        else:
            self.console.error(self._t('pair_failed', label=device.label))
            self.console.info(self._t('pair_mode_hint'))
        return result.ok

    def show_status(self, device: DeviceEntry) -> None:
        self.console.info(self._t('status_for', label=device.label, address=device.address))

        status = self.backend.status(device.address)
        if not status.paired:
            self.console.line(self._t('not_paired'))
            return

        self.console.line(self._t('is_paired'))
        self.console.line(self._t('is_connected' if status.connected else 'not_connected'))
        if status.battery:
            self.console.line(self._t('battery', battery=status.battery))

    def show_all_status(self) -> None:
        for device in self.devices:
            self.show_status(device)
            self.console.line()
