#!/usr/bin/env python3
"""madOS Bluetooth Connect - Entry point."""

import sys

from .backend import check_bluetoothctl, ensure_bluetooth_service
from .config import load_devices, resolve_config_path
from .console import Console, setup_logging
from .errors import BtConnectError
from .factory import create_backend
from .menu import MenuController
from .translations import get_text, detect_system_language


def main():
    """Run the interactive device menu.

    Returns:
        Process exit status.
    """
    setup_logging()
    console = Console()
    lang = detect_system_language()

    console.line('=' * 35)
    console.line(f"   {get_text('title', lang)}")
    console.line('=' * 35)

    try:
        return _run(console, lang)
    except BtConnectError as exc:
        console.error(exc.message)
        return 1
    except KeyboardInterrupt:
        console.line()
        console.info(get_text('goodbye', lang))
        return 130


def _run(console, lang):
    check_bluetoothctl()
    if not ensure_bluetooth_service(
            on_start=lambda: console.warning(get_text('bt_not_running', lang))):
        console.warning(get_text('bt_start_failed', lang))
    devices = load_devices(resolve_config_path())

    console.status(get_text('found_devices', lang, count=len(devices)))

    menu = MenuController(devices, create_backend(), console=console, language=lang)
    return menu.run()


if __name__ == '__main__':
    sys.exit(main())
