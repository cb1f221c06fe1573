"""madOS Bluetooth Connect - Configuration.

Timing constants (overridable from the environment) and the loader for the
device list file.  The device file is a small YAML list::

    - label: Headphones
      value: AA:BB:CC:DD:EE:FF
    - label: "Car Kit"
      value: 11:22:33:44:55:66
"""

import os
import re
from typing import List, Optional

from .errors import ConfigNotFoundError, ConfigReadError, EmptyConfigError
from .interfaces import DeviceEntry


def get_float_env(key: str, default: float) -> float:
    """Get a float value from an environment variable."""
    try:
        return float(os.environ.get(key, default))
    except ValueError:
        return default


# --- Device list ---
DEVICE_CONFIG_ENV = "MADOS_BT_DEVICES"
DEFAULT_DEVICE_CONFIG = os.path.expanduser("~/.config/mados/btdevice.yml")

# --- bluetoothctl timeouts (seconds) ---
COMMAND_TIMEOUT = get_float_env("MADOS_BT_COMMAND_TIMEOUT", 15)
CONNECT_TIMEOUT = get_float_env("MADOS_BT_CONNECT_TIMEOUT", 30)
SCAN_COMMAND_TIMEOUT = 3

# --- Upper bounds for polling waits (seconds) ---
POWER_WAIT_SECONDS = get_float_env("MADOS_BT_POWER_WAIT", 5)
SCAN_WAIT_SECONDS = get_float_env("MADOS_BT_SCAN_WAIT", 10)
SERVICE_WAIT_SECONDS = get_float_env("MADOS_BT_SERVICE_WAIT", 10)
POLL_INTERVAL = 0.5

# --- Menu ---
INVALID_PAUSE = 1.0

_ITEM_RE = re.compile(r'^-\s*(\w+)\s*:\s*(.*)$')
_FIELD_RE = re.compile(r'^\s+(\w+)\s*:\s*(.*)$')
_ADDRESS_RE = re.compile(r'^[0-9A-Fa-f:]+$')


def resolve_config_path(path: Optional[str] = None) -> str:
    """Return the device file to load.

    An explicit *path* wins, then ``$MADOS_BT_DEVICES``, then the default
    under ``~/.config/mados``.
    """
    if path:
        return path
    return os.environ.get(DEVICE_CONFIG_ENV) or DEFAULT_DEVICE_CONFIG


def load_devices(path: str) -> List[DeviceEntry]:
    """Read the labelled device addresses from *path*.

    Args:
        path: Location of the device list file.

    Returns:
        DeviceEntry objects in file order.

    Raises:
        ConfigNotFoundError: If *path* does not exist.
        ConfigReadError: If *path* cannot be opened or is not UTF-8.
        EmptyConfigError: If no complete entry could be parsed.
    """
    if not os.path.isfile(path):
        raise ConfigNotFoundError(
            f"Device configuration file not found: {path}", path=path
        )

    try:
        with open(path, encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigReadError(
            f"Cannot read device configuration file {path}: {exc}", path=path
        ) from exc

    devices = parse_devices(text)

    if not devices:
        raise EmptyConfigError(
            "No devices found in configuration file", path=path
        )
    return devices


def parse_devices(text: str) -> List[DeviceEntry]:
    """Parse device list text into DeviceEntry objects.

    Items missing a label or a valid address are skipped.
    """
    devices: List[DeviceEntry] = []
    item: Optional[dict] = None

    for raw in text.splitlines():
        line = raw.rstrip()
        if not line.strip() or line.lstrip().startswith('#'):
            continue

        match = _ITEM_RE.match(line)
        if match:
            _append_item(devices, item)
            item = {match.group(1): match.group(2)}
            continue

        match = _FIELD_RE.match(line)
        if match and item is not None:
            item[match.group(1)] = match.group(2)

    _append_item(devices, item)
    return devices


def _append_item(devices: List[DeviceEntry], item: Optional[dict]) -> None:
    if not item:
        return
    label = _unquote(item.get('label', ''))
    address = _unquote(item.get('value', ''))
    if label and _ADDRESS_RE.match(address):
        devices.append(DeviceEntry(label=label, address=address))


def _unquote(value: str) -> str:
    value = value.strip()
    if value[:1] not in ('"', "'"):
        value = value.split(' #', 1)[0].strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in '"\'':
        value = value[1:-1]
    return value.strip()
