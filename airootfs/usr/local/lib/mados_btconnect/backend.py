"""madOS Bluetooth Connect - Backend using bluetoothctl.

All Bluetooth operations are performed by invoking bluetoothctl as a
subprocess.  Every call is bounded by a timeout, and waits for the adapter
are bounded polls instead of fixed sleeps.  Parsing of bluetoothctl output
is kept in the helpers at the bottom of this module.
"""

import logging
import re
import shutil
import subprocess
import time
from typing import Callable, Dict, List, Optional

from . import config
from .errors import MissingDependencyError
from .interfaces import BackendInterface, DeviceStatus, PairResult

log = logging.getLogger(__name__)

BLUETOOTHCTL = 'bluetoothctl'


# ---------------------------------------------------------------------------
# Helper: run bluetoothctl
# ---------------------------------------------------------------------------

def _run_btctl(args: List[str],
               timeout: float = config.COMMAND_TIMEOUT) -> subprocess.CompletedProcess:
    """Execute a bluetoothctl command and return the result.

    Args:
        args: Arguments to pass after 'bluetoothctl'.
        timeout: Maximum seconds to wait.

    Returns:
        A subprocess.CompletedProcess instance.

    Raises:
        MissingDependencyError: If bluetoothctl is not installed.
        subprocess.TimeoutExpired: If the command outlives *timeout*.
    """
    cmd = [BLUETOOTHCTL] + args
    log.debug('running %s', ' '.join(cmd))
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        raise MissingDependencyError(
            'bluetoothctl not found. Please install bluez package.'
        ) from None
    log.debug('%s exited with %d', ' '.join(cmd), result.returncode)
    return result


def _run_btctl_ok(args: List[str], timeout: float = config.COMMAND_TIMEOUT) -> bool:
    """Run bluetoothctl and report whether it exited with status 0.

    A timeout counts as failure.
    """
    try:
        return _run_btctl(args, timeout=timeout).returncode == 0
    except subprocess.TimeoutExpired:
        log.warning('bluetoothctl %s timed out after %ss', ' '.join(args), timeout)
        return False


def _run_btctl_output(args: List[str], timeout: float = config.COMMAND_TIMEOUT) -> str:
    """Run bluetoothctl and return stdout, or '' on timeout."""
    try:
        return _run_btctl(args, timeout=timeout).stdout
    except subprocess.TimeoutExpired:
        log.warning('bluetoothctl %s timed out after %ss', ' '.join(args), timeout)
        return ''


def wait_until(predicate: Callable[[], bool], timeout: float,
               interval: float = config.POLL_INTERVAL) -> bool:
    """Poll *predicate* until it is true or *timeout* seconds pass.

    Returns:
        True if the predicate became true in time.
    """
    deadline = time.monotonic() + timeout
    while True:
        if predicate():
            return True
        if time.monotonic() >= deadline:
            return False
        time.sleep(interval)


# ---------------------------------------------------------------------------
# Startup checks
# ---------------------------------------------------------------------------

def check_bluetoothctl() -> None:
    """Raise MissingDependencyError if bluetoothctl is not on PATH."""
    if shutil.which(BLUETOOTHCTL) is None:
        raise MissingDependencyError(
            'bluetoothctl not found. Please install bluez package.'
        )


def is_service_active() -> bool:
    """Return True if the bluetooth systemd service is running."""
    try:
        result = subprocess.run(
            ['systemctl', 'is-active', '--quiet', 'bluetooth'],
            capture_output=True, text=True, timeout=5,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        return False
    return result.returncode == 0


def ensure_bluetooth_service(on_start: Optional[Callable[[], None]] = None) -> bool:
    """Start the bluetooth service if it is not running.

    Starting needs root, so ``sudo`` may prompt for a password.

    Args:
        on_start: Called just before the service is started, so the
            caller can warn the user.

    Returns:
        True if the service is active afterwards.
    """
    if is_service_active():
        return True

    if on_start is not None:
        on_start()
    try:
        subprocess.run(['sudo', 'systemctl', 'start', 'bluetooth'], timeout=60)
    except (FileNotFoundError, subprocess.TimeoutExpired) as exc:
        log.warning('could not start bluetooth service: %s', exc)
        return False
    return wait_until(is_service_active, config.SERVICE_WAIT_SECONDS)


# ---------------------------------------------------------------------------
# Backend
# ---------------------------------------------------------------------------

class BluetoothctlBackend(BackendInterface):
    """Stateless adapter over synchronous bluetoothctl calls."""

    def is_powered(self) -> bool:
        """Return True if the adapter reports ``Powered: yes``."""
        return parse_powered(_run_btctl_output(['show']))

    def power_on(self) -> None:
        # The adapter may already be on; failure is not an error here.
        _run_btctl_ok(['power', 'on'])

    def known_addresses(self) -> List[str]:
        """Return the addresses bluetoothctl lists under ``devices``."""
        return parse_known_addresses(_run_btctl_output(['devices']))

    def is_known(self, address: str) -> bool:
        return address.upper() in self.known_addresses()

    def connect(self, address: str) -> bool:
        """Power on the adapter and connect to *address*.

        Returns:
            True if bluetoothctl reported success.
        """
        self.power_on()
        if not wait_until(self.is_powered, config.POWER_WAIT_SECONDS):
            log.warning('adapter did not report powered within %ss',
                        config.POWER_WAIT_SECONDS)
        return _run_btctl_ok(['connect', address], timeout=config.CONNECT_TIMEOUT)

    def remove_and_pair(self, address: str) -> PairResult:
        """Remove any existing pairing, then scan, pair, trust and connect.

        Scanning is always turned off before returning.
        """
        _run_btctl_ok(['remove', address])
        _run_btctl_ok(['discoverable', 'on'])
        self.start_scan()
        try:
            if not wait_until(lambda: self.is_known(address), config.SCAN_WAIT_SECONDS):
                log.info('%s not seen during scan, trying to pair anyway', address)

            if not _run_btctl_ok(['pair', address], timeout=config.CONNECT_TIMEOUT):
                return PairResult.PAIR_FAILED

            _run_btctl_ok(['trust', address])
            if _run_btctl_ok(['connect', address], timeout=config.CONNECT_TIMEOUT):
                return PairResult.CONNECTED
            return PairResult.PAIRED_NOT_CONNECTED
        finally:
            self.stop_scan()

    def start_scan(self) -> None:
        """Start discovery.

        ``bluetoothctl scan on`` may keep running, so a timeout is expected
        and not treated as failure.
        """
        try:
            _run_btctl(['scan', 'on'], timeout=config.SCAN_COMMAND_TIMEOUT)
        except subprocess.TimeoutExpired:
            pass

    def stop_scan(self) -> None:
        try:
            _run_btctl(['scan', 'off'], timeout=config.SCAN_COMMAND_TIMEOUT)
        except subprocess.TimeoutExpired:
            log.warning('bluetoothctl scan off timed out')

    def status(self, address: str) -> DeviceStatus:
        """Report whether *address* is paired, connected, and its battery.

        A device missing from ``bluetoothctl devices`` is reported as not
        paired without querying ``info``.
        """
        if not self.is_known(address):
            return DeviceStatus(paired=False)

        info = parse_info(_run_btctl_output(['info', address]))
        return DeviceStatus(
            paired=True,
            connected=info.get('Connected', '').lower() == 'yes',
            battery=parse_battery(info.get('Battery Percentage', '')),
        )


# ---------------------------------------------------------------------------
# Internal parsing helpers
# ---------------------------------------------------------------------------

_DEVICE_LINE_RE = re.compile(r'Device\s+([0-9A-Fa-f:]{17})\b')
_BATTERY_RE = re.compile(r'\(([^)]*)\)')


def parse_known_addresses(output: str) -> List[str]:
    """Parse ``bluetoothctl devices`` output into upper-case addresses.

    Expected format: 'Device AA:BB:CC:DD:EE:FF DeviceName'
    """
    addresses: List[str] = []
    for line in output.splitlines():
        match = _DEVICE_LINE_RE.search(line)
        if match:
            addresses.append(match.group(1).upper())
    return addresses


def parse_info(output: str) -> Dict[str, str]:
    """Parse ``bluetoothctl info`` output into a field dictionary.

    Lines look like '\\tConnected: yes'.  The first occurrence of a field
    wins.
    """
    fields: Dict[str, str] = {}
    for line in output.splitlines():
        key, sep, value = line.strip().partition(':')
        if sep and key and key not in fields:
            fields[key] = value.strip()
    return fields


def parse_powered(output: str) -> bool:
    """Return True if ``bluetoothctl show`` output says ``Powered: yes``."""
    return parse_info(output).get('Powered', '').lower() == 'yes'


def parse_battery(value: str) -> Optional[str]:
    """Extract the percentage from a 'Battery Percentage' value.

    '0x5a (90)' -> '90'.  Returns None when no reading is present.
    """
    match = _BATTERY_RE.search(value)
    if match and match.group(1).strip():
        return match.group(1).strip()
    return None
