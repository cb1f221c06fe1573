"""madOS Bluetooth Connect - Exceptions.

Only startup problems are raised as exceptions.  Connection and pairing
failures are ordinary results that the menu reports and recovers from.
"""


class BtConnectError(Exception):
    """Base exception for mados-bt-connect."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class MissingDependencyError(BtConnectError):
    """bluetoothctl (or another required tool) is not installed."""


class ConfigNotFoundError(BtConnectError):
    """The device configuration file does not exist."""

    def __init__(self, message: str, path: str = None):
        super().__init__(message)
        self.path = path


class ConfigReadError(BtConnectError):
    """The device configuration file exists but cannot be read as UTF-8 text."""

    def __init__(self, message: str, path: str = None):
        super().__init__(message)
        self.path = path


class EmptyConfigError(BtConnectError):
    """The device configuration file contains no usable entries."""

    def __init__(self, message: str, path: str = None):
        super().__init__(message)
        self.path = path
