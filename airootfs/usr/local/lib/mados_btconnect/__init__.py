"""madOS Bluetooth Connect.

An interactive terminal menu for connecting, re-pairing and checking the
status of a handful of preconfigured Bluetooth devices. Uses bluetoothctl
as the backend for all Bluetooth operations.
"""

__version__ = "1.0.0"
__app_id__ = "mados-bt-connect"
__app_name__ = "Bluetooth Device Manager"
