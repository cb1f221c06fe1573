"""madOS Bluetooth Connect - Backend factory.

Factory pattern to create backend instances.
Enables dependency injection for testing.
"""

import os

from .interfaces import BackendInterface


def create_backend() -> BackendInterface:
    """Create backend instance based on environment mode.

    Environment:
        MADOS_BT_CONFIG_MODE: 'production' (default) or 'test'

    Returns:
        Backend instance implementing Bluetooth operations.
    """
    mode = os.environ.get("MADOS_BT_CONFIG_MODE", "production")

    if mode == "test":
        from .mock_backend import MockBluetoothBackend

        return MockBluetoothBackend()

    from .backend import BluetoothctlBackend

    return BluetoothctlBackend()
