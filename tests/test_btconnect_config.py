#!/usr/bin/env python3
"""
Unit tests for the mados-bt-connect device configuration loader.

These tests only touch temporary files; no Bluetooth tooling is needed.
"""

import os
import sys
import tempfile
import unittest
from unittest.mock import patch

sys.path.insert(
    0, os.path.join(os.path.dirname(__file__), "..", "airootfs", "usr", "local", "lib")
)

from mados_btconnect import config
from mados_btconnect.config import load_devices, parse_devices, resolve_config_path
from mados_btconnect.errors import ConfigNotFoundError, ConfigReadError, EmptyConfigError
from mados_btconnect.interfaces import DeviceEntry


SAMPLE = """\
# Bluetooth devices
- label: Headphones
  value: AA:BB:CC:DD:EE:FF
- label: "Car Kit"
  value: 11:22:33:44:55:66

- label: Keyboard
  value: a1:b2:c3:d4:e5:f6
"""


class _TempFileMixin:
    def write_config(self, text):
        fd, path = tempfile.mkstemp(suffix=".yml")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        self.addCleanup(os.unlink, path)
        return path


class TestParseDevices(unittest.TestCase):
    """Tests for parse_devices()."""

    def test_entries_in_file_order(self):
        """Every complete item becomes one entry, in file order."""
        devices = parse_devices(SAMPLE)
        self.assertEqual(
            devices,
            [
                DeviceEntry("Headphones", "AA:BB:CC:DD:EE:FF"),
                DeviceEntry("Car Kit", "11:22:33:44:55:66"),
                DeviceEntry("Keyboard", "a1:b2:c3:d4:e5:f6"),
            ],
        )

    def test_single_entry(self):
        devices = parse_devices("- label: Headphones\n  value: AA:BB:CC:DD:EE:FF\n")
        self.assertEqual(devices, [DeviceEntry("Headphones", "AA:BB:CC:DD:EE:FF")])

    def test_value_before_label(self):
        """Fields of an item may appear in any order."""
        devices = parse_devices("- value: AA:BB:CC:DD:EE:FF\n  label: Mouse\n")
        self.assertEqual(devices, [DeviceEntry("Mouse", "AA:BB:CC:DD:EE:FF")])

    def test_single_quoted_label(self):
        devices = parse_devices("- label: 'Living Room'\n  value: AA:BB:CC:DD:EE:FF\n")
        self.assertEqual(devices[0].label, "Living Room")

    def test_trailing_comment_stripped(self):
        devices = parse_devices(
            "- label: Speaker  # kitchen\n  value: AA:BB:CC:DD:EE:FF # main\n"
        )
        self.assertEqual(devices, [DeviceEntry("Speaker", "AA:BB:CC:DD:EE:FF")])

    def test_item_without_value_skipped(self):
        text = "- label: Broken\n- label: Good\n  value: AA:BB:CC:DD:EE:FF\n"
        self.assertEqual(parse_devices(text), [DeviceEntry("Good", "AA:BB:CC:DD:EE:FF")])

    def test_item_without_label_skipped(self):
        self.assertEqual(parse_devices("- value: AA:BB:CC:DD:EE:FF\n"), [])

    def test_invalid_address_skipped(self):
        self.assertEqual(parse_devices("- label: Bad\n  value: not-an-address\n"), [])

    def test_empty_text(self):
        self.assertEqual(parse_devices(""), [])

    def test_entries_are_immutable(self):
        entry = parse_devices(SAMPLE)[0]
        with self.assertRaises(AttributeError):
            entry.label = "Other"


class TestLoadDevices(_TempFileMixin, unittest.TestCase):
    """Tests for load_devices()."""

    def test_loads_all_entries(self):
        path = self.write_config(SAMPLE)
        devices = load_devices(path)
        self.assertEqual(len(devices), 3)
        self.assertEqual([d.label for d in devices], ["Headphones", "Car Kit", "Keyboard"])

    def test_missing_file_raises(self):
        missing = os.path.join(tempfile.gettempdir(), "mados-bt-does-not-exist.yml")
        with self.assertRaises(ConfigNotFoundError) as ctx:
            load_devices(missing)
        self.assertEqual(ctx.exception.path, missing)
        self.assertIn(missing, ctx.exception.message)

    def test_empty_file_raises(self):
        path = self.write_config("# nothing configured yet\n")
        with self.assertRaises(EmptyConfigError):
            load_devices(path)

    def test_non_utf8_file_raises_read_error(self):
        fd, path = tempfile.mkstemp(suffix=".yml")
        with os.fdopen(fd, "wb") as f:
            f.write(b"- label: Caf\xe9 speaker\n  value: AA:BB:CC:DD:EE:FF\n")
        self.addCleanup(os.unlink, path)
        with self.assertRaises(ConfigReadError) as ctx:
            load_devices(path)
        self.assertEqual(ctx.exception.path, path)

    def test_unreadable_file_raises_read_error(self):
        path = self.write_config(SAMPLE)
        with patch("builtins.open", side_effect=PermissionError(13, "Permission denied")):
            with self.assertRaises(ConfigReadError) as ctx:
                load_devices(path)
        self.assertIn("Permission denied", ctx.exception.message)

    def test_file_with_only_incomplete_items_raises(self):
        path = self.write_config("- label: Headphones\n")
        with self.assertRaises(EmptyConfigError):
            load_devices(path)


class TestShippedConfig(unittest.TestCase):
    """The example file installed to /etc/skel must stay loadable."""

    def test_skel_config_loads(self):
        path = os.path.join(
            os.path.dirname(__file__), "..", "airootfs", "etc", "skel",
            ".config", "mados", "btdevice.yml",
        )
        devices = load_devices(path)
        self.assertEqual([d.label for d in devices], ["Headphones", "Car Kit"])


class TestResolveConfigPath(unittest.TestCase):
    """Tests for resolve_config_path()."""

    def test_explicit_path_wins(self):
        with patch.dict(os.environ, {"MADOS_BT_DEVICES": "/env/devices.yml"}):
            self.assertEqual(resolve_config_path("/explicit.yml"), "/explicit.yml")

    def test_environment_variable(self):
        with patch.dict(os.environ, {"MADOS_BT_DEVICES": "/env/devices.yml"}):
            self.assertEqual(resolve_config_path(), "/env/devices.yml")

    def test_default_path(self):
        with patch.dict(os.environ, {}, clear=True):
            self.assertEqual(resolve_config_path(), config.DEFAULT_DEVICE_CONFIG)


class TestGetFloatEnv(unittest.TestCase):
    def test_reads_value(self):
        with patch.dict(os.environ, {"MADOS_BT_TEST_FLOAT": "2.5"}):
            self.assertEqual(config.get_float_env("MADOS_BT_TEST_FLOAT", 1), 2.5)

    def test_bad_value_falls_back(self):
        with patch.dict(os.environ, {"MADOS_BT_TEST_FLOAT": "soon"}):
            self.assertEqual(config.get_float_env("MADOS_BT_TEST_FLOAT", 7), 7)


if __name__ == "__main__":
    unittest.main()
