# File: tests/test_presets.py
# Tests for remembered connection presets.

import json
import unittest
from unittest.mock import Mock

import pytest

from domain_model_importer.domain.models import ConnectionPreset, Driver
from domain_model_importer.presets import (
    InMemoryPresetStore,
    JsonFilePresetStore,
    PresetStore,
    default_presets,
    find_preset,
    save_preset,
)


POSTGRES = Driver("postgresql-42.jar", "org.postgresql.Driver")
UNKNOWN = Driver("acme-1.0.jar", "com.acme.Driver")


class TestInMemoryPresetStore(unittest.TestCase):

    def setUp(self):
        self.store = InMemoryPresetStore()

    def test_seeded_with_defaults(self):
        self.assertEqual(len(self.store.all()), len(default_presets()))
        self.assertEqual(self.store.get("org.h2.Driver").jdbc_url, "jdbc:h2:tcp://[host]/[database]")

    def test_find_known_driver(self):
        preset = find_preset(self.store, POSTGRES)
        self.assertEqual(preset.db, "postgre")
        self.assertEqual(preset.jdbc_url, "jdbc:postgresql://[host]:[port]/[database]")
        self.assertEqual(preset.jdbc_driver_jar, "postgresql-42.jar")

    def test_find_unknown_driver(self):
        """An unknown driver class gets the generic preset carrying the driver's jar and class"""
        preset = find_preset(self.store, UNKNOWN)
        self.assertEqual(preset.db, "unknown")
        self.assertEqual(preset.jdbc_url, "jdbc:[database]")
        self.assertEqual(preset.user, "admin")
        self.assertEqual(preset.jdbc_driver_class, "com.acme.Driver")
        self.assertEqual(preset.jdbc_driver_jar, "acme-1.0.jar")

    def test_put_forgets_password(self):
        preset = ConnectionPreset(
            db="postgre",
            jdbc_driver_class="org.postgresql.Driver",
            jdbc_url="jdbc:postgresql://db:5432/shop",
            user="shop",
            password="secret",
            schemas=("PUBLIC",),
        )
        self.store.put(preset)
        stored = self.store.get("org.postgresql.Driver")
        self.assertEqual(stored.jdbc_url, "jdbc:postgresql://db:5432/shop")
        self.assertEqual(stored.password, "")
        self.assertEqual(stored.schemas, ())


def test_find_preset_survives_store_errors():
    store = Mock(spec=PresetStore)
    store.get.side_effect = RuntimeError("store is broken")

    preset = find_preset(store, POSTGRES)

    assert preset.db == "unknown"
    assert preset.jdbc_driver_class == "org.postgresql.Driver"


def test_save_preset_survives_store_errors():
    store = Mock(spec=PresetStore)
    store.put.side_effect = RuntimeError("store is broken")
    save_preset(store, ConnectionPreset(jdbc_driver_class="org.h2.Driver"))
    store.put.assert_called_once()


def test_json_store_round_trip(tmp_path):
    path = tmp_path / "presets" / "presets.json"
    store = JsonFilePresetStore(path)
    store.put(ConnectionPreset(
        db="postgre",
        jdbc_driver_class="org.postgresql.Driver",
        jdbc_url="jdbc:postgresql://db:5432/shop",
        user="shop",
        password="secret",
    ))

    saved = json.loads(path.read_text(encoding="utf-8"))
    assert all("password" not in item for item in saved)

    reloaded = JsonFilePresetStore(path)
    preset = find_preset(reloaded, POSTGRES)
    assert preset.jdbc_url == "jdbc:postgresql://db:5432/shop"
    assert preset.user == "shop"
    assert preset.password == ""


def test_json_store_only_overrides_url_and_user(tmp_path):
    path = tmp_path / "presets.json"
    path.write_text(json.dumps([
        {"db": "mine", "jdbcDriverClass": "org.h2.Driver", "jdbcUrl": "jdbc:h2:mem:x", "user": "me"},
        {"db": "acme", "jdbcDriverClass": "com.acme.Driver", "jdbcUrl": "jdbc:acme://x", "user": "a"},
    ]), encoding="utf-8")

    store = JsonFilePresetStore(path)

    h2 = store.get("org.h2.Driver")
    assert (h2.db, h2.jdbc_url, h2.user) == ("h2", "jdbc:h2:mem:x", "me")
    assert store.get("com.acme.Driver").jdbc_url == "jdbc:acme://x"


def test_json_store_ignores_corrupt_file(tmp_path, caplog):
    path = tmp_path / "presets.json"
    path.write_text("{not json", encoding="utf-8")

    store = JsonFilePresetStore(path)

    assert len(store.all()) == len(default_presets())
    assert "Ignoring unreadable presets file" in caplog.text


def test_json_store_unwritable_path(tmp_path, caplog):
    path = tmp_path / "presets.json"
    path.mkdir()

    store = JsonFilePresetStore(path)
    store.put(ConnectionPreset(jdbc_driver_class="org.h2.Driver", jdbc_url="jdbc:h2:mem:y"))

    assert store.get("org.h2.Driver").jdbc_url == "jdbc:h2:mem:y"
    assert "Could not save connection presets" in caplog.text


@pytest.mark.parametrize("payload", ["[1, 2]", "{\"a\": 1}", "[{\"user\": \"x\"}]"])
def test_json_store_ignores_unexpected_shapes(tmp_path, payload):
    path = tmp_path / "presets.json"
    path.write_text(payload, encoding="utf-8")
    assert JsonFilePresetStore(path).get("org.h2.Driver").user == "sa"
