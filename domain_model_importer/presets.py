"""
Remembered JDBC connection presets.

Presets are a convenience cache: a broken or unwritable store must never stop
an import, so store errors are logged and swallowed here.
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from pathlib import Path
from typing import Dict, List, Optional, Union

from .constants import DEFAULT_DB_PRESETS, UNKNOWN_PRESET
from .domain.models import ConnectionPreset, Driver


logger = logging.getLogger(__name__)


def default_presets() -> List[ConnectionPreset]:
    return [ConnectionPreset.from_dict(preset) for preset in DEFAULT_DB_PRESETS]


class PresetStore(ABC):
    """Lookup-by-driver-class and save-or-update of connection presets."""

    @abstractmethod
    def get(self, driver_class: str) -> Optional[ConnectionPreset]:
        pass

    @abstractmethod
    def put(self, preset: ConnectionPreset) -> None:
        pass


class InMemoryPresetStore(PresetStore):
    """Preset store seeded with the built-in presets."""

    def __init__(self, presets: Optional[List[ConnectionPreset]] = None):
        self._presets: Dict[str, ConnectionPreset] = {}
        for preset in default_presets() if presets is None else presets:
            self._presets[preset.jdbc_driver_class] = preset

    def get(self, driver_class: str) -> Optional[ConnectionPreset]:
        return self._presets.get(driver_class)

    def put(self, preset: ConnectionPreset) -> None:
        # Passwords are never remembered.
        self._presets[preset.jdbc_driver_class] = replace(preset, password="", schemas=())

    def all(self) -> List[ConnectionPreset]:
        return list(self._presets.values())


class JsonFilePresetStore(InMemoryPresetStore):
    """
    Preset store backed by a JSON file.

    Only ``jdbcUrl`` and ``user`` of a stored entry override the built-in
    preset with the same driver class; unknown driver classes are added.
    """

    def __init__(self, path: Union[str, Path]):
        super().__init__()
        self.path = Path(path).expanduser()
        self._load()

    def _load(self) -> None:
        if not self.path.is_file():
            return
        try:
            restored = json.loads(self.path.read_text(encoding="utf-8"))
            for item in restored:
                driver_class = item["jdbcDriverClass"]
                known = self._presets.get(driver_class)
                if known is not None:
                    self._presets[driver_class] = replace(
                        known,
                        jdbc_url=item.get("jdbcUrl", known.jdbc_url),
                        user=item.get("user", known.user),
                    )
                else:
                    self._presets[driver_class] = ConnectionPreset.from_dict(item)
            logger.debug(f"Loaded connection presets from {self.path}")
        except (OSError, ValueError, TypeError, KeyError) as e:
            logger.warning(f"Ignoring unreadable presets file {self.path}: {e}")

    def put(self, preset: ConnectionPreset) -> None:
        super().put(preset)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            payload = [p.to_stored_dict() for p in self.all()]
            self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except (OSError, TypeError) as e:
            logger.warning(f"Could not save connection presets to {self.path}: {e}")


def find_preset(store: PresetStore, driver: Driver) -> ConnectionPreset:
    """Preset for a driver, or a generic one when its driver class is unknown."""
    found = None
    try:
        found = store.get(driver.jdbc_driver_class)
    except Exception as e:
        logger.warning(f"Preset lookup failed for {driver.jdbc_driver_class}: {e}")

    if found is None:
        found = ConnectionPreset.from_dict(UNKNOWN_PRESET)

    return replace(found, jdbc_driver_jar=driver.jdbc_driver_jar, jdbc_driver_class=driver.jdbc_driver_class)


def save_preset(store: PresetStore, preset: ConnectionPreset) -> None:
    """Remember a preset; failures are logged only."""
    try:
        store.put(preset)
    except Exception as e:
        logger.warning(f"Could not remember connection preset for {preset.jdbc_driver_class}: {e}")
