"""
The long-lived, in-memory list of domain models shown by the console.

Local state only changes after the console confirmed an operation, so a
failed remote call leaves the collection untouched.
"""

import logging
from typing import Any, Dict, List, Optional

from .constants import ModelKinds
from .domain.models import ConsoleSnapshot, DomainModel, SaveBatchResult
from .domain.validation import DomainModelValidator
from .exceptions import ValidationError
from .client import DomainModelRepository


logger = logging.getLogger(__name__)


class DomainModelCollection:
    """Domain models, caches, clusters and spaces known to the console."""

    def __init__(self, repository: DomainModelRepository, validator: Optional[DomainModelValidator] = None):
        self.repository = repository
        self.validator = validator or DomainModelValidator()
        self.models: List[DomainModel] = []
        self.caches: List[Dict[str, Any]] = []
        self.clusters: List[Dict[str, Any]] = []
        self.spaces: List[Dict[str, Any]] = []

    # --- Loading ---

    def load(self, snapshot: Optional[ConsoleSnapshot] = None) -> "DomainModelCollection":
        """Replace local state with the console listing (fetched when not given)."""
        if snapshot is None:
            snapshot = self.repository.list_existing()
        self.spaces = list(snapshot.spaces)
        self.clusters = list(snapshot.clusters)
        self.caches = list(snapshot.caches)
        self.models = list(snapshot.metadatas)
        logger.debug(f"Loaded {len(self.models)} domain model(s) and {len(self.caches)} cache(s)")
        return self

    @property
    def default_space(self) -> Optional[str]:
        if not self.spaces:
            return None
        space = self.spaces[0]
        return space.get("_id") if isinstance(space, dict) else space

    @property
    def cluster_ids(self) -> List[str]:
        return [c.get("value", c.get("_id")) if isinstance(c, dict) else c for c in self.clusters]

    def index_of(self, model_id: Optional[str]) -> int:
        if model_id is None:
            return -1
        for i, model in enumerate(self.models):
            if model.id == model_id:
                return i
        return -1

    def find(self, model_id: str) -> Optional[DomainModel]:
        idx = self.index_of(model_id)
        return self.models[idx] if idx >= 0 else None

    def value_types(self) -> List[str]:
        return [model.value_type for model in self.models]

    # --- Merging ---

    def merge_saved(self, result: SaveBatchResult) -> Optional[DomainModel]:
        """
        Merge saved records by id and append generated caches.

        Existing entries are replaced in place, new ones appended at the end
        in response order. Returns the last saved record, or the first model
        when nothing was saved.
        """
        self.caches.extend(result.generated_caches)

        last_item = None
        new_items = []
        for saved in result.saved_metas:
            idx = self.index_of(saved.id)
            if idx >= 0:
                self.models[idx] = saved
            else:
                new_items.append(saved)
            last_item = saved

        self.models.extend(new_items)

        if last_item is None and self.models:
            last_item = self.models[0]
        return last_item

    # --- Single record operations ---

    def save_one(self, model: DomainModel) -> DomainModel:
        """Validate, persist and merge a single domain model."""
        self.validator.validate(model)

        item = model.copy()
        if item.query_configured and item.store_configured:
            item.kind = ModelKinds.BOTH
        elif item.store_configured:
            item.kind = ModelKinds.STORE
        else:
            item.kind = ModelKinds.QUERY

        result = self.repository.save_one(item)
        saved = result.saved_metas[0] if result.saved_metas else item

        idx = self.index_of(saved.id)
        if idx >= 0:
            self.models[idx] = saved
        else:
            self.models.append(saved)

        logger.info(f"Domain model \"{item.value_type}\" saved.")
        return saved

    def clone(self, model: DomainModel, new_value_type: str) -> DomainModel:
        """Save a copy of ``model`` under a new, unused value type."""
        if new_value_type in self.value_types():
            raise ValidationError(
                f"Domain model with value type '{new_value_type}' already exists",
                field="valueType",
            )
        self.validator.validate(model)
        item = model.copy(id=None, demo=False, value_type=new_value_type)
        return self.save_one(item)

    def remove_one(self, model_id: str) -> Optional[DomainModel]:
        """Remove a model remotely, then locally. Returns the removed model."""
        self.repository.remove_one(model_id)
        idx = self.index_of(model_id)
        if idx < 0:
            return None
        removed = self.models.pop(idx)
        logger.info(f"Domain model has been removed: {removed.value_type}")
        return removed

    def remove_all(self) -> None:
        self.repository.remove_all()
        self.models = []
        logger.info("All domain models have been removed")

    def remove_demo(self) -> None:
        """Remove generated demo models and caches, then reload from the console."""
        self.repository.remove_demo()
        logger.info("All demo domain models and caches have been removed")
        self.load()

    # --- Queries ---

    def has_demo_items(self) -> bool:
        return any(model.demo for model in self.models)

    def models_without_keys(self) -> List[DomainModel]:
        """Store-backed models that still need key fields configured."""
        return [m for m in self.models if m.store_configured and not m.key_fields]
