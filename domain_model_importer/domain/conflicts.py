"""
Detection of imported records that would overwrite existing domain models.
"""

import logging
from typing import Dict, Iterable, List

from .models import DomainModel, ResolveResult


logger = logging.getLogger(__name__)


class ConflictResolver:
    """Matches newly built records against existing ones by value type."""

    def resolve(self, built: Iterable[DomainModel], existing: Iterable[DomainModel]) -> ResolveResult:
        """
        Flag records whose value type already exists.

        A matched record takes over the existing ``id`` and ``caches`` and is
        marked ``confirm``; it ends up in both ``to_confirm`` and ``batch``.
        When several existing records share a value type the first one wins.
        """
        by_value_type: Dict[str, DomainModel] = {}
        for model in existing:
            by_value_type.setdefault(model.value_type, model)

        to_confirm: List[DomainModel] = []
        batch: List[DomainModel] = []
        for record in built:
            found = by_value_type.get(record.value_type)
            if found is not None:
                record.id = found.id
                record.caches = list(found.caches)
                record.confirm = True
                to_confirm.append(record)
                logger.debug(f"Domain model '{record.value_type}' already exists and needs confirmation")
            else:
                record.confirm = False
            record.skip = False
            batch.append(record)

        return ResolveResult(to_confirm=to_confirm, batch=batch)

    @staticmethod
    def final_batch(batch: Iterable[DomainModel]) -> List[DomainModel]:
        """Records left after the user's per-item decisions."""
        return [record for record in batch if not record.skip]
