"""
The import pipeline run by the last wizard step.

Steps, in order:

1. validate the package name,
2. build records from the selected tables,
3. warn about tables without a primary key,
4. flag records that overwrite existing domain models,
5. ask for an overwrite / skip decision per flagged record,
6. save what is left in one batch and merge the result.

No network call is made before every confirmation has been answered.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Protocol

from .colored_logging import log_progress, log_success, log_highlight
from .constants import WizardTexts
from .domain.builder import DomainModelBuilder
from .domain.conflicts import ConflictResolver
from .domain.models import DomainModel, ImportOptions, TableMeta
from .domain.validation import validate_package_name
from .exceptions import ImportInterrupted
from .client import BatchPersister
from .collection import DomainModelCollection


logger = logging.getLogger(__name__)


class OverwriteDecision(Enum):
    """Answer to "overwrite existing domain model?"."""

    OVERWRITE = "overwrite"
    SKIP = "skip"
    CANCEL = "cancel"


class Confirmer(Protocol):
    """Asks the user yes/no questions."""

    def confirm(self, message: str) -> bool:
        ...

    def confirm_overwrite(self, record: DomainModel, message: str) -> OverwriteDecision:
        ...


def overwrite_message(record: DomainModel) -> str:
    return (
        f"Domain model with name \"{record.database_table}\" already exist. "
        "Are you sure you want to overwrite it?"
    )


@dataclass
class ImportOutcome:
    """What an import run saved and skipped."""

    saved: List[DomainModel] = field(default_factory=list)
    skipped: List[DomainModel] = field(default_factory=list)
    generated_caches: List[Dict[str, Any]] = field(default_factory=list)
    selected: Optional[DomainModel] = None


class ImportPipeline:
    """Composes builder, conflict resolver, confirmations and persistence."""

    def __init__(
        self,
        persister: BatchPersister,
        collection: DomainModelCollection,
        confirmer: Confirmer,
        builder: Optional[DomainModelBuilder] = None,
        resolver: Optional[ConflictResolver] = None,
    ):
        self.persister = persister
        self.collection = collection
        self.confirmer = confirmer
        self.builder = builder or DomainModelBuilder()
        self.resolver = resolver or ConflictResolver()

    def run(self, tables: Iterable[TableMeta], options: ImportOptions) -> ImportOutcome:
        """
        Import the selected tables.

        Raises:
            ValidationError: If the package name is invalid
            ImportInterrupted: If the user declines a confirmation
            PersistenceError: If the batch save fails; the collection is unchanged
        """
        validate_package_name(options.package_name)

        log_progress(logger, "Building domain models from selected tables...")
        built = self.builder.build(tables, options)

        if built.any_missing_key:
            logger.warning(WizardTexts.NO_KEY_WARNING)
            if not self.confirmer.confirm(WizardTexts.NO_KEY_WARNING):
                raise ImportInterrupted(WizardTexts.IMPORT_INTERRUPTED)

        resolved = self.resolver.resolve(built.records, self.collection.models)

        for record in resolved.to_confirm:
            decision = self.confirmer.confirm_overwrite(record, overwrite_message(record))
            if decision is OverwriteDecision.CANCEL:
                raise ImportInterrupted(WizardTexts.IMPORT_INTERRUPTED)
            record.skip = decision is OverwriteDecision.SKIP
            if record.skip:
                log_highlight(logger, f"Skipping existing domain model '{record.value_type}'")

        batch = self.resolver.final_batch(resolved.batch)
        skipped = [record for record in resolved.batch if record.skip]

        if not batch:
            logger.info("Nothing to save")
            return ImportOutcome(skipped=skipped)

        log_progress(logger, f"Saving {len(batch)} domain model(s)...")
        result = self.persister.save_batch(batch)
        selected = self.collection.merge_saved(result)

        log_success(logger, WizardTexts.IMPORT_COMPLETE)
        return ImportOutcome(
            saved=result.saved_metas,
            skipped=skipped,
            generated_caches=result.generated_caches,
            selected=selected,
        )
