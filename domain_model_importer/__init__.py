"""
Domain model importer.

Imports relational schema metadata through a console agent and derives
key-value store domain models (key/value types, query fields and indexes).
"""

from .domain import (
    DomainModel,
    DomainModelBuilder,
    ConflictResolver,
    DomainModelValidator,
    ImportOptions,
    TableMeta,
    TypeMapper,
    to_class_name,
    to_field_name,
)
from .importer import ImportPipeline, ImportOutcome, OverwriteDecision
from .wizard import ImportWizard, WizardAction, WizardState

__version__ = "0.1.0"

__all__ = [
    'DomainModel',
    'DomainModelBuilder',
    'ConflictResolver',
    'DomainModelValidator',
    'ImportOptions',
    'TableMeta',
    'TypeMapper',
    'to_class_name',
    'to_field_name',
    'ImportPipeline',
    'ImportOutcome',
    'OverwriteDecision',
    'ImportWizard',
    'WizardAction',
    'WizardState',
]
