"""
Domain module for the domain model importer.

Schema metadata, domain model records and the pure transformations between
them: type mapping, identifier normalization, record building, conflict
detection and validation.
"""

from .models import (
    Driver,
    ConnectionPreset,
    ColumnMeta,
    IndexMeta,
    TableMeta,
    SchemaItem,
    QueryField,
    AliasPair,
    DbField,
    IndexField,
    IndexDef,
    NewCacheRequest,
    DomainModel,
    ImportOptions,
    BuildResult,
    ResolveResult,
    SaveBatchResult,
    ConsoleSnapshot,
)

from .naming import (
    to_class_name,
    to_field_name,
    to_java_package_name,
    package_name_from_email,
    is_java_built_in_class,
    is_valid_java_class,
    is_valid_java_identifier,
)

from .type_mapping import TypeMapper, JdbcType, UNKNOWN_TYPE
from .builder import DomainModelBuilder
from .conflicts import ConflictResolver
from .validation import DomainModelValidator, validate_package_name

__all__ = [
    # Models
    'Driver',
    'ConnectionPreset',
    'ColumnMeta',
    'IndexMeta',
    'TableMeta',
    'SchemaItem',
    'QueryField',
    'AliasPair',
    'DbField',
    'IndexField',
    'IndexDef',
    'NewCacheRequest',
    'DomainModel',
    'ImportOptions',
    'BuildResult',
    'ResolveResult',
    'SaveBatchResult',
    'ConsoleSnapshot',

    # Naming
    'to_class_name',
    'to_field_name',
    'to_java_package_name',
    'package_name_from_email',
    'is_java_built_in_class',
    'is_valid_java_class',
    'is_valid_java_identifier',

    # Pipeline pieces
    'TypeMapper',
    'JdbcType',
    'UNKNOWN_TYPE',
    'DomainModelBuilder',
    'ConflictResolver',
    'DomainModelValidator',
    'validate_package_name',
]
