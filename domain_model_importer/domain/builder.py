"""
Derivation of domain model records from selected database tables.
"""

import logging
from typing import Dict, Iterable, List, Optional

from ..constants import IndexTypes, KEY_TYPE_SUFFIX, CACHE_NAME_SUFFIX
from .models import (
    TableMeta,
    ColumnMeta,
    DomainModel,
    QueryField,
    DbField,
    IndexDef,
    IndexField,
    NewCacheRequest,
    ImportOptions,
    BuildResult,
)
from .naming import to_class_name, to_field_name, to_java_package_name
from .type_mapping import TypeMapper, JdbcType


logger = logging.getLogger(__name__)


class DomainModelBuilder:
    """
    Builds one domain model record per selected table.

    Columns flagged as primary key go to ``key_fields``, all others to
    ``value_fields``; every column also becomes a query field. Tables that
    map to a class name already produced in the same batch get a numeric
    suffix (``Order``, ``Order_1``, ``Order_2``) on both key and value type.
    """

    def __init__(self, type_mapper: Optional[TypeMapper] = None):
        self.type_mapper = type_mapper or TypeMapper()

    def build(self, tables: Iterable[TableMeta], options: ImportOptions) -> BuildResult:
        package_name = to_java_package_name(options.package_name)
        seen: Dict[str, int] = {}
        records: List[DomainModel] = []
        all_have_keys = True

        for table in tables:
            if not table.use:
                continue

            class_name = to_class_name(table.tbl)
            dup_count = seen.get(class_name, 0)
            seen[class_name] = dup_count + 1
            dup_suffix = f"_{dup_count}" if dup_count else ""

            record = self._build_record(table, class_name, package_name, dup_suffix, options)
            if not record.key_fields:
                all_have_keys = False
                logger.warning(f"Table '{table.label}' has no primary key")

            records.append(record)

        logger.debug(f"Built {len(records)} domain model(s) from selected tables")
        return BuildResult(records=records, any_missing_key=not all_have_keys)

    def _build_record(
        self,
        table: TableMeta,
        class_name: str,
        package_name: str,
        dup_suffix: str,
        options: ImportOptions,
    ) -> DomainModel:
        value_type = f"{package_name}.{class_name}"

        query_fields: List[QueryField] = []
        key_fields: List[DbField] = []
        value_fields: List[DbField] = []
        key_java_types: List[str] = []

        for col in table.cols:
            jdbc_type = self.type_mapper.map_or_default(col.type, column=f"{table.label}.{col.name}")
            query_fields.append(QueryField(name=to_field_name(col.name), class_name=jdbc_type.java_type))

            db_field = self._db_field(col, jdbc_type, options.use_primitives)
            if col.key:
                key_fields.append(db_field)
                key_java_types.append(jdbc_type.java_type)
            else:
                value_fields.append(db_field)

        key_type = f"{value_type}{KEY_TYPE_SUFFIX}{dup_suffix}"
        if options.builtin_keys and len(key_fields) == 1:
            key_type = key_java_types[0]

        record = DomainModel(
            key_type=key_type,
            value_type=f"{value_type}{dup_suffix}",
            space=options.space,
            database_schema=table.schema,
            database_table=table.tbl,
            fields=query_fields,
            key_fields=key_fields,
            value_fields=value_fields,
            indexes=self._indexes(table),
            demo=options.demo,
        )

        if options.generate_caches:
            record.new_cache = NewCacheRequest(
                name=f"{class_name}{CACHE_NAME_SUFFIX}",
                clusters=list(options.generated_caches_clusters),
                demo=options.demo,
            )

        return record

    @staticmethod
    def _db_field(col: ColumnMeta, jdbc_type: JdbcType, use_primitives: bool) -> DbField:
        return DbField(
            database_field_name=col.name,
            database_field_type=jdbc_type.db_name,
            java_field_name=to_field_name(col.name),
            java_field_type=jdbc_type.field_type(col.nullable, use_primitives),
        )

    @staticmethod
    def _indexes(table: TableMeta) -> List[IndexDef]:
        # Source maps store "descending"; index fields store "ascending".
        return [
            IndexDef(
                name=idx.name,
                index_type=IndexTypes.SORTED,
                fields=[
                    IndexField(name=to_field_name(field_name), direction=not descending)
                    for field_name, descending in idx.fields.items()
                ],
            )
            for idx in table.idxs
        ]
