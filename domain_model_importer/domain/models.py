"""
Core domain models for the domain model importer.

Two families of types live here: the schema metadata reported by the
discovery agent (drivers, tables, columns, indexes) and the domain model
records persisted by the console. Each type converts to and from the
console's wire format (camelCase keys, ``_id`` for identifiers).
"""

from dataclasses import dataclass, field, replace
from typing import List, Dict, Any, Optional, Tuple, Union

from ..constants import QueryMetadata


# =============================================================================
# SCHEMA METADATA (discovery side)
# =============================================================================

@dataclass(frozen=True)
class Driver:
    """A JDBC driver available to the agent."""

    jdbc_driver_jar: str
    jdbc_driver_class: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Driver":
        return cls(
            jdbc_driver_jar=data.get("jdbcDriverJar", ""),
            jdbc_driver_class=data.get("jdbcDriverClass", ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"jdbcDriverJar": self.jdbc_driver_jar, "jdbcDriverClass": self.jdbc_driver_class}


@dataclass(frozen=True)
class ConnectionPreset:
    """
    A JDBC connection template.

    Presets are remembered per driver class; only ``jdbc_url`` and ``user``
    survive between runs, the password never leaves the current session.
    """

    db: str = "unknown"
    jdbc_driver_jar: str = ""
    jdbc_driver_class: str = ""
    jdbc_url: str = "jdbc:[database]"
    user: str = "sa"
    password: str = ""
    tables_only: bool = True
    schemas: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConnectionPreset":
        return cls(
            db=data.get("db", "unknown"),
            jdbc_driver_jar=data.get("jdbcDriverJar", ""),
            jdbc_driver_class=data.get("jdbcDriverClass", ""),
            jdbc_url=data.get("jdbcUrl", "jdbc:[database]"),
            user=data.get("user", "sa"),
            password=data.get("password", ""),
            tables_only=data.get("tablesOnly", True),
            schemas=tuple(data.get("schemas", ())),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Request payload for the schema and table listing calls."""
        return {
            "db": self.db,
            "jdbcDriverJar": self.jdbc_driver_jar,
            "jdbcDriverClass": self.jdbc_driver_class,
            "jdbcUrl": self.jdbc_url,
            "user": self.user,
            "password": self.password,
            "tablesOnly": self.tables_only,
            "schemas": list(self.schemas),
        }

    def to_stored_dict(self) -> Dict[str, Any]:
        """The part of a preset that is remembered between runs."""
        return {
            "db": self.db,
            "jdbcDriverClass": self.jdbc_driver_class,
            "jdbcUrl": self.jdbc_url,
            "user": self.user,
        }


@dataclass(frozen=True)
class ColumnMeta:
    """A table column as reported by the agent; ``type`` is a java.sql.Types code or name."""

    name: str
    type: Union[int, str]
    nullable: bool = True
    key: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ColumnMeta":
        return cls(
            name=data["name"],
            type=data.get("type", 0),
            nullable=bool(data.get("nullable", True)),
            key=bool(data.get("key", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "type": self.type, "nullable": self.nullable, "key": self.key}


@dataclass(frozen=True)
class IndexMeta:
    """A source index: ordered mapping of column name to "is descending"."""

    name: str
    fields: Dict[str, bool] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IndexMeta":
        return cls(name=data["name"], fields=dict(data.get("fields") or {}))

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "fields": dict(self.fields)}


@dataclass(frozen=True)
class TableMeta:
    """A database table offered for import; ``use`` marks it as selected."""

    schema: str
    tbl: str
    cols: Tuple[ColumnMeta, ...] = ()
    idxs: Tuple[IndexMeta, ...] = ()
    use: bool = False

    @property
    def label(self) -> str:
        return f"{self.schema}.{self.tbl}"

    @property
    def has_key(self) -> bool:
        return any(col.key for col in self.cols)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TableMeta":
        return cls(
            schema=data.get("schema", ""),
            tbl=data["tbl"],
            cols=tuple(ColumnMeta.from_dict(col) for col in data.get("cols") or []),
            idxs=tuple(IndexMeta.from_dict(idx) for idx in data.get("idxs") or []),
            use=bool(data.get("use", False)),
        )


@dataclass(frozen=True)
class SchemaItem:
    """A schema name offered for selection."""

    name: str
    use: bool = False


# =============================================================================
# DOMAIN MODEL RECORDS (console side)
# =============================================================================

@dataclass
class QueryField:
    """A queryable projection of a column."""

    name: str
    class_name: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QueryField":
        return cls(name=data["name"], class_name=data.get("className", ""))

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "className": self.class_name}


@dataclass
class AliasPair:
    """A query field alias."""

    alias: str
    value: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AliasPair":
        return cls(alias=data["alias"], value=data.get("value", ""))

    def to_dict(self) -> Dict[str, Any]:
        return {"alias": self.alias, "value": self.value}


@dataclass
class DbField:
    """A column mapped into the key or the value part of a domain model."""

    database_field_name: str
    database_field_type: str
    java_field_name: str
    java_field_type: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DbField":
        return cls(
            database_field_name=data.get("databaseFieldName", ""),
            database_field_type=data.get("databaseFieldType", ""),
            java_field_name=data.get("javaFieldName", ""),
            java_field_type=data.get("javaFieldType", ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "databaseFieldName": self.database_field_name,
            "databaseFieldType": self.database_field_type,
            "javaFieldName": self.java_field_name,
            "javaFieldType": self.java_field_type,
        }


@dataclass
class IndexField:
    """An index column; ``direction`` is True for ascending."""

    name: str
    direction: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IndexField":
        return cls(name=data["name"], direction=bool(data.get("direction", True)))

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "direction": self.direction}


@dataclass
class IndexDef:
    """A query index of a domain model."""

    name: str
    index_type: str
    fields: List[IndexField] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IndexDef":
        return cls(
            name=data.get("name", ""),
            index_type=data.get("indexType", ""),
            fields=[IndexField.from_dict(f) for f in data.get("fields") or []],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "indexType": self.index_type,
            "fields": [f.to_dict() for f in self.fields],
        }


@dataclass
class NewCacheRequest:
    """Asks the console to generate a cache for an imported domain model."""

    name: str
    clusters: List[str] = field(default_factory=list)
    demo: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NewCacheRequest":
        return cls(
            name=data["name"],
            clusters=list(data.get("clusters") or []),
            demo=bool(data.get("demo", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "clusters": list(self.clusters), "demo": self.demo}


# Wire keys handled explicitly by DomainModel; everything else goes to ``extra``.
_MODEL_KEYS = {
    "_id", "space", "caches", "queryMetadata", "kind", "keyType", "valueType",
    "databaseSchema", "databaseTable", "fields", "aliases", "keyFields",
    "valueFields", "indexes", "demo", "newCache", "confirm", "skip",
}


@dataclass
class DomainModel:
    """
    A persisted key/value type definition with its query fields and indexes.

    ``id`` is absent until the first save; its presence turns a save into an
    update. ``confirm`` and ``skip`` are import-time flags and are not part of
    the persisted record.
    """

    key_type: str = ""
    value_type: str = ""
    id: Optional[str] = None
    space: Optional[str] = None
    caches: List[str] = field(default_factory=list)
    query_metadata: str = QueryMetadata.CONFIGURATION
    kind: Optional[str] = None
    database_schema: Optional[str] = None
    database_table: Optional[str] = None
    fields: List[QueryField] = field(default_factory=list)
    aliases: List[AliasPair] = field(default_factory=list)
    key_fields: List[DbField] = field(default_factory=list)
    value_fields: List[DbField] = field(default_factory=list)
    indexes: List[IndexDef] = field(default_factory=list)
    demo: bool = False
    new_cache: Optional[NewCacheRequest] = None

    confirm: bool = False
    skip: bool = False

    # Unknown server attributes, kept so updates do not drop them.
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DomainModel":
        new_cache = data.get("newCache")
        return cls(
            id=data.get("_id"),
            space=data.get("space"),
            caches=list(data.get("caches") or []),
            query_metadata=data.get("queryMetadata") or QueryMetadata.CONFIGURATION,
            kind=data.get("kind"),
            key_type=data.get("keyType") or "",
            value_type=data.get("valueType") or "",
            database_schema=data.get("databaseSchema"),
            database_table=data.get("databaseTable"),
            fields=[QueryField.from_dict(f) for f in data.get("fields") or []],
            aliases=[AliasPair.from_dict(a) for a in data.get("aliases") or []],
            key_fields=[DbField.from_dict(f) for f in data.get("keyFields") or []],
            value_fields=[DbField.from_dict(f) for f in data.get("valueFields") or []],
            indexes=[IndexDef.from_dict(i) for i in data.get("indexes") or []],
            demo=bool(data.get("demo", False)),
            new_cache=NewCacheRequest.from_dict(new_cache) if new_cache else None,
            extra={k: v for k, v in data.items() if k not in _MODEL_KEYS},
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the console wire representation."""
        data: Dict[str, Any] = dict(self.extra)
        data.update({
            "space": self.space,
            "caches": list(self.caches),
            "queryMetadata": self.query_metadata,
            "keyType": self.key_type,
            "valueType": self.value_type,
            "databaseSchema": self.database_schema,
            "databaseTable": self.database_table,
            "fields": [f.to_dict() for f in self.fields],
            "aliases": [a.to_dict() for a in self.aliases],
            "keyFields": [f.to_dict() for f in self.key_fields],
            "valueFields": [f.to_dict() for f in self.value_fields],
            "indexes": [i.to_dict() for i in self.indexes],
            "demo": self.demo,
        })
        if self.id is not None:
            data["_id"] = self.id
        if self.kind is not None:
            data["kind"] = self.kind
        if self.new_cache is not None:
            data["newCache"] = self.new_cache.to_dict()
        return data

    def copy(self, **changes: Any) -> "DomainModel":
        """Deep copy through the wire form, then apply ``changes``."""
        clone = DomainModel.from_dict(self.to_dict())
        clone.confirm = self.confirm
        clone.skip = self.skip
        return replace(clone, **changes) if changes else clone

    @property
    def query_configured(self) -> bool:
        return bool(self.fields or self.aliases or self.indexes)

    @property
    def store_configured(self) -> bool:
        return bool(self.database_schema or self.database_table or self.key_fields or self.value_fields)


# =============================================================================
# PIPELINE VALUES
# =============================================================================

@dataclass(frozen=True)
class ImportOptions:
    """Options chosen on the last wizard step."""

    package_name: str
    use_primitives: bool = True
    builtin_keys: bool = True
    generate_caches: bool = True
    generated_caches_clusters: Tuple[str, ...] = ()
    demo: bool = False
    space: Optional[str] = None


@dataclass
class BuildResult:
    records: List[DomainModel]
    any_missing_key: bool


@dataclass
class ResolveResult:
    to_confirm: List[DomainModel]
    batch: List[DomainModel]


@dataclass
class SaveBatchResult:
    """Response of a batch or single save: persisted records and generated caches."""

    saved_metas: List[DomainModel] = field(default_factory=list)
    generated_caches: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SaveBatchResult":
        return cls(
            saved_metas=[DomainModel.from_dict(m) for m in data.get("savedMetas") or []],
            generated_caches=list(data.get("generatedCaches") or []),
        )


@dataclass
class ConsoleSnapshot:
    """Initial screen data: spaces, clusters, caches and existing domain models."""

    spaces: List[Dict[str, Any]] = field(default_factory=list)
    clusters: List[Dict[str, Any]] = field(default_factory=list)
    caches: List[Dict[str, Any]] = field(default_factory=list)
    metadatas: List[DomainModel] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConsoleSnapshot":
        return cls(
            spaces=list(data.get("spaces") or []),
            clusters=list(data.get("clusters") or []),
            caches=list(data.get("caches") or []),
            metadatas=[DomainModel.from_dict(m) for m in data.get("metadatas") or []],
        )
