"""
Database column type to Java type mapping.

The mapping is a fixed table (``constants.JDBC_TYPES``) keyed both by the
java.sql.Types code and by the SQL type name.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Union

from ..constants import JDBC_TYPES, UNKNOWN_JDBC_TYPE
from ..exceptions import UnsupportedTypeError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JdbcType:
    """Java type descriptor for a database column type."""

    db_name: str
    java_type: str
    primitive_type: Optional[str] = None
    db_type: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict) -> "JdbcType":
        return cls(
            db_name=data["dbName"],
            java_type=data["javaType"],
            primitive_type=data.get("primitiveType"),
            db_type=data.get("dbType"),
        )

    def field_type(self, nullable: bool, use_primitives: bool) -> str:
        """
        Java type of a field holding this column.

        Nullable columns always get the boxed type since a primitive
        cannot hold ``null``.
        """
        if not nullable and use_primitives and self.primitive_type:
            return self.primitive_type
        return self.java_type


UNKNOWN_TYPE = JdbcType.from_dict(UNKNOWN_JDBC_TYPE)


class TypeMapper:
    """Maps database column types to Java type descriptors."""

    def __init__(self):
        self._by_code: Dict[int, JdbcType] = {}
        self._by_name: Dict[str, JdbcType] = {}
        for entry in JDBC_TYPES:
            jdbc_type = JdbcType.from_dict(entry)
            self._by_code[jdbc_type.db_type] = jdbc_type
            self._by_name[jdbc_type.db_name] = jdbc_type

    def map(self, database_type: Union[int, str]) -> JdbcType:
        """
        Map a column type given as a java.sql.Types code or SQL type name.

        Raises:
            UnsupportedTypeError: If the type is not in the table
        """
        if isinstance(database_type, bool):
            raise UnsupportedTypeError(f"Unsupported database type: {database_type!r}", db_type=database_type)

        if isinstance(database_type, int):
            found = self._by_code.get(database_type)
        elif isinstance(database_type, str):
            key = database_type.strip()
            if key.lstrip("-").isdigit():
                found = self._by_code.get(int(key))
            else:
                found = self._by_name.get(key.upper())
        else:
            found = None

        if found is None:
            raise UnsupportedTypeError(f"Unsupported database type: {database_type!r}", db_type=database_type)
        return found

    def map_or_default(self, database_type: Union[int, str], column: str = None) -> JdbcType:
        """Map a column type, falling back to the generic object type when unsupported."""
        try:
            return self.map(database_type)
        except UnsupportedTypeError:
            logger.warning(
                f"Column '{column or '?'}' has unsupported type {database_type!r}; "
                f"using {UNKNOWN_TYPE.java_type}"
            )
            return UNKNOWN_TYPE
