"""
Centralized constants for the domain model importer.

This module holds the JDBC type table, Java naming tables, wizard texts,
connection presets and console endpoint paths used across the package.
"""

from typing import Dict, FrozenSet, List, Any


# =============================================================================
# JDBC TYPES
# =============================================================================

# Each entry maps a java.sql.Types code to its SQL name, the boxed Java type
# and, where one exists, the primitive Java type.
JDBC_TYPES: List[Dict[str, Any]] = [
    {"dbName": "BIT", "dbType": -7, "javaType": "java.lang.Boolean", "primitiveType": "boolean"},
    {"dbName": "TINYINT", "dbType": -6, "javaType": "java.lang.Byte", "primitiveType": "byte"},
    {"dbName": "SMALLINT", "dbType": 5, "javaType": "java.lang.Short", "primitiveType": "short"},
    {"dbName": "INTEGER", "dbType": 4, "javaType": "java.lang.Integer", "primitiveType": "int"},
    {"dbName": "BIGINT", "dbType": -5, "javaType": "java.lang.Long", "primitiveType": "long"},
    {"dbName": "FLOAT", "dbType": 6, "javaType": "java.lang.Float", "primitiveType": "float"},
    {"dbName": "REAL", "dbType": 7, "javaType": "java.lang.Double", "primitiveType": "double"},
    {"dbName": "DOUBLE", "dbType": 8, "javaType": "java.lang.Double", "primitiveType": "double"},
    {"dbName": "NUMERIC", "dbType": 2, "javaType": "java.math.BigDecimal"},
    {"dbName": "DECIMAL", "dbType": 3, "javaType": "java.math.BigDecimal"},
    {"dbName": "CHAR", "dbType": 1, "javaType": "java.lang.String"},
    {"dbName": "VARCHAR", "dbType": 12, "javaType": "java.lang.String"},
    {"dbName": "LONGVARCHAR", "dbType": -1, "javaType": "java.lang.String"},
    {"dbName": "DATE", "dbType": 91, "javaType": "java.sql.Date"},
    {"dbName": "TIME", "dbType": 92, "javaType": "java.sql.Time"},
    {"dbName": "TIMESTAMP", "dbType": 93, "javaType": "java.sql.Timestamp"},
    {"dbName": "BINARY", "dbType": -2, "javaType": "java.lang.Object"},
    {"dbName": "VARBINARY", "dbType": -3, "javaType": "java.lang.Object"},
    {"dbName": "LONGVARBINARY", "dbType": -4, "javaType": "java.lang.Object"},
    {"dbName": "NULL", "dbType": 0, "javaType": "java.lang.Object"},
    {"dbName": "OTHER", "dbType": 1111, "javaType": "java.lang.Object"},
    {"dbName": "JAVA_OBJECT", "dbType": 2000, "javaType": "java.lang.Object"},
    {"dbName": "DISTINCT", "dbType": 2001, "javaType": "java.lang.Object"},
    {"dbName": "STRUCT", "dbType": 2002, "javaType": "java.lang.Object"},
    {"dbName": "ARRAY", "dbType": 2003, "javaType": "java.lang.Object"},
    {"dbName": "BLOB", "dbType": 2004, "javaType": "java.lang.Object"},
    {"dbName": "CLOB", "dbType": 2005, "javaType": "java.lang.String"},
    {"dbName": "REF", "dbType": 2006, "javaType": "java.lang.Object"},
    {"dbName": "DATALINK", "dbType": 70, "javaType": "java.lang.Object"},
    {"dbName": "BOOLEAN", "dbType": 16, "javaType": "java.lang.Boolean", "primitiveType": "boolean"},
    {"dbName": "ROWID", "dbType": -8, "javaType": "java.lang.Object"},
    {"dbName": "NCHAR", "dbType": -15, "javaType": "java.lang.String"},
    {"dbName": "NVARCHAR", "dbType": -9, "javaType": "java.lang.String"},
    {"dbName": "LONGNVARCHAR", "dbType": -16, "javaType": "java.lang.String"},
    {"dbName": "NCLOB", "dbType": 2011, "javaType": "java.lang.String"},
    {"dbName": "SQLXML", "dbType": 2009, "javaType": "java.lang.Object"},
]

# Used when a column type has no entry in JDBC_TYPES.
UNKNOWN_JDBC_TYPE: Dict[str, Any] = {"dbName": "Unknown", "javaType": "java.lang.Object"}


# =============================================================================
# JAVA NAMING
# =============================================================================

class JavaNames:
    """Java class and keyword tables used by validation."""

    BUILT_IN_CLASSES: FrozenSet[str] = frozenset([
        "BigDecimal", "Boolean", "Byte", "Date", "Double", "Float", "Integer",
        "Long", "Object", "Short", "String", "Time", "Timestamp", "UUID",
    ])

    # Fully qualified forms of BUILT_IN_CLASSES.
    BUILT_IN_QUALIFIED: Dict[str, str] = {
        "java.math.BigDecimal": "BigDecimal",
        "java.lang.Boolean": "Boolean",
        "java.lang.Byte": "Byte",
        "java.sql.Date": "Date",
        "java.lang.Double": "Double",
        "java.lang.Float": "Float",
        "java.lang.Integer": "Integer",
        "java.lang.Long": "Long",
        "java.lang.Object": "Object",
        "java.lang.Short": "Short",
        "java.lang.String": "String",
        "java.sql.Time": "Time",
        "java.sql.Timestamp": "Timestamp",
        "java.util.UUID": "UUID",
    }

    KEYWORDS: FrozenSet[str] = frozenset([
        "abstract", "assert", "boolean", "break", "byte", "case", "catch",
        "char", "class", "const", "continue", "default", "do", "double",
        "else", "enum", "extends", "false", "final", "finally", "float",
        "for", "goto", "if", "implements", "import", "instanceof", "int",
        "interface", "long", "native", "new", "null", "package", "private",
        "protected", "public", "return", "short", "static", "strictfp",
        "super", "switch", "synchronized", "this", "throw", "throws",
        "transient", "true", "try", "void", "volatile", "while",
    ])


# =============================================================================
# DOMAIN MODEL DEFAULTS
# =============================================================================

class IndexTypes:
    """Query index kinds."""

    SORTED = "SORTED"
    FULLTEXT = "FULLTEXT"
    GEOSPATIAL = "GEOSPATIAL"

    ALL = [SORTED, FULLTEXT, GEOSPATIAL]


class QueryMetadata:
    """How a domain model's query metadata is declared."""

    ANNOTATIONS = "Annotations"
    CONFIGURATION = "Configuration"

    ALL = [ANNOTATIONS, CONFIGURATION]


class ModelKinds:
    """Value of the `kind` attribute assigned before a single save."""

    QUERY = "query"
    STORE = "store"
    BOTH = "both"


DEMO_PACKAGE_NAME = "org.apache.ignite.console.demo.model"
DEFAULT_PACKAGE_NAME = "org.example.model"
KEY_TYPE_SUFFIX = "Key"
CACHE_NAME_SUFFIX = "Cache"


# =============================================================================
# CONNECTION PRESETS
# =============================================================================

DEFAULT_DB_PRESETS: List[Dict[str, str]] = [
    {
        "db": "oracle",
        "jdbcDriverClass": "oracle.jdbc.OracleDriver",
        "jdbcUrl": "jdbc:oracle:thin:@[host]:[port]:[database]",
        "user": "system",
    },
    {
        "db": "db2",
        "jdbcDriverClass": "com.ibm.db2.jcc.DB2Driver",
        "jdbcUrl": "jdbc:db2://[host]:[port]/[database]",
        "user": "db2admin",
    },
    {
        "db": "mssql",
        "jdbcDriverClass": "com.microsoft.sqlserver.jdbc.SQLServerDriver",
        "jdbcUrl": "jdbc:sqlserver://[host]:[port][;databaseName=database]",
        "user": "sa",
    },
    {
        "db": "postgre",
        "jdbcDriverClass": "org.postgresql.Driver",
        "jdbcUrl": "jdbc:postgresql://[host]:[port]/[database]",
        "user": "sa",
    },
    {
        "db": "mysql",
        "jdbcDriverClass": "com.mysql.jdbc.Driver",
        "jdbcUrl": "jdbc:mysql://[host]:[port]/[database]",
        "user": "root",
    },
    {
        "db": "h2",
        "jdbcDriverClass": "org.h2.Driver",
        "jdbcUrl": "jdbc:h2:tcp://[host]/[database]",
        "user": "sa",
    },
]

UNKNOWN_PRESET: Dict[str, str] = {
    "db": "unknown",
    "jdbcUrl": "jdbc:[database]",
    "user": "admin",
}

DEMO_CONNECTION: Dict[str, Any] = {
    "db": "H2",
    "jdbcDriverClass": "org.h2.Driver",
    "jdbcUrl": "jdbc:h2:mem:demo-db",
    "user": "sa",
    "password": "",
    "tablesOnly": True,
}

H2_DRIVER_JAR_PREFIX = "h2"


# =============================================================================
# WIZARD TEXTS
# =============================================================================

class WizardTexts:
    """Status, button and loading texts shown by the import wizard."""

    INFO_CONNECT_TO_DB = "Configure connection to database"
    INFO_SELECT_SCHEMAS = "Select schemas to load tables from"
    INFO_SELECT_TABLES = "Select tables to import as domain models"
    INFO_SELECT_OPTIONS = "Select import domain models options"

    LOADING_JDBC_DRIVERS = "Loading JDBC drivers..."
    LOADING_SCHEMAS = "Loading schemas..."
    LOADING_TABLES = "Loading tables..."
    SAVING_METADATA = "Saving domain models..."

    BUTTON_NEXT = "Next"
    BUTTON_SAVE = "Save"
    BUTTON_CANCEL = "Cancel"

    NO_DRIVERS = "JDBC drivers not found!"
    NO_KEY_WARNING = (
        "Some tables have no primary key. "
        "You will need to configure key type and key fields for such tables after import complete."
    )
    IMPORT_INTERRUPTED = "Importing of domain models interrupted by user."
    IMPORT_COMPLETE = "Domain models imported from database."


# =============================================================================
# CONSOLE ENDPOINTS
# =============================================================================

class Endpoints:
    """Console backend paths, relative to the configured console URL."""

    DRIVERS = "/api/v1/agent/drivers"
    SCHEMAS = "/api/v1/agent/schemas"
    TABLES = "/api/v1/agent/tables"

    LIST = "/api/v1/configuration/domains/list"
    SAVE = "/api/v1/configuration/domains/save"
    SAVE_BATCH = "/api/v1/configuration/domains/save/batch"
    REMOVE = "/api/v1/configuration/domains/remove"
    REMOVE_ALL = "/api/v1/configuration/domains/remove/all"
    REMOVE_DEMO = "/api/v1/configuration/domains/remove/demo"
