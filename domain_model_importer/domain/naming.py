"""
Naming convention utilities for the domain model importer.

Database identifiers (``snake_case`` or space separated) are converted to Java
class and field names, and Java identifiers are checked before a record is
submitted.
"""

import re

from ..constants import JavaNames, DEFAULT_PACKAGE_NAME


_JAVA_SEGMENT = re.compile(r"^[A-Za-z][A-Za-z0-9_$]*$")
_JAVA_FIELD = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_PACKAGE_INVALID_CHARS = re.compile(r"[^A-Za-z0-9_.]")


def to_class_name(name: str) -> str:
    """
    Convert a database identifier to a Java class name.

    The name is split on spaces and underscores; each segment gets an upper
    case first letter and segments are joined with no separator. The rest of
    a segment is lowered unless the segment already mixes cases, so a name
    that is already camel cased comes back unchanged.

    Example:
        >>> to_class_name("customer_order")
        'CustomerOrder'
        >>> to_class_name("ORDER ITEMS")
        'OrderItems'
        >>> to_class_name("CustomerOrder")
        'CustomerOrder'
    """
    if not isinstance(name, str):
        raise TypeError(f"Expected string, got {type(name).__name__}")

    buf = []
    for segment in re.split(r"[ _]", name):
        if not segment:
            continue
        rest = segment[1:]
        mixed = any(ch.islower() for ch in segment) and any(ch.isupper() for ch in segment)
        buf.append(segment[0].upper() + (rest if mixed else rest.lower()))
    return "".join(buf)


def to_field_name(name: str) -> str:
    """
    Convert a database identifier to a Java field name.

    Example:
        >>> to_field_name("customer_order")
        'customerOrder'
    """
    class_name = to_class_name(name)
    return class_name[:1].lower() + class_name[1:]


def to_java_package_name(name: str) -> str:
    """Replace characters that cannot appear in a Java package with underscores."""
    if not name:
        return DEFAULT_PACKAGE_NAME
    segments = []
    for segment in _PACKAGE_INVALID_CHARS.sub("_", name).split("."):
        if not segment:
            continue
        if not segment[0].isalpha():
            segment = "_" + segment
        segments.append(segment)
    return ".".join(segments) if segments else DEFAULT_PACKAGE_NAME


def package_name_from_email(email: str) -> str:
    """
    Derive a default package from a user email.

    Example:
        >>> package_name_from_email("jane@corp.example.com")
        'com.example.corp.jane.model'
    """
    reversed_parts = ".".join(reversed(email.replace("@", ".").split(".")))
    return to_java_package_name(reversed_parts + ".model")


def is_java_built_in_class(name: str) -> bool:
    """Check for a Java built-in class in short or fully qualified form."""
    if not name:
        return False
    return name in JavaNames.BUILT_IN_CLASSES or name in JavaNames.BUILT_IN_QUALIFIED


def is_valid_java_identifier(name: str) -> bool:
    """Check a Java field name."""
    return bool(name) and bool(_JAVA_FIELD.match(name)) and name not in JavaNames.KEYWORDS


def is_valid_java_class(name: str) -> bool:
    """
    Check a (possibly qualified) Java class name.

    Every dot separated segment must start with a letter and must not be a
    Java keyword.
    """
    if not name:
        return False
    for segment in name.split("."):
        if not _JAVA_SEGMENT.match(segment) or segment in JavaNames.KEYWORDS:
            return False
    return True
