"""
Local validation of domain models before anything is sent to the console.

Each rule yields a ``ValidationError`` whose ``field`` points at the attribute
to correct. ``validate`` raises the first one; ``errors`` collects them all.
"""

from typing import Iterable, Iterator, List, Optional, Sequence

from ..constants import IndexTypes, QueryMetadata
from ..exceptions import ValidationError
from .models import DomainModel, DbField
from .naming import (
    is_java_built_in_class,
    is_valid_java_class,
    is_valid_java_identifier,
)


def validate_package_name(package_name: Optional[str]) -> None:
    """Check the package that imported types are placed in."""
    if not package_name or not package_name.strip():
        raise ValidationError("Package should be not empty", field="packageName")
    if not is_valid_java_class(package_name):
        raise ValidationError(f"Package is invalid: '{package_name}'", field="packageName")


def _duplicates(names: Iterable[str]) -> Iterator[tuple]:
    """Yield (index, name) for every name seen earlier in the sequence."""
    seen = set()
    for i, name in enumerate(names):
        if name in seen:
            yield i, name
        seen.add(name)


class DomainModelValidator:
    """Checks a domain model for logical consistency."""

    def validate(self, model: DomainModel) -> None:
        """
        Raises:
            ValidationError: For the first rule the model breaks
        """
        for error in self._iter_errors(model):
            raise error

    def errors(self, model: DomainModel) -> List[ValidationError]:
        return list(self._iter_errors(model))

    def is_valid(self, model: DomainModel) -> bool:
        return next(self._iter_errors(model), None) is None

    def _iter_errors(self, model: DomainModel) -> Iterator[ValidationError]:
        yield from self._check_types(model)

        query = model.query_configured
        store = model.store_configured

        if model.query_metadata == QueryMetadata.CONFIGURATION and query:
            yield from self._check_query(model)

        if store:
            yield from self._check_store(model)
        elif not query and model.query_metadata == QueryMetadata.CONFIGURATION:
            yield ValidationError("SQL query domain model should be configured", field="query")

    def _check_types(self, model: DomainModel) -> Iterator[ValidationError]:
        if not model.key_type or not model.key_type.strip():
            yield ValidationError("Key type should not be empty", field="keyType")
        elif not is_java_built_in_class(model.key_type) and not is_valid_java_class(model.key_type):
            yield ValidationError(f"Key type is invalid Java class name: '{model.key_type}'", field="keyType")

        if not model.value_type or not model.value_type.strip():
            yield ValidationError("Value type should not be empty", field="valueType")
        elif is_java_built_in_class(model.value_type):
            yield ValidationError("Value type should not be the Java built-in class", field="valueType")
        elif not is_valid_java_class(model.value_type):
            yield ValidationError(f"Value type is invalid Java class name: '{model.value_type}'", field="valueType")

    def _check_query(self, model: DomainModel) -> Iterator[ValidationError]:
        if not model.fields:
            yield ValidationError("Query fields should not be empty", field="fields")

        for i, name in _duplicates(f.name for f in model.fields):
            yield ValidationError(f"Field with such name already exists: '{name}'", field=f"fields[{i}]")

        for i, query_field in enumerate(model.fields):
            if not is_java_built_in_class(query_field.class_name) and not is_valid_java_class(query_field.class_name):
                yield ValidationError(
                    f"Query field class is invalid Java class name: '{query_field.class_name}'",
                    field=f"fields[{i}]",
                )

        for i, alias in _duplicates(a.alias for a in model.aliases):
            yield ValidationError(f"Field with such alias already exists: '{alias}'", field=f"aliases[{i}]")

        field_names = {f.name for f in model.fields}
        for i, name in _duplicates(idx.name for idx in model.indexes):
            yield ValidationError(f"Index with such name already exists: '{name}'", field=f"indexes[{i}]")

        for i, index in enumerate(model.indexes):
            if not index.name:
                yield ValidationError("Index name should not be empty", field=f"indexes[{i}]")
            if index.index_type not in IndexTypes.ALL:
                yield ValidationError(f"Unknown index type: '{index.index_type}'", field=f"indexes[{i}]")
            if not index.fields:
                yield ValidationError("Index fields are not specified", field=f"indexes[{i}]")
            for j, name in _duplicates(f.name for f in index.fields):
                yield ValidationError(
                    f"Field with such name already exists in index: '{name}'",
                    field=f"indexes[{i}].fields[{j}]",
                )
            for j, index_field in enumerate(index.fields):
                if index_field.name not in field_names:
                    yield ValidationError(
                        f"Index field '{index_field.name}' is not a query field",
                        field=f"indexes[{i}].fields[{j}]",
                    )

    def _check_store(self, model: DomainModel) -> Iterator[ValidationError]:
        if not model.database_schema:
            yield ValidationError("Database schema should not be empty", field="databaseSchema")

        if not model.database_table:
            yield ValidationError("Database table should not be empty", field="databaseTable")

        if not model.key_fields:
            yield ValidationError("Key fields are not specified", field="keyFields")
        elif is_java_built_in_class(model.key_type) and len(model.key_fields) != 1:
            yield ValidationError(
                "Only one field should be specified in case when key type is a Java built-in type",
                field="keyFields",
            )

        if not model.value_fields:
            yield ValidationError("Value fields are not specified", field="valueFields")

        yield from self._check_db_fields("keyFields", "Key field", model.key_fields)
        yield from self._check_db_fields("valueFields", "Value field", model.value_fields)

    @staticmethod
    def _check_db_fields(attr: str, label: str, db_fields: Sequence[DbField]) -> Iterator[ValidationError]:
        for i, db_field in enumerate(db_fields):
            if not is_valid_java_identifier(db_field.java_field_name):
                yield ValidationError(
                    f"{label} java name is invalid: '{db_field.java_field_name}'",
                    field=f"{attr}[{i}]",
                )

        for i, name in _duplicates(f.database_field_name for f in db_fields):
            yield ValidationError(f"Field with such database name already exists: '{name}'", field=f"{attr}[{i}]")

        for i, name in _duplicates(f.java_field_name for f in db_fields):
            yield ValidationError(f"Field with such java name already exists: '{name}'", field=f"{attr}[{i}]")
