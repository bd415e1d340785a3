"""
Tests for deriving domain model records from selected tables.

This module checks key/value partitioning, primitive gating, built-in keys,
duplicate class suffixes, index conversion and cache requests.
"""

import unittest

from domain_model_importer.constants import IndexTypes
from domain_model_importer.domain.builder import DomainModelBuilder
from domain_model_importer.domain.models import ImportOptions
from domain_model_importer.domain.validation import DomainModelValidator

from conftest import INTEGER, TIMESTAMP, VARCHAR, make_table


def order_table(schema="PUBLIC", name="ORDER", use=True):
    return make_table(
        schema,
        name,
        [
            ("ID", INTEGER, False, True),
            ("CUSTOMER_ID", INTEGER, True, False),
            ("AMOUNT", INTEGER, False, False),
            ("CREATED_AT", TIMESTAMP, False, False),
        ],
        idxs=[("ORDER_CUSTOMER_IDX", {"CUSTOMER_ID": False, "CREATED_AT": True})],
        use=use,
    )


class TestDomainModelBuilder(unittest.TestCase):

    def setUp(self):
        self.builder = DomainModelBuilder()
        self.options = ImportOptions(package_name="com.x", generated_caches_clusters=("c1", "c2"))

    def build_one(self, table, options=None):
        result = self.builder.build([table], options or self.options)
        self.assertEqual(len(result.records), 1)
        return result.records[0]

    def test_types_and_table_reference(self):
        record = self.build_one(order_table())
        self.assertEqual(record.value_type, "com.x.Order")
        self.assertEqual(record.database_schema, "PUBLIC")
        self.assertEqual(record.database_table, "ORDER")

    def test_columns_partition_into_key_and_value_fields(self):
        """Every column lands in exactly one of key fields or value fields"""
        record = self.build_one(order_table())
        self.assertEqual([f.database_field_name for f in record.key_fields], ["ID"])
        self.assertEqual(
            [f.database_field_name for f in record.value_fields],
            ["CUSTOMER_ID", "AMOUNT", "CREATED_AT"],
        )
        self.assertEqual(len(record.fields), 4)

    def test_primitive_types_only_for_not_null_columns(self):
        record = self.build_one(order_table())
        by_name = {f.database_field_name: f for f in record.key_fields + record.value_fields}
        self.assertEqual(by_name["ID"].java_field_type, "int")
        self.assertEqual(by_name["AMOUNT"].java_field_type, "int")
        self.assertEqual(by_name["CUSTOMER_ID"].java_field_type, "java.lang.Integer")
        self.assertEqual(by_name["CREATED_AT"].java_field_type, "java.sql.Timestamp")
        self.assertEqual(by_name["CUSTOMER_ID"].java_field_name, "customerId")
        self.assertEqual(by_name["CUSTOMER_ID"].database_field_type, "INTEGER")

    def test_primitives_disabled(self):
        options = ImportOptions(package_name="com.x", use_primitives=False)
        record = self.build_one(order_table(), options)
        self.assertEqual(record.key_fields[0].java_field_type, "java.lang.Integer")

    def test_query_fields_use_boxed_types(self):
        record = self.build_one(order_table())
        self.assertEqual(record.fields[0].name, "id")
        self.assertEqual(record.fields[0].class_name, "java.lang.Integer")

    def test_single_key_collapses_to_built_in_type(self):
        """With built-in keys a one-column key uses the boxed Java type of that column"""
        record = self.build_one(order_table())
        self.assertEqual(record.key_type, "java.lang.Integer")

    def test_key_class_when_built_in_keys_disabled(self):
        options = ImportOptions(package_name="com.x", builtin_keys=False)
        record = self.build_one(order_table(), options)
        self.assertEqual(record.key_type, "com.x.OrderKey")

    def test_composite_key_gets_key_class(self):
        table = make_table(
            "PUBLIC",
            "ORDER_LINE",
            [("ORDER_ID", INTEGER, False, True), ("LINE_NO", INTEGER, False, True), ("SKU", VARCHAR, True, False)],
        )
        record = self.build_one(table)
        self.assertEqual(record.key_type, "com.x.OrderLineKey")
        self.assertEqual(record.value_type, "com.x.OrderLine")
        self.assertEqual(len(record.key_fields), 2)

    def test_duplicate_class_names_get_suffixes(self):
        """Tables with the same class name in one batch get _1, _2 suffixes on both types"""
        options = ImportOptions(package_name="com.x", builtin_keys=False)
        tables = [order_table("A"), order_table("B"), order_table("C", name="order")]
        records = self.builder.build(tables, options).records

        self.assertEqual([r.value_type for r in records], ["com.x.Order", "com.x.Order_1", "com.x.Order_2"])
        self.assertEqual([r.key_type for r in records], ["com.x.OrderKey", "com.x.OrderKey_1", "com.x.OrderKey_2"])
        self.assertEqual(len({r.value_type for r in records}), 3)

    def test_unselected_tables_skipped(self):
        tables = [order_table("A", use=False), order_table("B")]
        records = self.builder.build(tables, self.options).records
        self.assertEqual(len(records), 1)
        self.assertEqual(records[0].database_schema, "B")
        self.assertEqual(records[0].value_type, "com.x.Order")

    def test_indexes_are_sorted_with_ascending_flag(self):
        """Source "descending" flags become "ascending" directions on normalized field names"""
        record = self.build_one(order_table())
        self.assertEqual(len(record.indexes), 1)
        index = record.indexes[0]
        self.assertEqual(index.name, "ORDER_CUSTOMER_IDX")
        self.assertEqual(index.index_type, IndexTypes.SORTED)
        self.assertEqual([(f.name, f.direction) for f in index.fields], [("customerId", True), ("createdAt", False)])

    def test_cache_request(self):
        record = self.build_one(order_table())
        self.assertEqual(record.new_cache.name, "OrderCache")
        self.assertEqual(record.new_cache.clusters, ["c1", "c2"])
        self.assertFalse(record.new_cache.demo)

    def test_no_cache_request_when_disabled(self):
        options = ImportOptions(package_name="com.x", generate_caches=False)
        self.assertIsNone(self.build_one(order_table(), options).new_cache)

    def test_demo_and_space_propagate(self):
        options = ImportOptions(package_name="com.x", demo=True, space="space-1")
        record = self.build_one(order_table(), options)
        self.assertTrue(record.demo)
        self.assertTrue(record.new_cache.demo)
        self.assertEqual(record.space, "space-1")

    def test_missing_key_flag(self):
        keyless = make_table("PUBLIC", "AUDIT", [("MESSAGE", VARCHAR, True, False)])
        with self.assertLogs("domain_model_importer.domain.builder", level="WARNING"):
            result = self.builder.build([order_table(), keyless], self.options)
        self.assertTrue(result.any_missing_key)
        self.assertEqual(result.records[1].key_fields, [])

        self.assertFalse(self.builder.build([order_table()], self.options).any_missing_key)

    def test_unsupported_column_type_maps_to_object(self):
        table = make_table("PUBLIC", "SHAPES", [("ID", INTEGER, False, True), ("GEO", 9999, True, False)])
        record = self.build_one(table)
        self.assertEqual(record.value_fields[0].java_field_type, "java.lang.Object")
        self.assertEqual(record.value_fields[0].database_field_type, "Unknown")

    def test_invalid_package_characters_normalized(self):
        options = ImportOptions(package_name="my-corp.model")
        self.assertEqual(self.build_one(order_table(), options).value_type, "my_corp.model.Order")

    def test_built_records_pass_validation(self):
        record = self.build_one(order_table())
        self.assertEqual(DomainModelValidator().errors(record), [])
