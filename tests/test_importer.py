"""
Tests for the import pipeline: build, confirm, resolve and save.
"""

import pytest

from domain_model_importer.collection import DomainModelCollection
from domain_model_importer.domain.models import ConsoleSnapshot, DomainModel, ImportOptions
from domain_model_importer.exceptions import ImportInterrupted, PersistenceError, ValidationError
from domain_model_importer.importer import ImportPipeline, OverwriteDecision, overwrite_message

from conftest import INTEGER, VARCHAR, ScriptedConfirmer, make_table


def existing_order():
    return DomainModel(id="m1", key_type="java.lang.Long", value_type="com.x.Order", caches=["cache-1"])


@pytest.fixture
def collection(fake_console):
    fake_console.snapshot = ConsoleSnapshot(metadatas=[existing_order()])
    return DomainModelCollection(fake_console).load()


@pytest.fixture
def customer_table():
    return make_table("PUBLIC", "CUSTOMER", [("ID", INTEGER, False, True), ("NAME", VARCHAR, True, False)])


def pipeline(fake_console, collection, confirmer):
    return ImportPipeline(fake_console, collection, confirmer)


def test_new_tables_are_saved_and_merged(fake_console, collection, confirmer, customer_table, options):
    outcome = pipeline(fake_console, collection, confirmer).run([customer_table], options)

    assert [m.value_type for m in outcome.saved] == ["com.x.Customer"]
    assert outcome.saved[0].id is not None
    assert outcome.generated_caches == [{"_id": "cache-CustomerCache", "name": "CustomerCache"}]
    assert collection.value_types() == ["com.x.Order", "com.x.Customer"]
    assert outcome.selected.value_type == "com.x.Customer"
    assert confirmer.questions == []


def test_overwrite_updates_existing_record(fake_console, collection, confirmer, order_table, customer_table, options):
    """An overwritten record is sent with the existing id and caches and replaces it in place"""
    outcome = pipeline(fake_console, collection, confirmer).run([order_table, customer_table], options)

    sent = fake_console.saved_batches[0]
    assert [(m.value_type, m.id) for m in sent] == [("com.x.Order", "m1"), ("com.x.Customer", None)]
    assert sent[0].caches == ["cache-1"]
    assert confirmer.questions == ["com.x.Order"]
    assert [m.id for m in collection.models][0] == "m1"
    assert collection.models[0].key_type == "java.lang.Integer"
    assert len(collection.models) == 2
    assert outcome.skipped == []


def test_skip_leaves_existing_record(fake_console, collection, order_table, customer_table, options):
    confirmer = ScriptedConfirmer(decisions={"com.x.Order": OverwriteDecision.SKIP})
    outcome = pipeline(fake_console, collection, confirmer).run([order_table, customer_table], options)

    assert [m.value_type for m in fake_console.saved_batches[0]] == ["com.x.Customer"]
    assert [m.value_type for m in outcome.skipped] == ["com.x.Order"]
    assert collection.models[0].key_type == "java.lang.Long"


def test_everything_skipped_saves_nothing(fake_console, collection, order_table, options):
    confirmer = ScriptedConfirmer(decisions={"com.x.Order": OverwriteDecision.SKIP})
    outcome = pipeline(fake_console, collection, confirmer).run([order_table], options)

    assert fake_console.saved_batches == []
    assert outcome.saved == []
    assert len(outcome.skipped) == 1


def test_cancel_stops_before_any_save(fake_console, collection, order_table, customer_table, options):
    confirmer = ScriptedConfirmer(decisions={"com.x.Order": OverwriteDecision.CANCEL})

    with pytest.raises(ImportInterrupted) as exc_info:
        pipeline(fake_console, collection, confirmer).run([customer_table, order_table], options)

    assert exc_info.value.message == "Importing of domain models interrupted by user."
    assert fake_console.saved_batches == []
    assert collection.value_types() == ["com.x.Order"]


def test_missing_key_declined(fake_console, collection, keyless_table, customer_table, options):
    confirmer = ScriptedConfirmer(accept_warnings=False)

    with pytest.raises(ImportInterrupted):
        pipeline(fake_console, collection, confirmer).run([customer_table, keyless_table], options)

    assert len(confirmer.questions) == 1
    assert fake_console.saved_batches == []


def test_missing_key_accepted(fake_console, collection, confirmer, keyless_table, options):
    outcome = pipeline(fake_console, collection, confirmer).run([keyless_table], options)

    assert len(confirmer.questions) == 1
    assert outcome.saved[0].key_fields == []
    assert outcome.saved[0].key_type == "com.x.AuditLogKey"


def test_all_questions_answered_before_save(fake_console, collection, keyless_table, order_table, options):
    """No remote call happens until every confirmation has been answered"""
    confirmer = ScriptedConfirmer()
    answered_at_save = []
    original = fake_console.save_batch

    def save_batch(batch):
        answered_at_save.append(list(confirmer.questions))
        return original(batch)

    fake_console.save_batch = save_batch
    pipeline(fake_console, collection, confirmer).run([keyless_table, order_table], options)

    assert len(answered_at_save) == 1
    assert len(answered_at_save[0]) == 2


def test_save_failure_leaves_collection(fake_console, collection, customer_table, confirmer, options):
    fake_console.fail_with = "Failed to save domain models"

    with pytest.raises(PersistenceError) as exc_info:
        pipeline(fake_console, collection, confirmer).run([customer_table], options)

    assert exc_info.value.operation == "save_batch"
    assert collection.value_types() == ["com.x.Order"]


def test_invalid_package_rejected_first(fake_console, collection, confirmer, customer_table):
    with pytest.raises(ValidationError) as exc_info:
        pipeline(fake_console, collection, confirmer).run([customer_table], ImportOptions(package_name="com.1x"))

    assert exc_info.value.field == "packageName"
    assert fake_console.saved_batches == []


def test_overwrite_message_names_table():
    record = DomainModel(value_type="com.x.Order", database_table="ORDER")
    assert overwrite_message(record) == (
        "Domain model with name \"ORDER\" already exist. Are you sure you want to overwrite it?"
    )
