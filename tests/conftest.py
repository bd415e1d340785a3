# File: tests/conftest.py
# Shared fixtures: an in-memory console and sample table metadata.

import itertools
from typing import Any, Dict, List, Optional

import pytest

from domain_model_importer.domain.models import (
    ColumnMeta,
    ConnectionPreset,
    ConsoleSnapshot,
    DomainModel,
    Driver,
    ImportOptions,
    IndexMeta,
    SaveBatchResult,
    TableMeta,
)
from domain_model_importer.exceptions import PersistenceError
from domain_model_importer.importer import OverwriteDecision


INTEGER, VARCHAR, TIMESTAMP = 4, 12, 93


class FakeConsole:
    """In-memory console: discovery, persistence and listing in one object."""

    def __init__(self):
        self.drivers: List[Driver] = [
            Driver("postgresql-42.jar", "org.postgresql.Driver"),
            Driver("h2-1.4.jar", "org.h2.Driver"),
        ]
        self.schemas: List[str] = ["PUBLIC"]
        self.tables: List[TableMeta] = []
        self.snapshot = ConsoleSnapshot()
        self.fail_with: Optional[str] = None

        self.schema_requests: List[ConnectionPreset] = []
        self.table_requests: List[ConnectionPreset] = []
        self.saved_batches: List[List[DomainModel]] = []
        self.removed: List[str] = []
        self._ids = itertools.count(1)

    def _check_failure(self, operation: str):
        if self.fail_with:
            raise PersistenceError(self.fail_with, operation=operation)

    # discovery
    def list_drivers(self) -> List[Driver]:
        return list(self.drivers)

    def list_schemas(self, preset: ConnectionPreset) -> List[str]:
        self.schema_requests.append(preset)
        return list(self.schemas)

    def list_tables(self, preset: ConnectionPreset) -> List[TableMeta]:
        self.table_requests.append(preset)
        return list(self.tables)

    # persistence
    def list_existing(self) -> ConsoleSnapshot:
        return ConsoleSnapshot(
            spaces=list(self.snapshot.spaces),
            clusters=list(self.snapshot.clusters),
            caches=list(self.snapshot.caches),
            metadatas=[m.copy() for m in self.snapshot.metadatas],
        )

    def _stored(self, model: DomainModel) -> DomainModel:
        saved = model.copy(new_cache=None)
        if saved.id is None:
            saved.id = f"id-{next(self._ids)}"
        saved.confirm = False
        saved.skip = False
        return saved

    def save_batch(self, batch: List[DomainModel]) -> SaveBatchResult:
        self._check_failure("save_batch")
        self.saved_batches.append(list(batch))
        caches = [
            {"_id": f"cache-{m.new_cache.name}", "name": m.new_cache.name}
            for m in batch if m.new_cache is not None
        ]
        return SaveBatchResult(saved_metas=[self._stored(m) for m in batch], generated_caches=caches)

    def save_one(self, model: DomainModel) -> SaveBatchResult:
        self._check_failure("save")
        return SaveBatchResult(saved_metas=[self._stored(model)])

    def remove_one(self, model_id: str) -> None:
        self._check_failure("remove")
        self.removed.append(model_id)

    def remove_all(self) -> None:
        self._check_failure("remove_all")
        self.snapshot.metadatas = []

    def remove_demo(self) -> None:
        self._check_failure("remove_demo")
        self.snapshot.metadatas = [m for m in self.snapshot.metadatas if not m.demo]


class ScriptedConfirmer:
    """Confirmer answering from a script and recording every question."""

    def __init__(self, accept_warnings: bool = True, decisions: Optional[Dict[str, OverwriteDecision]] = None):
        self.accept_warnings = accept_warnings
        self.decisions = decisions or {}
        self.questions: List[Any] = []

    def confirm(self, message: str) -> bool:
        self.questions.append(message)
        return self.accept_warnings

    def confirm_overwrite(self, record: DomainModel, message: str) -> OverwriteDecision:
        self.questions.append(record.value_type)
        return self.decisions.get(record.value_type, OverwriteDecision.OVERWRITE)


def make_table(schema: str, name: str, cols, idxs=(), use: bool = True) -> TableMeta:
    return TableMeta(
        schema=schema,
        tbl=name,
        cols=tuple(ColumnMeta(name=c[0], type=c[1], nullable=c[2], key=c[3]) for c in cols),
        idxs=tuple(IndexMeta(name=i[0], fields=dict(i[1])) for i in idxs),
        use=use,
    )


@pytest.fixture
def order_table() -> TableMeta:
    return make_table(
        "PUBLIC",
        "ORDER",
        [
            ("ID", INTEGER, False, True),
            ("CUSTOMER_ID", INTEGER, True, False),
            ("CREATED_AT", TIMESTAMP, False, False),
        ],
        idxs=[("ORDER_CUSTOMER_IDX", {"CUSTOMER_ID": False, "CREATED_AT": True})],
    )


@pytest.fixture
def keyless_table() -> TableMeta:
    return make_table("PUBLIC", "AUDIT_LOG", [("MESSAGE", VARCHAR, True, False)])


@pytest.fixture
def options() -> ImportOptions:
    return ImportOptions(package_name="com.x", generated_caches_clusters=("cluster-1",))


@pytest.fixture
def fake_console() -> FakeConsole:
    return FakeConsole()


@pytest.fixture
def confirmer() -> ScriptedConfirmer:
    return ScriptedConfirmer()
