"""
Remote collaborators of the importer and their HTTP implementation.

The wizard needs schema discovery from the agent and batch persistence from
the console; the domain model collection needs single saves, removals and the
initial listing. ``ConsoleHttpClient`` implements all three against the
console REST endpoints.
"""

import logging
from typing import Any, Callable, List, Optional, Protocol

import requests
from requests.adapters import HTTPAdapter, Retry

from .constants import Endpoints
from .domain.models import (
    ConnectionPreset,
    ConsoleSnapshot,
    DomainModel,
    Driver,
    SaveBatchResult,
    TableMeta,
)
from .exceptions import DiscoveryError, PersistenceError


logger = logging.getLogger(__name__)


class SchemaDiscoveryClient(Protocol):
    """Lists drivers, schemas and tables of a remote database."""

    def list_drivers(self) -> List[Driver]:
        ...

    def list_schemas(self, preset: ConnectionPreset) -> List[str]:
        ...

    def list_tables(self, preset: ConnectionPreset) -> List[TableMeta]:
        ...


class BatchPersister(Protocol):
    """
    Saves a batch of domain models.

    Records without ``id`` are inserted and receive one; records with ``id``
    are updated.
    """

    def save_batch(self, batch: List[DomainModel]) -> SaveBatchResult:
        ...


class DomainModelRepository(BatchPersister, Protocol):
    """Everything the domain model screen needs from the console."""

    def list_existing(self) -> ConsoleSnapshot:
        ...

    def save_one(self, model: DomainModel) -> SaveBatchResult:
        ...

    def remove_one(self, model_id: str) -> None:
        ...

    def remove_all(self) -> None:
        ...

    def remove_demo(self) -> None:
        ...


class ConsoleHttpClient:
    """
    JSON-over-HTTP client for the console backend.

    Every endpoint is a POST; a non-2xx response body is the error message.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or self._create_session()

    @staticmethod
    def _create_session() -> requests.Session:
        session = requests.Session()
        # Default allowed_methods excludes POST: saves are never re-sent,
        # only connection failures before a request goes out are retried.
        retries = Retry(total=3, backoff_factor=0.3, status_forcelist=[502, 503, 504])
        session.mount('http://', HTTPAdapter(max_retries=retries))
        session.mount('https://', HTTPAdapter(max_retries=retries))
        session.headers.update({
            'Accept': 'application/json',
            'Content-Type': 'application/json',
        })
        return session

    def close(self) -> None:
        self.session.close()

    def _post(self, path: str, payload: Any = None) -> Any:
        """
        POST ``payload`` and return the decoded JSON body (None when empty).

        Raises:
            requests.RequestException: On transport failures
            RuntimeError: With the server's message on a non-2xx response
        """
        url = f"{self.base_url}{path}"
        logger.debug(f"POST {url}")
        response = self.session.post(url, json=payload, timeout=self.timeout)
        if not response.ok:
            message = response.text.strip() or f"HTTP {response.status_code}"
            raise RuntimeError(message)
        if not response.content:
            return None
        return response.json()

    def _call(self, path: str, payload: Any, convert: Callable[[Any], Any]) -> Any:
        """
        POST and convert the response body.

        Raises:
            ValueError: If the body does not have the expected shape
        """
        data = self._post(path, payload)
        try:
            return convert(data)
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Unexpected response from {path}: {type(e).__name__}: {e}") from e

    def _discover(self, step: str, path: str, payload: Any = None, convert: Callable[[Any], Any] = None) -> Any:
        try:
            return self._call(path, payload, convert or _identity)
        except (requests.RequestException, RuntimeError, ValueError) as e:
            raise DiscoveryError(str(e), step=step) from e

    def _persist(self, operation: str, path: str, payload: Any = None, convert: Callable[[Any], Any] = None) -> Any:
        try:
            return self._call(path, payload, convert or _identity)
        except (requests.RequestException, RuntimeError, ValueError) as e:
            raise PersistenceError(str(e), operation=operation) from e

    # --- Schema discovery ---

    def list_drivers(self) -> List[Driver]:
        return self._discover(
            "drivers", Endpoints.DRIVERS,
            convert=lambda data: [Driver.from_dict(item) for item in _items(data)],
        )

    def list_schemas(self, preset: ConnectionPreset) -> List[str]:
        return self._discover(
            "schemas", Endpoints.SCHEMAS, preset.to_dict(),
            convert=lambda data: [_schema_name(name) for name in _items(data)],
        )

    def list_tables(self, preset: ConnectionPreset) -> List[TableMeta]:
        return self._discover(
            "tables", Endpoints.TABLES, preset.to_dict(),
            convert=lambda data: [TableMeta.from_dict(item) for item in _items(data)],
        )

    # --- Domain model persistence ---

    def list_existing(self) -> ConsoleSnapshot:
        return self._discover("list", Endpoints.LIST, convert=lambda data: ConsoleSnapshot.from_dict(data or {}))

    def save_batch(self, batch: List[DomainModel]) -> SaveBatchResult:
        return self._persist(
            "save_batch", Endpoints.SAVE_BATCH, [m.to_dict() for m in batch],
            convert=lambda data: SaveBatchResult.from_dict(data or {}),
        )

    def save_one(self, model: DomainModel) -> SaveBatchResult:
        return self._persist(
            "save", Endpoints.SAVE, model.to_dict(),
            convert=lambda data: SaveBatchResult.from_dict(data or {}),
        )

    def remove_one(self, model_id: str) -> None:
        self._persist("remove", Endpoints.REMOVE, {"_id": model_id})

    def remove_all(self) -> None:
        self._persist("remove_all", Endpoints.REMOVE_ALL)

    def remove_demo(self) -> None:
        self._persist("remove_demo", Endpoints.REMOVE_DEMO)


def _identity(data: Any) -> Any:
    return data


def _items(data: Any) -> List[Any]:
    """A list response; an empty body counts as an empty list."""
    if data is None:
        return []
    if not isinstance(data, list):
        raise TypeError(f"expected a list, got {type(data).__name__}")
    return data


def _schema_name(name: Any) -> str:
    if not isinstance(name, str):
        raise TypeError(f"expected a schema name, got {type(name).__name__}")
    return name
