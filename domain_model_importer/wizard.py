"""
The import wizard state machine.

The wizard walks ``drivers -> connect -> schemas -> tables -> options`` and
ends in ``save-complete``; it can be cancelled from any step. State is an
immutable ``WizardState`` value: every transition takes a state and returns a
new one, so a transition that raises leaves the caller holding the previous
state unchanged.
"""

import itertools
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Dict, Optional, Set, Tuple

from .colored_logging import log_progress, log_highlight
from .constants import (
    DEMO_CONNECTION,
    DEMO_PACKAGE_NAME,
    H2_DRIVER_JAR_PREFIX,
    WizardTexts,
)
from .domain.models import ConnectionPreset, Driver, ImportOptions, SchemaItem, TableMeta
from .exceptions import WizardStateError
from .client import SchemaDiscoveryClient
from .importer import ImportOutcome, ImportPipeline
from .presets import PresetStore, find_preset, save_preset


logger = logging.getLogger(__name__)


class WizardAction(Enum):
    DRIVERS = "drivers"
    CONNECT = "connect"
    SCHEMAS = "schemas"
    TABLES = "tables"
    OPTIONS = "options"
    SAVED = "save-complete"
    CANCELLED = "cancelled"
    FAILED = "failed"


TERMINAL_ACTIONS = (WizardAction.SAVED, WizardAction.CANCELLED, WizardAction.FAILED)


@dataclass(frozen=True)
class WizardState:
    """Snapshot of one wizard run."""

    options: ImportOptions
    action: WizardAction = WizardAction.DRIVERS
    demo: bool = False
    run_id: int = 0
    drivers: Tuple[Driver, ...] = ()
    selected_driver: Optional[Driver] = None
    preset: ConnectionPreset = field(default_factory=ConnectionPreset)
    demo_driver_missing: bool = False
    schemas: Tuple[SchemaItem, ...] = ()
    tables: Tuple[TableMeta, ...] = ()
    info: str = ""
    button: str = WizardTexts.BUTTON_NEXT
    loading_text: str = WizardTexts.LOADING_JDBC_DRIVERS
    error: Optional[str] = None
    outcome: Optional[ImportOutcome] = None

    @property
    def checked_schemas(self) -> Tuple[str, ...]:
        return tuple(s.name for s in self.schemas if s.use)

    @property
    def checked_tables(self) -> Tuple[TableMeta, ...]:
        return tuple(t for t in self.tables if t.use)

    @property
    def all_schemas_selected(self) -> bool:
        return bool(self.schemas) and all(s.use for s in self.schemas)

    @property
    def all_tables_selected(self) -> bool:
        return bool(self.tables) and all(t.use for t in self.tables)

    @property
    def is_terminal(self) -> bool:
        return self.action in TERMINAL_ACTIONS


def _require(state: WizardState, *actions: WizardAction) -> None:
    if state.action not in actions:
        allowed = ", ".join(a.value for a in actions)
        raise WizardStateError(
            f"Operation is not available on step '{state.action.value}' (allowed: {allowed})",
            action=state.action.value,
        )


# --- Selection helpers ---

def select_schema(state: WizardState, name: str, use: bool = True) -> WizardState:
    _require(state, WizardAction.SCHEMAS)
    return replace(state, schemas=tuple(replace(s, use=use) if s.name == name else s for s in state.schemas))


def select_all_schemas(state: WizardState, use: bool = True) -> WizardState:
    _require(state, WizardAction.SCHEMAS)
    return replace(state, schemas=tuple(replace(s, use=use) for s in state.schemas))


def select_table(state: WizardState, label: str, use: bool = True) -> WizardState:
    """Check or uncheck a table by its ``schema.table`` label."""
    _require(state, WizardAction.TABLES)
    return replace(state, tables=tuple(replace(t, use=use) if t.label == label else t for t in state.tables))


def select_all_tables(state: WizardState, use: bool = True) -> WizardState:
    _require(state, WizardAction.TABLES)
    return replace(state, tables=tuple(replace(t, use=use) for t in state.tables))


def with_connection(state: WizardState, **changes) -> WizardState:
    """Edit the connection preset (``jdbc_url``, ``user``, ``password``...)."""
    _require(state, WizardAction.CONNECT)
    return replace(state, preset=replace(state.preset, **changes))


def with_options(state: WizardState, **changes) -> WizardState:
    """Edit import options; ``generated_caches_clusters`` may be any iterable."""
    _require(state, WizardAction.TABLES, WizardAction.OPTIONS)
    if "generated_caches_clusters" in changes:
        changes["generated_caches_clusters"] = tuple(changes["generated_caches_clusters"])
    return replace(state, options=replace(state.options, **changes))


def next_enabled(state: WizardState) -> bool:
    """Whether "next" may be pressed on the current step."""
    if state.is_terminal:
        return False
    if state.action is WizardAction.SCHEMAS:
        return not state.schemas or bool(state.checked_schemas)
    if state.action is WizardAction.TABLES:
        return bool(state.checked_tables)
    return True


def next_tooltip(state: WizardState) -> str:
    enabled = next_enabled(state)

    if state.action is WizardAction.CONNECT:
        if state.demo and state.demo_driver_missing:
            return "Resolve issue with H2 database driver. Close this dialog and try again"
        return "Click to load list of schemas from database"

    if state.action is WizardAction.SCHEMAS:
        return "Click to load list of tables from database" if enabled else "Select schemas to continue"

    if state.action is WizardAction.TABLES:
        return "Click to show import options" if enabled else "Select tables to continue"

    if state.action is WizardAction.OPTIONS:
        return "Click to import domain model for selected tables"

    return "Click to continue"


def prev_tooltip(state: WizardState) -> Optional[str]:
    if state.action is WizardAction.SCHEMAS:
        if state.demo:
            return "Click to return on demo description step"
        return "Click to return on connection configuration step"

    if state.action is WizardAction.TABLES:
        return "Click to return on schemas selection step"

    if state.action is WizardAction.OPTIONS:
        return "Click to return on tables selection step"

    return None


class ImportWizard:
    """
    Drives import runs against a discovery client and an import pipeline.

    Each ``begin`` starts a fresh run regardless of earlier runs. ``cancel``
    marks a run as cancelled; a discovery response that arrives for a
    cancelled or superseded run is dropped and the run ends as ``cancelled``.
    """

    def __init__(
        self,
        discovery: SchemaDiscoveryClient,
        pipeline: ImportPipeline,
        preset_store: PresetStore,
        default_options: ImportOptions,
    ):
        self.discovery = discovery
        self.pipeline = pipeline
        self.preset_store = preset_store
        self.default_options = default_options

        self._run_ids = itertools.count(1)
        self._active_run = 0
        self._cancelled: Set[int] = set()

        self._next: Dict[WizardAction, Callable[[WizardState], WizardState]] = {
            WizardAction.DRIVERS: self._load_drivers,
            WizardAction.CONNECT: self._connect,
            WizardAction.SCHEMAS: self._load_tables,
            WizardAction.TABLES: self._select_options,
            WizardAction.OPTIONS: self._save,
        }

    # --- Run lifecycle ---

    def begin(self, demo: bool = False) -> WizardState:
        """Fresh ``drivers`` state for a new run."""
        self._active_run = next(self._run_ids)
        # Runs other than the active one count as cancelled already.
        self._cancelled.clear()

        options = self.default_options
        if demo:
            options = replace(options, package_name=DEMO_PACKAGE_NAME, demo=True)

        return WizardState(options=options, demo=demo, run_id=self._active_run)

    def start(self, demo: bool = False) -> WizardState:
        """Begin a run and load the JDBC drivers."""
        return self.next(self.begin(demo))

    def cancel(self, state: WizardState) -> WizardState:
        self._cancelled.add(state.run_id)
        logger.info("Import cancelled")
        return replace(state, action=WizardAction.CANCELLED, button=WizardTexts.BUTTON_NEXT)

    def cancel_active(self) -> None:
        """Cancel whatever run is in progress, e.g. when the dialog is closed mid-request."""
        self._cancelled.add(self._active_run)

    def is_cancelled(self, state: WizardState) -> bool:
        return state.run_id in self._cancelled or state.run_id != self._active_run

    def _discard_if_cancelled(self, state: WizardState, new_state: WizardState) -> WizardState:
        if self.is_cancelled(state):
            logger.debug(f"Dropping response for cancelled run {state.run_id}")
            return replace(state, action=WizardAction.CANCELLED)
        return new_state

    # --- Transitions ---

    def next(self, state: WizardState) -> WizardState:
        """
        Advance one step.

        Raises:
            WizardStateError: On a terminal or cancelled run, or when the step is gated
            DiscoveryError: When listing drivers, schemas or tables fails
        """
        if self.is_cancelled(state):
            raise WizardStateError("Import run was cancelled", action=state.action.value)

        handler = self._next.get(state.action)
        if handler is None:
            raise WizardStateError(f"No next step after '{state.action.value}'", action=state.action.value)

        if not next_enabled(state):
            raise WizardStateError(next_tooltip(state), action=state.action.value)

        return handler(state)

    def prev(self, state: WizardState) -> WizardState:
        """Go back one step; ``connect`` is the first step that can be returned to."""
        if state.action is WizardAction.OPTIONS:
            return replace(
                state,
                action=WizardAction.TABLES,
                button=WizardTexts.BUTTON_NEXT,
                info=WizardTexts.INFO_SELECT_TABLES,
            )

        if state.action is WizardAction.TABLES and state.schemas:
            return replace(
                state,
                action=WizardAction.SCHEMAS,
                button=WizardTexts.BUTTON_NEXT,
                info=WizardTexts.INFO_SELECT_SCHEMAS,
                loading_text=WizardTexts.LOADING_TABLES,
            )

        if state.action in (WizardAction.TABLES, WizardAction.SCHEMAS):
            return replace(
                state,
                action=WizardAction.CONNECT,
                button=WizardTexts.BUTTON_NEXT,
                info=WizardTexts.INFO_CONNECT_TO_DB,
                loading_text=WizardTexts.LOADING_SCHEMAS,
            )

        raise WizardStateError(f"No previous step before '{state.action.value}'", action=state.action.value)

    def select_driver(self, state: WizardState, driver: Driver) -> WizardState:
        """Pick a driver and load its remembered connection preset."""
        _require(state, WizardAction.CONNECT)
        if state.demo:
            raise WizardStateError("Driver cannot be changed in demo mode", action=state.action.value)
        return replace(state, selected_driver=driver, preset=find_preset(self.preset_store, driver))

    # --- Step handlers ---

    def _load_drivers(self, state: WizardState) -> WizardState:
        log_progress(logger, WizardTexts.LOADING_JDBC_DRIVERS)
        drivers = self.discovery.list_drivers()

        if not drivers:
            logger.error(WizardTexts.NO_DRIVERS)
            return self._discard_if_cancelled(
                state, replace(state, action=WizardAction.FAILED, error=WizardTexts.NO_DRIVERS)
            )

        drivers = tuple(sorted(drivers, key=lambda d: d.jdbc_driver_jar))
        log_highlight(logger, f"Found {len(drivers)} JDBC driver(s)")

        new_state = replace(
            state,
            action=WizardAction.CONNECT,
            drivers=drivers,
            tables=(),
            info=WizardTexts.INFO_CONNECT_TO_DB,
            loading_text=WizardTexts.LOADING_SCHEMAS,
        )

        if state.demo:
            h2 = next((d for d in drivers if d.jdbc_driver_jar.startswith(H2_DRIVER_JAR_PREFIX)), None)
            if h2 is not None:
                preset = replace(ConnectionPreset.from_dict(DEMO_CONNECTION), jdbc_driver_jar=h2.jdbc_driver_jar)
                new_state = replace(new_state, selected_driver=h2, preset=preset)
            else:
                logger.warning("H2 JDBC driver not found, demo import is unavailable")
                preset = replace(ConnectionPreset.from_dict(DEMO_CONNECTION), db="unknown")
                new_state = replace(
                    new_state, preset=preset, demo_driver_missing=True, button=WizardTexts.BUTTON_CANCEL
                )
        else:
            first = drivers[0]
            new_state = replace(new_state, selected_driver=first, preset=find_preset(self.preset_store, first))

        return self._discard_if_cancelled(state, new_state)

    def _connect(self, state: WizardState) -> WizardState:
        if state.demo and state.demo_driver_missing:
            return self.cancel(state)

        preset = replace(state.preset, schemas=())
        if not state.demo:
            save_preset(self.preset_store, preset)

        log_progress(logger, WizardTexts.LOADING_SCHEMAS)
        names = self.discovery.list_schemas(preset)

        new_state = replace(
            state,
            action=WizardAction.SCHEMAS,
            preset=preset,
            schemas=tuple(SchemaItem(name=name, use=True) for name in names),
            info=WizardTexts.INFO_SELECT_SCHEMAS,
            loading_text=WizardTexts.LOADING_TABLES,
        )
        new_state = self._discard_if_cancelled(state, new_state)

        # Nothing to pick from: go straight on to tables.
        if new_state.action is WizardAction.SCHEMAS and not new_state.schemas:
            return self._load_tables(new_state)
        return new_state

    def _load_tables(self, state: WizardState) -> WizardState:
        preset = replace(state.preset, schemas=state.checked_schemas)

        log_progress(logger, WizardTexts.LOADING_TABLES)
        tables = self.discovery.list_tables(preset)

        # Tables with a primary key start out checked.
        tables = tuple(replace(t, use=t.has_key) for t in tables)
        log_highlight(logger, f"Found {len(tables)} table(s)")

        return self._discard_if_cancelled(state, replace(
            state,
            action=WizardAction.TABLES,
            preset=preset,
            tables=tables,
            info=WizardTexts.INFO_SELECT_TABLES,
        ))

    def _select_options(self, state: WizardState) -> WizardState:
        return replace(
            state,
            action=WizardAction.OPTIONS,
            button=WizardTexts.BUTTON_SAVE,
            info=WizardTexts.INFO_SELECT_OPTIONS,
            loading_text=WizardTexts.SAVING_METADATA,
        )

    def _save(self, state: WizardState) -> WizardState:
        outcome = self.pipeline.run(state.checked_tables, state.options)
        return replace(state, action=WizardAction.SAVED, outcome=outcome, button=WizardTexts.BUTTON_NEXT)
