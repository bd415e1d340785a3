import argparse
import logging
import sys
from typing import List, Optional

from .colored_logging import (
    setup_colored_logging,
    log_success,
    log_progress,
    log_section,
)
from .config import load_settings, ImporterSettings
from .client import ConsoleHttpClient
from .collection import DomainModelCollection
from .domain.models import DomainModel, Driver
from .exceptions import DomainImporterError
from .importer import ImportPipeline, OverwriteDecision
from .presets import JsonFilePresetStore
from .wizard import (
    ImportWizard,
    WizardAction,
    WizardState,
    select_all_schemas,
    select_all_tables,
    select_schema,
    select_table,
    with_connection,
    with_options,
)


logger = logging.getLogger(__name__)


class InteractiveConfirmer:
    """Asks confirmations on the terminal."""

    def confirm(self, message: str) -> bool:
        answer = input(f"{message} [y/N] ").strip().lower()
        return answer in ("y", "yes")

    def confirm_overwrite(self, record: DomainModel, message: str) -> OverwriteDecision:
        answer = input(f"{message} [y]es / [s]kip / [c]ancel: ").strip().lower()
        if answer in ("y", "yes"):
            return OverwriteDecision.OVERWRITE
        if answer in ("s", "skip"):
            return OverwriteDecision.SKIP
        return OverwriteDecision.CANCEL


class PolicyConfirmer:
    """Answers confirmations from command line flags."""

    def __init__(self, accept_warnings: bool, on_conflict: OverwriteDecision):
        self.accept_warnings = accept_warnings
        self.on_conflict = on_conflict

    def confirm(self, message: str) -> bool:
        logger.warning(message)
        return self.accept_warnings

    def confirm_overwrite(self, record: DomainModel, message: str) -> OverwriteDecision:
        logger.info(f"{record.value_type}: {self.on_conflict.value}")
        return self.on_conflict


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="domain-model-importer",
        description="Import database schema metadata as key-value store domain models.",
    )
    parser.add_argument("-c", "--config", help="Path to the YAML configuration file.")
    parser.add_argument("--console-url", dest="console_url", help="Base URL of the console backend.")
    parser.add_argument("-v", "--verbose", action="store_true", default=None, help="Enable DEBUG logging.")
    parser.add_argument("--no-color", dest="no_color", action="store_true", default=None,
                        help="Disable colored output.")

    commands = parser.add_subparsers(dest="command", required=True)

    imp = commands.add_parser("import", help="Import domain models from a database.")
    imp.add_argument("--demo", action="store_true", help="Import from the agent's demo database.")
    imp.add_argument("--driver-class", help="JDBC driver class (default: first available driver).")
    imp.add_argument("--jdbc-url", help="JDBC URL (default: remembered preset).")
    imp.add_argument("--user", help="Database user (default: remembered preset).")
    imp.add_argument("--password", default="", help="Database password.")
    imp.add_argument("--schema", action="append", default=[], help="Schema to load tables from (repeatable).")
    imp.add_argument("--table", action="append", default=[],
                     help="Table to import as schema.table (repeatable, default: tables with a primary key).")
    imp.add_argument("--package", dest="package_name", help="Java package of imported types.")
    imp.add_argument("--no-builtin-keys", dest="builtin_keys", action="store_false", default=None,
                     help="Always generate a key class.")
    imp.add_argument("--no-primitives", dest="use_primitives", action="store_false", default=None,
                     help="Never use primitive Java types.")
    imp.add_argument("--no-caches", dest="generate_caches", action="store_false", default=None,
                     help="Do not generate caches for imported domain models.")
    imp.add_argument("--on-conflict", choices=["ask", "overwrite", "skip"], default="ask",
                     help="What to do with domain models that already exist.")
    imp.add_argument("-y", "--yes", action="store_true", help="Accept warnings without asking.")

    commands.add_parser("list", help="List existing domain models.")

    rem = commands.add_parser("remove", help="Remove domain models.")
    group = rem.add_mutually_exclusive_group(required=True)
    group.add_argument("--id", dest="model_id", help="Remove one domain model by id.")
    group.add_argument("--all", action="store_true", help="Remove all domain models.")
    group.add_argument("--demo", action="store_true", help="Remove generated demo domain models and caches.")

    return parser


def _confirmer(args: argparse.Namespace):
    if args.on_conflict == "ask":
        return InteractiveConfirmer()
    decision = OverwriteDecision.OVERWRITE if args.on_conflict == "overwrite" else OverwriteDecision.SKIP
    return PolicyConfirmer(accept_warnings=args.yes, on_conflict=decision)


def _pick_driver(state: WizardState, driver_class: Optional[str]) -> Optional[Driver]:
    if not driver_class:
        return None
    for driver in state.drivers:
        if driver.jdbc_driver_class == driver_class:
            return driver
    raise DomainImporterError(
        f"JDBC driver '{driver_class}' is not available",
        context={"available": [d.jdbc_driver_class for d in state.drivers]},
    )


def run_import(args: argparse.Namespace, settings: ImporterSettings, client: ConsoleHttpClient) -> int:
    collection = DomainModelCollection(client).load()
    pipeline = ImportPipeline(client, collection, _confirmer(args))
    wizard = ImportWizard(
        discovery=client,
        pipeline=pipeline,
        preset_store=JsonFilePresetStore(settings.presets_file),
        default_options=settings.import_options(collection.cluster_ids, collection.default_space),
    )

    log_section(logger, "Connect")
    state = wizard.start(demo=args.demo)
    if state.action is WizardAction.FAILED:
        logger.error(state.error)
        return 1

    if not args.demo:
        driver = _pick_driver(state, args.driver_class)
        if driver is not None:
            state = wizard.select_driver(state, driver)
        changes = {"password": args.password}
        if args.jdbc_url:
            changes["jdbc_url"] = args.jdbc_url
        if args.user:
            changes["user"] = args.user
        state = with_connection(state, **changes)

    state = wizard.next(state)
    if state.action is WizardAction.CANCELLED:
        logger.error("Demo import is unavailable: H2 JDBC driver not found")
        return 1

    if state.action is WizardAction.SCHEMAS:
        log_section(logger, "Schemas")
        if args.schema:
            state = select_all_schemas(state, use=False)
            for name in args.schema:
                state = select_schema(state, name)
        logger.info(f"Schemas: {', '.join(state.checked_schemas) or '-'}")
        state = wizard.next(state)

    log_section(logger, "Tables")
    if args.table:
        state = select_all_tables(state, use=False)
        for label in args.table:
            state = select_table(state, label)
    for table in state.checked_tables:
        logger.info(f"  {table.label}")
    state = wizard.next(state)

    option_changes = {
        key: getattr(args, key)
        for key in ("package_name", "builtin_keys", "use_primitives", "generate_caches")
        if getattr(args, key) is not None
    }
    if option_changes:
        state = with_options(state, **option_changes)

    log_section(logger, "Save")
    state = wizard.next(state)

    outcome = state.outcome
    for model in outcome.saved:
        log_success(logger, f"{model.value_type} (key: {model.key_type})")
    for model in outcome.skipped:
        logger.info(f"Skipped {model.value_type}")
    return 0


def run_list(client: ConsoleHttpClient) -> int:
    collection = DomainModelCollection(client).load()
    for model in collection.models:
        marker = " [demo]" if model.demo else ""
        print(f"{model.id}\t{model.value_type}\t{model.key_type}{marker}")
    missing = collection.models_without_keys()
    if missing:
        logger.warning(f"{len(missing)} domain model(s) have no key fields configured")
    return 0


def run_remove(args: argparse.Namespace, client: ConsoleHttpClient) -> int:
    collection = DomainModelCollection(client).load()
    if args.model_id:
        collection.remove_one(args.model_id)
    elif args.all:
        collection.remove_all()
    else:
        collection.remove_demo()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_colored_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        use_colors=not args.no_color,
    )

    try:
        log_progress(logger, "Loading configuration...")
        settings = load_settings(args.config, args)
        client = ConsoleHttpClient(settings.console_url, timeout=settings.request_timeout)
        try:
            if args.command == "import":
                return run_import(args, settings, client)
            if args.command == "list":
                return run_list(client)
            return run_remove(args, client)
        finally:
            client.close()
    except DomainImporterError as e:
        logger.error(str(e), exc_info=bool(args.verbose))
        return 1
    except KeyboardInterrupt:
        logger.error("Interrupted")
        return 1


if __name__ == "__main__":
    sys.exit(main())
