import argparse
from pathlib import Path
from typing import List, Optional, Tuple

from sqlalchemy.exc import OperationalError

from . import __version__
from .database import Customer, Product, init_database, get_session
from .env import Settings, load_env
from .errors import PersistenceFailure
from .logger import StructuredLogger
from .retry import RetryError, exponential_backoff, is_transient_error
from .seed import seed_customers, seed_products
from .store import EntityStore
from .workflow import SelectionWorkflow, TerminalConsole


def open_store(db_path: Path, logger: StructuredLogger, reset: bool = True,
               max_retries: int = 3, base_delay: float = 0.5) -> EntityStore:
    """Create the schema (retrying while the file is busy) and return a store."""

    def _on_retry(attempt, exc, delay):
        logger.warning(f"Database not ready, retrying in {delay:.1f}s", attempt=attempt, error=str(exc))

    @exponential_backoff(max_retries=max_retries, base_delay=base_delay,
                         exceptions=(OperationalError,), on_retry=_on_retry)
    def _init():
        try:
            init_database(db_path, reset=reset)
        except OperationalError as e:
            if not is_transient_error(e):
                raise PersistenceFailure(f"Cannot open database {db_path}: {e}") from e
            raise

    try:
        _init()
    except RetryError as e:
        raise PersistenceFailure(f"Cannot open database {db_path}: {e}") from e
    except OSError as e:
        raise PersistenceFailure(f"Cannot create database directory for {db_path}: {e}") from e

    logger.debug("Database ready", db_path=str(db_path), reset=reset)
    return EntityStore(get_session(db_path), logger)


def seed_store(store: EntityStore) -> Tuple[List[Customer], List[Product]]:
    """Persist the demo products, then the demo customers."""
    products = store.create_all(seed_products())
    customers = store.create_all(seed_customers())
    return customers, products


def _build_logger(settings: Settings) -> StructuredLogger:
    return StructuredLogger(
        level=settings.log_level,
        log_dir=settings.log_dir,
        enable_file=settings.log_to_file,
    )


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    if getattr(args, "db", None):
        settings.db_path = Path(args.db)
    if getattr(args, "log_level", None):
        settings.log_level = args.log_level.upper()
    return settings


def _seed_or_exit(settings: Settings, logger: StructuredLogger):
    """Open and seed the store; a PersistenceFailure ends the process with status 1."""
    try:
        store = open_store(settings.db_path, logger, reset=True)
    except PersistenceFailure as e:
        logger.critical(f"Seeding failed: {e}")
        raise SystemExit(1)

    try:
        customers, products = seed_store(store)
    except PersistenceFailure as e:
        store.session.close()
        logger.critical(f"Seeding failed: {e}")
        raise SystemExit(1)
    return store, customers, products


def cmd_run(args: argparse.Namespace, console=None) -> None:
    settings = _apply_overrides(Settings.from_env(), args)
    logger = _build_logger(settings)
    store, customers, products = _seed_or_exit(settings, logger)

    try:
        workflow = SelectionWorkflow(customers, products, console or TerminalConsole(), logger)
        workflow.run()
    finally:
        store.session.close()
        logger.log_metrics_summary()


def cmd_seed(args: argparse.Namespace) -> None:
    settings = _apply_overrides(Settings.from_env(), args)
    logger = _build_logger(settings)
    store, customers, products = _seed_or_exit(settings, logger)
    store.session.close()
    print(f"Seeded {len(products)} products and {len(customers)} customers into {settings.db_path}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="customerorders", description="Customer Orders demo")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    run = subparsers.add_parser("run", help="Seed the database and start the selection loop")
    run.add_argument("--db", help="Path to SQLite database (default: data/customerorders.db)")
    run.add_argument("--log-level", help="Console log level (DEBUG, INFO, WARNING, ...)")
    run.set_defaults(func=cmd_run)

    seed = subparsers.add_parser("seed", help="Recreate the tables and load the demo records")
    seed.add_argument("--db", help="Path to SQLite database (default: data/customerorders.db)")
    seed.add_argument("--log-level", help="Console log level")
    seed.set_defaults(func=cmd_seed)
    return parser


def main(argv: Optional[List[str]] = None):
    # Load .env if present (CUSTOMERORDERS_DB, CUSTOMERORDERS_LOG_LEVEL, etc.)
    load_env()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        args.func(args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
