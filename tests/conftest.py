"""
Pytest configuration and shared fixtures.
"""

import pytest
from decimal import Decimal
from pathlib import Path
from typing import List

from customerorders.database import Customer, Product, init_database, get_session
from customerorders.logger import StructuredLogger
from customerorders.store import EntityStore


class ScriptedConsole:
    """Console that replays a fixed list of tokens and records output."""

    def __init__(self, tokens: List[str]):
        self.tokens = list(tokens)
        self.output: List[str] = []
        self.prompts: List[str] = []

    def read_token(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.tokens:
            raise EOFError("script exhausted")
        return self.tokens.pop(0)

    def write(self, line: str) -> None:
        self.output.append(line)


@pytest.fixture
def db_path(tmp_path) -> Path:
    """Initialized temporary database."""
    path = tmp_path / "test.db"
    init_database(path)
    return path


@pytest.fixture
def db_session(db_path):
    """Session on the temporary database."""
    session = get_session(db_path)
    yield session
    session.close()


@pytest.fixture
def quiet_logger() -> StructuredLogger:
    """Logger with no console or file output."""
    return StructuredLogger(name="test", enable_console=False, enable_file=False)


@pytest.fixture
def store(db_session, quiet_logger) -> EntityStore:
    return EntityStore(db_session, quiet_logger)


def make_product(upc: str, description: str = "claw hammer") -> Product:
    return Product(
        upc=upc,
        description=description,
        manufacturer="Acme Tools",
        style="1",
        unit_price=Decimal("9.97"),
        units_in_stock=5,
    )


def make_customer(last_name: str = "Smith", first_name: str = "John") -> Customer:
    return Customer(
        last_name=last_name,
        first_name=first_name,
        street="Flower road 1112",
        zip_code="90809",
        phone="9091254327",
    )


@pytest.fixture
def rosters(store):
    """One persisted customer (id 1) and one persisted product (UPC "A")."""
    customers = store.create_all([make_customer()])
    products = store.create_all([make_product("A")])
    return customers, products


@pytest.fixture
def scripted_console():
    return ScriptedConsole


@pytest.fixture
def product_factory():
    return make_product


@pytest.fixture
def customer_factory():
    return make_customer
