"""
Interactive selection loop.

The operator types a customer id, then a product UPC. Each token is
resolved against the in-memory rosters returned by the entity store.
Any bad or unknown token sends the operator back to the customer list.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Sequence, TextIO
import re
import sys

from .database import Customer, Product
from .errors import InputFormatError, LookupMiss
from .logger import StructuredLogger

EXIT_TOKENS = {"q", "quit", "exit"}
INTEGER_TOKEN = re.compile(r"[+-]?[0-9]+")


class TerminalConsole:
    """
    Reads whitespace-separated tokens from a text stream.

    Several tokens may be typed on one line; blank lines are skipped.
    """

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self._pending: List[str] = []

    def read_token(self, prompt: str) -> str:
        self.write(prompt)
        while not self._pending:
            line = self.stdin.readline()
            if not line:
                raise EOFError("input exhausted")
            self._pending.extend(line.split())
        return self._pending.pop(0)

    def write(self, line: str) -> None:
        print(line, file=self.stdout, flush=True)


@dataclass
class Selection:
    customer: Customer
    product: Product


@dataclass
class WorkflowResult:
    selections: List[Selection] = field(default_factory=list)
    errors: List[Exception] = field(default_factory=list)


class _Exit(Exception):
    pass


def find_customer(customers: Iterable[Customer], customer_id: int) -> Customer:
    """First customer in roster order whose id equals customer_id."""
    for customer in customers:
        if customer.customer_id == customer_id:
            return customer
    raise LookupMiss("customer", customer_id)


def find_product(products: Iterable[Product], upc: str) -> Product:
    """First product in roster order whose UPC equals upc exactly."""
    for product in products:
        if product.upc == upc:
            return product
    raise LookupMiss("product", upc)


def parse_customer_id(token: str) -> int:
    """Plain ASCII digits with an optional sign; anything else is a format error."""
    if not INTEGER_TOKEN.fullmatch(token):
        raise InputFormatError(token)
    return int(token)


class SelectionWorkflow:
    """Customer-then-product selection over fixed rosters."""

    def __init__(
        self,
        customers: Sequence[Customer],
        products: Sequence[Product],
        console: Any,
        logger: StructuredLogger,
    ):
        self.customers = tuple(customers)
        self.products = tuple(products)
        self.console = console
        self.logger = logger

    def run(self, max_selections: Optional[int] = None) -> WorkflowResult:
        """
        Loop until the operator exits, input runs out, or max_selections
        selections have been confirmed.
        """
        result = WorkflowResult()
        self.console.write("*" * 94)
        while max_selections is None or len(result.selections) < max_selections:
            try:
                selection = self._iteration()
            except _Exit:
                self.logger.info("Selection loop ended by operator")
                break
            except InputFormatError as e:
                self.console.write("That's not a number! Try again")
                self._record_error(result, e)
                continue
            except LookupMiss as e:
                self.console.write("Not in the database. Try again")
                self._record_error(result, e)
                continue

            result.selections.append(selection)
            self.logger.record_selection()
            self.logger.info(
                "Selection confirmed",
                customer_id=selection.customer.customer_id,
                upc=selection.product.upc,
            )
            self.console.write(
                f"Selected customer {selection.customer.customer_id} "
                f"({selection.customer.first_name} {selection.customer.last_name}) "
                f"and product {selection.product.upc} ({selection.product.description})"
            )
        return result

    def _iteration(self) -> Selection:
        self._show(self.customers)
        token = self._read("Enter your customer ID:")
        customer = find_customer(self.customers, parse_customer_id(token))

        self._show(self.products)
        token = self._read("Enter your product's UPC:")
        product = find_product(self.products, token)
        return Selection(customer, product)

    def _show(self, roster: Sequence[Any]) -> None:
        for record in roster:
            self.console.write(str(record))

    def _read(self, prompt: str) -> str:
        try:
            token = self.console.read_token(prompt)
        except EOFError:
            raise _Exit()
        token = token.strip()
        if token.lower() in EXIT_TOKENS:
            raise _Exit()
        return token

    def _record_error(self, result: WorkflowResult, error: Exception) -> None:
        result.errors.append(error)
        self.logger.record_input_error(type(error).__name__)
        self.logger.warning(str(error), error_type=type(error).__name__)
