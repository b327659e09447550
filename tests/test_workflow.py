"""
Tests for workflow.py - the customer/product selection loop.
"""

import io

import pytest

from customerorders.errors import InputFormatError, LookupMiss
from customerorders.workflow import (
    SelectionWorkflow,
    TerminalConsole,
    find_customer,
    find_product,
    parse_customer_id,
)


def _error_lines(console, text):
    return [line for line in console.output if text in line]


class TestMatching:
    """Test roster scans and token parsing."""

    def test_find_customer(self, rosters):
        customers, _ = rosters
        assert find_customer(customers, 1) is customers[0]

    def test_find_customer_miss(self, rosters):
        customers, _ = rosters
        with pytest.raises(LookupMiss) as exc_info:
            find_customer(customers, 42)
        assert exc_info.value.token == 42

    def test_find_product_exact_match_only(self, rosters):
        _, products = rosters
        assert find_product(products, "A") is products[0]
        with pytest.raises(LookupMiss):
            find_product(products, "a")
        with pytest.raises(LookupMiss):
            find_product(products, "A ")

    def test_first_match_wins(self, product_factory):
        first = product_factory("A", description="first")
        second = product_factory("A", description="second")
        assert find_product([first, second], "A") is first

    def test_parse_customer_id(self):
        assert parse_customer_id("17") == 17
        with pytest.raises(InputFormatError) as exc_info:
            parse_customer_id("x")
        assert exc_info.value.token == "x"

    @pytest.mark.parametrize("token", ["-3", "+4", "007"])
    def test_parse_signed_and_padded(self, token):
        assert parse_customer_id(token) == int(token)

    @pytest.mark.parametrize("token", ["1_0", "0_1", "\u0661", "1.0", " 1", ""])
    def test_parse_rejects_non_ascii_integers(self, token):
        """Only plain ASCII digits count as an id."""
        with pytest.raises(InputFormatError):
            parse_customer_id(token)


class TestSelectionWorkflow:
    """Test the interactive loop against scripted input."""

    def test_match_without_errors(self, rosters, scripted_console, quiet_logger):
        customers, products = rosters
        console = scripted_console(["1", "A"])

        result = SelectionWorkflow(customers, products, console, quiet_logger).run()

        assert len(result.selections) == 1
        assert result.selections[0].customer is customers[0]
        assert result.selections[0].product is products[0]
        assert result.errors == []
        assert not _error_lines(console, "Try again")

    def test_bad_number_reprompts_for_customer(self, rosters, scripted_console, quiet_logger):
        customers, products = rosters
        console = scripted_console(["x", "1", "A"])

        result = SelectionWorkflow(customers, products, console, quiet_logger).run()

        assert len(result.errors) == 1
        assert isinstance(result.errors[0], InputFormatError)
        assert len(_error_lines(console, "not a number")) == 1
        assert len(result.selections) == 1
        # Product prompt only reached once, after the good id
        assert console.prompts == [
            "Enter your customer ID:",
            "Enter your customer ID:",
            "Enter your product's UPC:",
            "Enter your customer ID:",
        ]

    def test_unknown_upc_restarts_from_customers(self, rosters, scripted_console, quiet_logger):
        customers, products = rosters
        console = scripted_console(["1", "Z", "1", "A"])

        result = SelectionWorkflow(customers, products, console, quiet_logger).run()

        assert len(result.errors) == 1
        assert isinstance(result.errors[0], LookupMiss)
        assert result.errors[0].token == "Z"
        assert len(_error_lines(console, "Not in the database")) == 1
        assert len(result.selections) == 1

        customer_line = str(customers[0])
        product_line = str(products[0])
        listings = [line for line in console.output if line in (customer_line, product_line)]
        # customers, products, (miss), customers, products, then customers again before EOF
        assert listings == [
            customer_line, product_line,
            customer_line, product_line,
            customer_line,
        ]

    def test_unknown_customer_id(self, rosters, scripted_console, quiet_logger):
        customers, products = rosters
        console = scripted_console(["7", "1", "A"])

        result = SelectionWorkflow(customers, products, console, quiet_logger).run()

        assert [type(e) for e in result.errors] == [LookupMiss]
        assert len(result.selections) == 1
        assert console.prompts == [
            "Enter your customer ID:",
            "Enter your customer ID:",
            "Enter your product's UPC:",
            "Enter your customer ID:",
        ]

    def test_underscore_id_is_format_error(self, rosters, scripted_console, quiet_logger):
        customers, products = rosters
        console = scripted_console(["0_1", "1", "A"])

        result = SelectionWorkflow(customers, products, console, quiet_logger).run()

        assert [type(e) for e in result.errors] == [InputFormatError]
        assert len(result.selections) == 1

    def test_roster_order_stable_across_iterations(self, store, customer_factory, product_factory,
                                                   scripted_console, quiet_logger):
        customers = store.create_all([customer_factory("Smith"), customer_factory("Dol"),
                                      customer_factory("Frank")])
        products = store.create_all([product_factory("P1"), product_factory("P2"), product_factory("P3")])
        console = scripted_console(["2", "P3", "nope", "3", "P1"])

        SelectionWorkflow(customers, products, console, quiet_logger).run()

        expected = [str(c) for c in customers]
        shown = [line for line in console.output if line.startswith("Customer {")]
        assert len(shown) == 4 * len(expected)
        for start in range(0, len(shown), len(expected)):
            assert shown[start:start + len(expected)] == expected

    def test_exit_token_stops_loop(self, rosters, scripted_console, quiet_logger):
        customers, products = rosters
        console = scripted_console(["1", "A", "quit", "1", "A"])

        result = SelectionWorkflow(customers, products, console, quiet_logger).run()

        assert len(result.selections) == 1
        assert console.tokens == ["1", "A"]

    def test_exit_at_product_prompt(self, rosters, scripted_console, quiet_logger):
        customers, products = rosters
        console = scripted_console(["1", "Q"])

        result = SelectionWorkflow(customers, products, console, quiet_logger).run()

        assert result.selections == []
        assert result.errors == []

    def test_max_selections(self, rosters, scripted_console, quiet_logger):
        customers, products = rosters
        console = scripted_console(["1", "A", "1", "A", "1", "A"])

        result = SelectionWorkflow(customers, products, console, quiet_logger).run(max_selections=2)

        assert len(result.selections) == 2
        assert console.tokens == ["1", "A"]

    def test_metrics_recorded(self, rosters, scripted_console, quiet_logger):
        customers, products = rosters
        console = scripted_console(["x", "1", "Z", "1", "A"])

        SelectionWorkflow(customers, products, console, quiet_logger).run()

        metrics = quiet_logger.get_metrics()
        assert metrics["selections_confirmed"] == 1
        assert metrics["input_format_errors"] == 1
        assert metrics["lookup_misses"] == 1


class TestTerminalConsole:
    """Test token reading from a stream."""

    def test_reads_tokens_across_lines(self):
        console = TerminalConsole(stdin=io.StringIO("1 A\n\n  2\n"), stdout=io.StringIO())

        assert console.read_token("id") == "1"
        assert console.read_token("upc") == "A"
        assert console.read_token("id") == "2"
        with pytest.raises(EOFError):
            console.read_token("upc")

    def test_write_and_prompt(self):
        out = io.StringIO()
        console = TerminalConsole(stdin=io.StringIO("1\n"), stdout=out)

        console.write("hello")
        console.read_token("Enter your customer ID:")

        assert out.getvalue() == "hello\nEnter your customer ID:\n"

    def test_drives_workflow(self, rosters, quiet_logger):
        customers, products = rosters
        out = io.StringIO()
        console = TerminalConsole(stdin=io.StringIO("1\nA\n"), stdout=out)

        result = SelectionWorkflow(customers, products, console, quiet_logger).run()

        assert len(result.selections) == 1
        assert "Selected customer 1" in out.getvalue()
