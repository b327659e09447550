from decimal import Decimal, InvalidOperation
from typing import Any, List, Sequence

from .database import Customer, Product

PRODUCT_STR_FIELDS = ["upc", "description", "manufacturer", "style"]
CUSTOMER_STR_FIELDS = ["last_name", "first_name", "street", "zip_code", "phone"]


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _validate_product(product: Product) -> List[str]:
    errors: List[str] = []
    for f in PRODUCT_STR_FIELDS:
        if not _is_non_empty_str(getattr(product, f)):
            errors.append(f"Product field '{f}' must be a non-empty string")

    price = product.unit_price
    try:
        if price is None or Decimal(str(price)) < 0:
            errors.append("Product field 'unit_price' must be a non-negative number")
    except InvalidOperation:
        errors.append("Product field 'unit_price' must be a non-negative number")

    stock = product.units_in_stock
    if stock is not None and (not isinstance(stock, int) or isinstance(stock, bool) or stock < 0):
        errors.append("Product field 'units_in_stock' must be a non-negative integer")
    return errors


def _validate_customer(customer: Customer) -> List[str]:
    errors: List[str] = []
    for f in CUSTOMER_STR_FIELDS:
        if not _is_non_empty_str(getattr(customer, f)):
            errors.append(f"Customer field '{f}' must be a non-empty string")
    # Ids come from the database, never from the caller.
    if customer.customer_id not in (None, 0):
        errors.append("Customer field 'customer_id' is assigned on creation and must be empty")
    return errors


def validate_record(record: Any) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    """
    if isinstance(record, Product):
        return _validate_product(record)
    if isinstance(record, Customer):
        return _validate_customer(record)
    return [f"Unsupported record type: {type(record).__name__}"]


def validate_batch(records: Sequence[Any]) -> List[str]:
    """
    Validate a whole batch: non-empty, one kind, every record valid,
    no natural key used twice.
    """
    if not records:
        return ["Batch must contain at least one record"]

    kinds = {type(r) for r in records}
    if len(kinds) > 1:
        names = ", ".join(sorted(k.__name__ for k in kinds))
        return [f"Batch must hold a single record kind, got: {names}"]

    errors: List[str] = []
    for position, record in enumerate(records):
        for e in validate_record(record):
            errors.append(f"[{position}] {e}")

    key_attr = getattr(type(records[0]), "__natural_key__", None)
    if key_attr:
        seen = set()
        for position, record in enumerate(records):
            key = getattr(record, key_attr)
            if key in seen:
                errors.append(f"[{position}] Duplicate {key_attr} in batch: {key!r}")
            seen.add(key)
    return errors
