"""Demo records loaded into the store at startup."""

from decimal import Decimal
from typing import List

from .database import Customer, Product


def seed_products() -> List[Product]:
    return [
        Product(upc="076174517163", description="16 oz. hickory hammer",
                manufacturer="Stanely Tools", style="1",
                unit_price=Decimal("9.97"), units_in_stock=50),
        Product(upc="076167817162", description="20 volt drill driver",
                manufacturer="Atomic Tools", style="5",
                unit_price=Decimal("69.99"), units_in_stock=10),
        Product(upc="076111117166", description="10 in adjustable wrench",
                manufacturer="Husky Tools", style="2",
                unit_price=Decimal("19.97"), units_in_stock=100),
    ]


def seed_customers() -> List[Customer]:
    return [
        Customer(last_name="Smith", first_name="John", street="Flower road 1112",
                 zip_code="90809", phone="9091254327"),
        Customer(last_name="Dol", first_name="Bob", street="Lewis lane 333",
                 zip_code="90812", phone="9041153367"),
        Customer(last_name="Frank", first_name="Franky", street="Olive street E 281",
                 zip_code="91842", phone="5123448695"),
    ]
