"""
Database schema and connection management.

Uses SQLite with SQLAlchemy for product and customer storage.
"""

from pathlib import Path
from sqlalchemy import create_engine, Column, Integer, Numeric, String
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


class Product(Base):
    """Product for sale, keyed by its UPC."""

    __tablename__ = "products"
    __natural_key__ = "upc"
    __identity__ = "upc"

    upc = Column(String, primary_key=True)
    description = Column(String, nullable=False)
    manufacturer = Column(String, nullable=False)
    style = Column(String, nullable=False)  # category code
    unit_price = Column(Numeric(10, 2), nullable=False)
    units_in_stock = Column(Integer, nullable=False, default=0)

    @property
    def identity(self):
        return self.upc

    def __str__(self):
        return (
            f"Product {{UPC={self.upc}, description={self.description}, "
            f"manufacturer={self.manufacturer}, style={self.style}, "
            f"unit_price={self.unit_price}, units_in_stock={self.units_in_stock}}}"
        )

    def __repr__(self):
        return f"<Product upc={self.upc!r}>"


class Customer(Base):
    """Customer model. The id is generated by the database on insert."""

    __tablename__ = "customers"
    __natural_key__ = None
    __identity__ = "customer_id"

    customer_id = Column(Integer, primary_key=True, autoincrement=True)
    last_name = Column(String, nullable=False)
    first_name = Column(String, nullable=False)
    street = Column(String, nullable=False)
    zip_code = Column(String, nullable=False)
    phone = Column(String, nullable=False)

    @property
    def identity(self):
        return self.customer_id

    def __str__(self):
        return (
            f"Customer {{customer_id={self.customer_id}, last_name={self.last_name}, "
            f"first_name={self.first_name}, street={self.street}, "
            f"zip={self.zip_code}, phone={self.phone}}}"
        )

    def __repr__(self):
        return f"<Customer customer_id={self.customer_id!r}>"


def init_database(db_path: Path, reset: bool = False) -> None:
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file
        reset: Drop existing tables first so the run starts from an empty schema
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{db_path}")
    if reset:
        Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    engine.dispose()


def get_session(db_path: Path):
    """
    Get database session.

    Objects stay readable after commit, so identities assigned on insert
    can be read once the session has moved on.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy session
    """
    engine = create_engine(f"sqlite:///{db_path}")
    Session = sessionmaker(bind=engine, expire_on_commit=False)
    return Session()
