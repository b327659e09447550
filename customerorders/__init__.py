"""Customer Orders: seed a datastore, then pick a customer and a product."""

__version__ = "0.1.0"
