"""
Entity store.

Persists batches of products or customers in one transaction and looks
records up again by natural key or identity.
"""

from typing import Any, List, Optional, Sequence, Type

from sqlalchemy.exc import SQLAlchemyError

from .errors import InvalidRecordError, PersistenceFailure
from .logger import StructuredLogger
from .schema import validate_batch


class EntityStore:
    """Batch create and lookup over a SQLAlchemy session."""

    def __init__(self, session, logger: StructuredLogger):
        self.session = session
        self.logger = logger

    def create_all(self, records: Sequence[Any]) -> List[Any]:
        """
        Persist a batch of records of one kind, all or nothing.

        Surrogate ids are assigned during the flush, so they are set on the
        returned records as soon as this returns.

        Args:
            records: Non-empty sequence of Product or Customer instances

        Returns:
            The same records, in input order, with identity populated

        Raises:
            InvalidRecordError: Batch failed validation; nothing was written
            PersistenceFailure: The datastore rejected the batch; rolled back
        """
        records = list(records)
        errors = validate_batch(records)
        if errors:
            self.logger.error("Rejected invalid batch", errors=errors)
            self.logger.record_batch_failure()
            raise InvalidRecordError(f"Invalid batch: {'; '.join(errors)}", errors)

        kind = type(records[0]).__name__
        id_attr = type(records[0]).__identity__
        surrogate = type(records[0]).__natural_key__ is None
        try:
            for record in records:
                # A zero surrogate means "not created yet"; let the database assign it.
                if surrogate and getattr(record, id_attr) == 0:
                    setattr(record, id_attr, None)
                self.logger.info(f"Persisting: {record}")
                self.session.add(record)
            self.session.flush()
            missing = [r for r in records if r.identity in (None, 0, "")]
            if not missing:
                self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            self.logger.record_batch_failure()
            self.logger.error(
                f"Failed to persist {kind} batch: {e}",
                kind=kind,
                size=len(records),
            )
            raise PersistenceFailure(f"Could not persist {len(records)} {kind} record(s): {e}") from e

        if missing:
            self.session.rollback()
            self.logger.record_batch_failure()
            raise PersistenceFailure(f"{kind} was flushed without an identity: {missing[0]!r}")

        for record in records:
            self.logger.info(f"Persisted object after flush (non-null id): {record}")

        self.logger.record_persisted(kind, len(records))
        return records

    def find_by_natural_key(self, kind: Type[Any], key: str) -> Optional[Any]:
        """
        Look up one record by its natural key, exact and case-sensitive.

        Returns None when nothing matches.
        """
        key_attr = getattr(kind, "__natural_key__", None)
        if not key_attr:
            raise TypeError(f"{kind.__name__} has no natural key")
        column = getattr(kind, key_attr)
        return self.session.query(kind).filter(column == key).first()

    def get(self, kind: Type[Any], identity: Any) -> Optional[Any]:
        """Fetch a record by identity (surrogate id or natural key)."""
        return self.session.get(kind, identity)

    def count(self, kind: Type[Any]) -> int:
        return self.session.query(kind).count()
