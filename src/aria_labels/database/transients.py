"""
Keyed stores for values that expire.

Both stores hold JSON-compatible values. A ttl of 0 means the value never
expires. Expired values read as missing and are purged on read.
"""

import json
import time
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .models import Transient, get_session, utcnow
from ..utils.logger import get_logger

logger = get_logger(__name__)


class TransientStore(ABC):
    """Interface of a keyed store with per-entry expiry."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the stored value, or None if missing or expired."""

    @abstractmethod
    def set(self, key: str, value: Any, ttl: int = 0) -> bool:
        """Store a value for ``ttl`` seconds. Returns True if stored."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove a value. Returns True if something was removed."""


class MemoryTransientStore(TransientStore):
    """Process-local store, for one-shot runs and tests."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._values: Dict[str, Tuple[str, Optional[float]]] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._values.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and expires_at <= self._clock():
            del self._values[key]
            return None
        return json.loads(value)

    def set(self, key: str, value: Any, ttl: int = 0) -> bool:
        expires_at = self._clock() + ttl if ttl > 0 else None
        # Stored serialized so callers never share mutable state with the cache
        self._values[key] = (json.dumps(value), expires_at)
        return True

    def delete(self, key: str) -> bool:
        return self._values.pop(key, None) is not None


class DatabaseTransientStore(TransientStore):
    """Store backed by the ``transients`` table."""

    def __init__(
        self,
        session: Optional[Session] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        """
        Initialize with a database session.

        Args:
            session: Optional SQLAlchemy session. Creates new if not provided.
            clock: Source of the current (naive UTC) time
        """
        self._session = session
        self._owns_session = session is None
        self._clock = clock

    @property
    def session(self) -> Session:
        """Get the database session."""
        if self._session is None:
            self._session = get_session()
        return self._session

    def close(self) -> None:
        """Close the session if we own it."""
        if self._owns_session and self._session is not None:
            self._session.close()
            self._session = None

    def _find(self, key: str) -> Optional[Transient]:
        return self.session.query(Transient).filter(Transient.key == key).first()

    def get(self, key: str) -> Optional[Any]:
        try:
            row = self._find(key)
            if row is None:
                return None

            if row.expires_at is not None and row.expires_at <= self._clock():
                logger.debug(f"Transient expired: {key}")
                self.session.delete(row)
                self.session.commit()
                return None

            return json.loads(row.value)
        except ValueError as e:
            logger.warning(f"Discarding unreadable transient {key}: {e}")
            self.delete(key)
            return None
        except SQLAlchemyError as e:
            logger.error(f"Failed to read transient {key}: {e}")
            self.session.rollback()
            return None

    def set(self, key: str, value: Any, ttl: int = 0) -> bool:
        expires_at = self._clock() + timedelta(seconds=ttl) if ttl > 0 else None
        try:
            payload = json.dumps(value)
            row = self._find(key)
            if row is None:
                row = Transient(key=key, value=payload, expires_at=expires_at)
                self.session.add(row)
            else:
                row.value = payload
                row.expires_at = expires_at
            self.session.commit()
            logger.debug(f"Stored transient {key} (ttl {ttl}s)")
            return True
        except (TypeError, ValueError) as e:
            logger.error(f"Transient {key} is not JSON serializable: {e}")
            return False
        except SQLAlchemyError as e:
            logger.error(f"Failed to store transient {key}: {e}")
            self.session.rollback()
            return False

    def delete(self, key: str) -> bool:
        try:
            row = self._find(key)
            if row is None:
                return False
            self.session.delete(row)
            self.session.commit()
            return True
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete transient {key}: {e}")
            self.session.rollback()
            return False
