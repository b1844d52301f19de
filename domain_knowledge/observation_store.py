"""
Observation Store - Durable success/failure tallies per domain candidate

One record per (domain, discriminator, candidate):
- discriminator is a trackable product field for selector learning
- or the "category" slot for category learning

Counters only grow. Increment-or-create is a single atomic step:
an ``INSERT ... ON CONFLICT DO UPDATE`` under a UNIQUE constraint for
SQLite, or a per-key lock for the in-memory store.
"""

import sqlite3
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
import logging

from .config import config
from .confidence import wilson_lower_bound
from .exceptions import ObservationStoreError
from .normalizer import normalize_domain
from .vocabulary import DiscoveryMethod, Outcome, is_valid_observation

logger = logging.getLogger(__name__)

Key = Tuple[str, str, str]


@dataclass
class Observation:
    """Tallies for one candidate on one domain."""

    domain: str
    discriminator: str
    candidate: str
    success_count: int = 0
    failure_count: int = 0
    discovery_method: str = DiscoveryMethod.HEURISTIC.value
    discovery_score: Optional[int] = None
    last_seen_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def key(self) -> Key:
        return (self.domain, self.discriminator, self.candidate)

    @property
    def total_samples(self) -> int:
        return self.success_count + self.failure_count

    @property
    def confidence(self) -> float:
        return wilson_lower_bound(self.success_count, self.failure_count)

    @property
    def is_discovered(self) -> bool:
        return self.discovery_method == DiscoveryMethod.DISCOVERED.value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "domain": self.domain,
            "discriminator": self.discriminator,
            "candidate": self.candidate,
            "success_count": self.success_count,
            "failure_count": self.failure_count,
            "total_samples": self.total_samples,
            "confidence": round(self.confidence, 4),
            "discovery_method": self.discovery_method,
            "discovery_score": self.discovery_score,
            "last_seen_at": self.last_seen_at.isoformat() if self.last_seen_at else None,
        }


class ObservationStore(ABC):
    """
    Base store: validation and normalization in front of an atomic upsert.

    Invalid observations (blank domain, unknown field, unknown category)
    are dropped silently and ``None`` is returned.
    """

    def record(
        self,
        domain: str,
        discriminator: str,
        candidate: str,
        outcome: Outcome,
        discovery_method: DiscoveryMethod = DiscoveryMethod.HEURISTIC,
        discovery_score: Optional[int] = None,
    ) -> Optional[Observation]:
        """
        Record one outcome for a candidate.

        Discovery metadata is applied when the record is created. A later
        success reported as ``discovered`` promotes a heuristic record.

        Returns:
            The updated observation, or None if the input was ignored
        """
        outcome = Outcome(outcome)
        method = DiscoveryMethod(discovery_method)
        success = outcome is Outcome.SUCCESS

        key = self._validated_key(domain, discriminator, candidate)
        if key is None:
            return None

        return self._upsert(
            key,
            success=success,
            discovery_method=method,
            discovery_score=discovery_score,
            promote=success and method is DiscoveryMethod.DISCOVERED,
        )

    def record_discovered(
        self,
        domain: str,
        discriminator: str,
        candidate: str,
        score: Optional[int],
    ) -> Optional[Observation]:
        """Record a success for a selector found by DOM discovery."""
        key = self._validated_key(domain, discriminator, candidate)
        if key is None:
            return None

        return self._upsert(
            key,
            success=True,
            discovery_method=DiscoveryMethod.DISCOVERED,
            discovery_score=score,
            promote=True,
            overwrite_score=True,
        )

    @abstractmethod
    def query(self, domain: str, discriminator: Optional[str] = None) -> List[Observation]:
        """All observations for a domain, optionally for one discriminator."""

    @abstractmethod
    def domains(self, discriminator: Optional[str] = None) -> List[str]:
        """Distinct domain keys that have observations."""

    @abstractmethod
    def _upsert(
        self,
        key: Key,
        success: bool,
        discovery_method: DiscoveryMethod,
        discovery_score: Optional[int],
        promote: bool,
        overwrite_score: bool = False,
    ) -> Observation:
        """Create or increment the record for ``key`` in one atomic step.

        ``overwrite_score`` replaces the stored discovery score even with None.
        Otherwise a promotion only replaces it when a score is given."""

    def _validated_key(self, domain: str, discriminator: str, candidate: str) -> Optional[Key]:
        normalized = normalize_domain(domain)
        candidate = str(candidate or "").strip()
        if not normalized or not is_valid_observation(discriminator, candidate):
            logger.debug(f"Ignoring observation {domain!r} / {discriminator!r} / {candidate!r}")
            return None
        return (normalized, discriminator, candidate)


class SQLiteObservationStore(ObservationStore):
    """
    SQLite-backed store.

    Each call opens its own connection, so one instance can be shared
    between request threads.
    """

    def __init__(self, db_path: Optional[str] = None, timeout: Optional[float] = None):
        self.db_path = Path(db_path or config.db_path)
        self.timeout = config.db_timeout if timeout is None else timeout
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self):
        """Initialize SQLite database."""
        try:
            with self._connect() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS observations (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        domain TEXT NOT NULL,
                        discriminator TEXT NOT NULL,
                        candidate TEXT NOT NULL,
                        success_count INTEGER NOT NULL DEFAULT 0,
                        failure_count INTEGER NOT NULL DEFAULT 0,
                        discovery_method TEXT NOT NULL DEFAULT 'heuristic',
                        discovery_score INTEGER,
                        last_seen_at TEXT,
                        created_at TEXT,
                        UNIQUE(domain, discriminator, candidate)
                    )
                """)

                conn.execute("""
                    CREATE INDEX IF NOT EXISTS idx_observations_domain
                    ON observations(domain, discriminator)
                """)
        except sqlite3.Error as e:
            raise ObservationStoreError(f"Cannot initialize {self.db_path}: {e}") from e

    def _upsert(self, key, success, discovery_method, discovery_score, promote, overwrite_score=False):
        domain, discriminator, candidate = key
        now = datetime.now().isoformat()

        try:
            with self._connect() as conn:
                conn.execute("""
                    INSERT INTO observations
                    (domain, discriminator, candidate, success_count, failure_count,
                     discovery_method, discovery_score, last_seen_at, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT(domain, discriminator, candidate) DO UPDATE SET
                        success_count = success_count + excluded.success_count,
                        failure_count = failure_count + excluded.failure_count,
                        discovery_method = CASE WHEN ? THEN 'discovered'
                                                ELSE discovery_method END,
                        discovery_score = CASE WHEN ? THEN excluded.discovery_score
                                               WHEN ? AND excluded.discovery_score IS NOT NULL
                                               THEN excluded.discovery_score
                                               ELSE discovery_score END,
                        last_seen_at = excluded.last_seen_at
                """, (
                    domain,
                    discriminator,
                    candidate,
                    1 if success else 0,
                    0 if success else 1,
                    discovery_method.value,
                    discovery_score,
                    now,
                    now,
                    # UPDATE values
                    1 if promote else 0,
                    1 if overwrite_score else 0,
                    1 if promote else 0,
                ))

                row = conn.execute("""
                    SELECT * FROM observations
                    WHERE domain = ? AND discriminator = ? AND candidate = ?
                """, key).fetchone()
        except sqlite3.Error as e:
            raise ObservationStoreError(f"Failed to record {domain} / {discriminator}: {e}") from e

        return self._from_row(row)

    def query(self, domain: str, discriminator: Optional[str] = None) -> List[Observation]:
        query = "SELECT * FROM observations WHERE domain = ?"
        params: List[Any] = [normalize_domain(domain)]

        if discriminator:
            query += " AND discriminator = ?"
            params.append(discriminator)

        query += " ORDER BY discriminator, success_count DESC, candidate"

        try:
            with self._connect() as conn:
                rows = conn.execute(query, params).fetchall()
        except sqlite3.Error as e:
            raise ObservationStoreError(f"Failed to query {domain}: {e}") from e

        return [self._from_row(row) for row in rows]

    def domains(self, discriminator: Optional[str] = None) -> List[str]:
        query = "SELECT DISTINCT domain FROM observations"
        params: List[Any] = []

        if discriminator:
            query += " WHERE discriminator = ?"
            params.append(discriminator)

        query += " ORDER BY domain"

        try:
            with self._connect() as conn:
                rows = conn.execute(query, params).fetchall()
        except sqlite3.Error as e:
            raise ObservationStoreError(f"Failed to list domains: {e}") from e

        return [row[0] for row in rows]

    @staticmethod
    def _from_row(row: sqlite3.Row) -> Observation:
        return Observation(
            domain=row["domain"],
            discriminator=row["discriminator"],
            candidate=row["candidate"],
            success_count=row["success_count"],
            failure_count=row["failure_count"],
            discovery_method=row["discovery_method"],
            discovery_score=row["discovery_score"],
            last_seen_at=_parse_timestamp(row["last_seen_at"]),
            created_at=_parse_timestamp(row["created_at"]),
        )


class MemoryObservationStore(ObservationStore):
    """
    In-process store guarded by one lock per (domain, discriminator, candidate).

    Reads return copies, so callers never see a record mid-update.
    """

    def __init__(self):
        self._records: Dict[Key, Observation] = {}
        self._locks: Dict[Key, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, key: Key) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def _upsert(self, key, success, discovery_method, discovery_score, promote, overwrite_score=False):
        now = datetime.now()

        with self._lock_for(key):
            record = self._records.get(key)
            if record is None:
                record = Observation(
                    domain=key[0],
                    discriminator=key[1],
                    candidate=key[2],
                    discovery_method=discovery_method.value,
                    discovery_score=discovery_score,
                    created_at=now,
                )
                with self._locks_guard:
                    self._records[key] = record
            elif promote:
                record.discovery_method = DiscoveryMethod.DISCOVERED.value
                if overwrite_score or discovery_score is not None:
                    record.discovery_score = discovery_score

            if success:
                record.success_count += 1
            else:
                record.failure_count += 1
            record.last_seen_at = now

            return replace(record)

    def _snapshot(self) -> List[Observation]:
        with self._locks_guard:
            records = list(self._records.values())
        out = []
        for record in records:
            with self._lock_for(record.key):
                out.append(replace(record))
        return out

    def query(self, domain: str, discriminator: Optional[str] = None) -> List[Observation]:
        normalized = normalize_domain(domain)
        records = [
            r for r in self._snapshot()
            if r.domain == normalized and (not discriminator or r.discriminator == discriminator)
        ]
        records.sort(key=lambda r: (r.discriminator, -r.success_count, r.candidate))
        return records

    def domains(self, discriminator: Optional[str] = None) -> List[str]:
        return sorted({
            r.domain for r in self._snapshot()
            if not discriminator or r.discriminator == discriminator
        })


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        logger.warning(f"Unparseable timestamp in store: {value!r}")
        return None
