"""SQLite-backed KVStore implementation.

This adapter implements the KVStore protocol on a single SQLite file.
All namespaces share one table:

    kv(ns TEXT, k BLOB, v BLOB, PRIMARY KEY (ns, k)) WITHOUT ROWID

BLOB comparison in SQLite is memcmp, so ``ORDER BY k`` within a namespace
is lexicographic byte order, and a prefix scan is the half-open range
``[prefix, prefix_upper_bound(prefix))``.

Transactions:
    - Read: ``BEGIN`` (deferred). The file is always in WAL mode, so the
      first SELECT pins a snapshot that later commits do not disturb and
      an open reader never blocks a writer from committing.
    - Write: ``BEGIN IMMEDIATE`` takes the database write lock up front,
      so the read-check-write sequence inside one transaction cannot
      interleave with another writer, in this process or any other.

Thread Safety:
    Each transaction borrows a connection from a small pool and returns it
    when the block exits, so short-lived threads do not leave connections
    behind. Writers in this process also queue on a lock before asking
    SQLite, so the busy timeout is only spent waiting on other processes.

References:
    - https://www.sqlite.org/lang_transaction.html
    - https://www.sqlite.org/isolation.html
"""

from __future__ import annotations

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from circular_store.infrastructure.logging import get_logger
from circular_store.ports.outbound.kv_store import (
    ReadOnlyTransactionError,
    StorageError,
    TransactionConflictError,
)


logger = get_logger(__name__)


SCHEMA = """
CREATE TABLE IF NOT EXISTS kv (
    ns TEXT NOT NULL,
    k  BLOB NOT NULL,
    v  BLOB NOT NULL,
    PRIMARY KEY (ns, k)
) WITHOUT ROWID
"""


def prefix_upper_bound(prefix: bytes) -> bytes | None:
    """Return the smallest key greater than every key starting with prefix.

    Returns None when no such key exists (empty or all-0xFF prefix).

    Example:
        >>> prefix_upper_bound(b"ab")
        b'ac'
        >>> prefix_upper_bound(b"a\\xff") == b"b"
        True
    """
    p = bytearray(prefix)
    for i in range(len(p) - 1, -1, -1):
        if p[i] != 0xFF:
            p[i] += 1
            del p[i + 1:]
            return bytes(p)
    return None


def _translate(exc: sqlite3.Error, action: str) -> StorageError:
    """Map a sqlite3 error onto the storage error taxonomy."""
    message = f"{action} failed: {exc}"
    if isinstance(exc, sqlite3.OperationalError):
        text = str(exc).lower()
        if "locked" in text or "busy" in text:
            return TransactionConflictError(message)
    return StorageError(message)


class SQLiteTransaction:
    """Transaction over one namespace of a SQLite connection."""

    def __init__(self, conn: sqlite3.Connection, namespace: str, writable: bool) -> None:
        self._conn = conn
        self._namespace = namespace
        self._writable = writable
        self._closed = False

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def writable(self) -> bool:
        return self._writable

    def get(self, key: bytes) -> bytes | None:
        row = self._fetchone(
            "SELECT v FROM kv WHERE ns = ? AND k = ?",
            (self._namespace, bytes(key)),
        )
        return bytes(row[0]) if row is not None else None

    def put(self, key: bytes, value: bytes) -> None:
        self._check_writable("put")
        self._execute(
            "INSERT INTO kv (ns, k, v) VALUES (?, ?, ?) "
            "ON CONFLICT (ns, k) DO UPDATE SET v = excluded.v",
            (self._namespace, bytes(key), bytes(value)),
        )

    def delete(self, key: bytes) -> None:
        self._check_writable("delete")
        self._execute(
            "DELETE FROM kv WHERE ns = ? AND k = ?",
            (self._namespace, bytes(key)),
        )

    def scan(self, prefix: bytes = b"") -> Iterator[tuple[bytes, bytes]]:
        for key, value in self._range("k, v", prefix):
            yield bytes(key), bytes(value)

    def scan_keys(self, prefix: bytes = b"") -> Iterator[bytes]:
        for (key,) in self._range("k", prefix):
            yield bytes(key)

    def clear(self) -> None:
        self._check_writable("clear")
        self._execute("DELETE FROM kv WHERE ns = ?", (self._namespace,))

    def close(self) -> None:
        self._closed = True

    def _range(self, columns: str, prefix: bytes) -> list[tuple]:
        prefix = bytes(prefix)
        upper = prefix_upper_bound(prefix)
        if upper is None:
            sql = f"SELECT {columns} FROM kv WHERE ns = ? AND k >= ? ORDER BY k"
            params: tuple = (self._namespace, prefix)
        else:
            sql = f"SELECT {columns} FROM kv WHERE ns = ? AND k >= ? AND k < ? ORDER BY k"
            params = (self._namespace, prefix, upper)
        rows = self._fetchall(sql, params)
        if upper is None and prefix:
            # All-0xFF prefix: the range has no upper bound, filter instead.
            rows = [row for row in rows if bytes(row[0]).startswith(prefix)]
        return rows

    def _execute(self, sql: str, params: tuple) -> None:
        self._check_open()
        try:
            self._conn.execute(sql, params)
        except sqlite3.Error as e:
            raise _translate(e, "write") from e

    def _fetchone(self, sql: str, params: tuple) -> tuple | None:
        self._check_open()
        try:
            return self._conn.execute(sql, params).fetchone()
        except sqlite3.Error as e:
            raise _translate(e, "read") from e

    def _fetchall(self, sql: str, params: tuple) -> list[tuple]:
        self._check_open()
        try:
            return self._conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise _translate(e, "scan") from e

    def _check_open(self) -> None:
        if self._closed:
            raise StorageError(f"transaction on {self._namespace!r} is closed")

    def _check_writable(self, operation: str) -> None:
        self._check_open()
        if not self._writable:
            raise ReadOnlyTransactionError(self._namespace, operation)


class SQLiteStore:
    """SQLite file implementation of the KVStore protocol.

    Attributes:
        path: Path to the database file.

    Example:
        with SQLiteStore("/var/lib/app/lists.db") as store:
            with store.write("jobs") as tx:
                tx.put(b"a", b"1")
    """

    def __init__(
        self,
        path: str | Path,
        busy_timeout_seconds: float = 5.0,
        synchronous: str = "FULL",
        max_idle_connections: int = 4,
    ) -> None:
        """Open (or create) the database file.

        Args:
            path: Path to the database file. In-memory databases are not
                supported since concurrent transactions use separate
                connections.
            busy_timeout_seconds: How long to wait on another process's lock.
            synchronous: SQLite synchronous pragma.
            max_idle_connections: Connections kept open between transactions.

        Raises:
            ValueError: If path names an in-memory database.
            StorageError: If the file cannot be opened or cannot use WAL.
        """
        if str(path) == ":memory:" or str(path).startswith("file::memory:"):
            raise ValueError("SQLiteStore needs a file path; use MemoryStore for in-memory lists")
        if max_idle_connections < 1:
            raise ValueError("max_idle_connections must be at least 1")

        self._path = Path(path)
        self._busy_timeout = busy_timeout_seconds
        self._synchronous = synchronous
        self._max_idle = max_idle_connections
        self._write_lock = threading.Lock()
        self._pool_lock = threading.Lock()
        self._idle: list[sqlite3.Connection] = []
        self._open: set[sqlite3.Connection] = set()
        self._holders: set[int] = set()
        self._closed = False

        self._path.parent.mkdir(parents=True, exist_ok=True)
        # Open eagerly so configuration errors surface here.
        self._idle.append(self._connect())
        logger.info("sqlite_store_opened", path=str(self._path))

    @property
    def path(self) -> Path:
        return self._path

    @property
    def open_connections(self) -> int:
        """Number of connections currently open, idle or in use."""
        with self._pool_lock:
            return len(self._open)

    @contextmanager
    def read(self, namespace: str) -> Iterator[SQLiteTransaction]:
        """Open a read-only transaction on namespace."""
        with self._checkout() as conn:
            self._begin(conn, "BEGIN")
            tx = SQLiteTransaction(conn, namespace, writable=False)
            try:
                yield tx
            finally:
                tx.close()
                self._finish(conn, "ROLLBACK")

    @contextmanager
    def write(self, namespace: str) -> Iterator[SQLiteTransaction]:
        """Open a read-write transaction; commit on clean exit."""
        # Checked out before queuing on the lock, which is not re-entrant.
        with self._checkout() as conn, self._write_lock:
            self._begin(conn, "BEGIN IMMEDIATE")
            tx = SQLiteTransaction(conn, namespace, writable=True)
            try:
                yield tx
            except BaseException:
                tx.close()
                self._finish(conn, "ROLLBACK")
                raise
            tx.close()
            self._commit(conn)

    def namespaces(self) -> list[str]:
        with self._checkout() as conn:
            try:
                rows = conn.execute("SELECT DISTINCT ns FROM kv ORDER BY ns").fetchall()
            except sqlite3.Error as e:
                raise _translate(e, "list namespaces") from e
        return [row[0] for row in rows]

    def drop_namespace(self, namespace: str) -> bool:
        with self.write(namespace) as tx:
            existed = next(tx.scan_keys(), None) is not None
            tx.clear()
        return existed

    def close(self) -> None:
        """Close idle connections; busy ones close when their transaction ends."""
        with self._pool_lock:
            if self._closed:
                return
            self._closed = True
            idle, self._idle = self._idle, []
            self._open.difference_update(idle)
        for conn in idle:
            conn.close()
        logger.info("sqlite_store_closed", path=str(self._path))

    def __enter__(self) -> SQLiteStore:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    @contextmanager
    def _checkout(self) -> Iterator[sqlite3.Connection]:
        """Lend a pooled connection to the calling thread for one transaction."""
        ident = threading.get_ident()
        with self._pool_lock:
            if self._closed:
                raise StorageError("store is closed")
            if ident in self._holders:
                raise StorageError("nested transactions are not supported")
            self._holders.add(ident)
            conn = self._idle.pop() if self._idle else None

        try:
            if conn is None:
                conn = self._connect()
            yield conn
        finally:
            self._checkin(conn, ident)

    def _checkin(self, conn: sqlite3.Connection | None, ident: int) -> None:
        with self._pool_lock:
            self._holders.discard(ident)
            if conn is None:
                return
            reusable = (
                not self._closed
                and not conn.in_transaction
                and len(self._idle) < self._max_idle
            )
            if reusable:
                self._idle.append(conn)
                return
            self._open.discard(conn)
        conn.close()

    def _connect(self) -> sqlite3.Connection:
        """Open a new connection in WAL mode and ensure the schema exists."""
        try:
            conn = sqlite3.connect(
                str(self._path),
                timeout=self._busy_timeout,
                isolation_level=None,  # explicit BEGIN/COMMIT only
                check_same_thread=False,  # pooled across threads
            )
        except sqlite3.Error as e:
            raise _translate(e, f"open {self._path}") from e

        try:
            (mode,) = conn.execute("PRAGMA journal_mode=WAL").fetchone()
            if str(mode).lower() != "wal":
                raise StorageError(
                    f"{self._path} cannot use WAL journaling (got {mode}); "
                    "readers would block writers"
                )
            conn.execute(f"PRAGMA synchronous={self._synchronous}")
            conn.execute(SCHEMA)
        except sqlite3.Error as e:
            conn.close()
            raise _translate(e, f"open {self._path}") from e
        except StorageError:
            conn.close()
            raise

        with self._pool_lock:
            self._open.add(conn)
        return conn

    @staticmethod
    def _begin(conn: sqlite3.Connection, statement: str) -> None:
        try:
            conn.execute(statement)
        except sqlite3.Error as e:
            raise _translate(e, statement) from e

    def _commit(self, conn: sqlite3.Connection) -> None:
        try:
            conn.execute("COMMIT")
        except sqlite3.Error as e:
            self._finish(conn, "ROLLBACK")
            raise _translate(e, "COMMIT") from e

    def _finish(self, conn: sqlite3.Connection, statement: str) -> None:
        if not conn.in_transaction:
            return
        try:
            conn.execute(statement)
        except sqlite3.Error as e:
            raise _translate(e, statement) from e
