"""
PostgreSQL repository adapters - Implement the credential and code store protocols.

This module provides the PostgreSQL implementations of the domain's
store ports using psycopg3 with raw SQL.

Storage Guarantees:
-------------------
1. **Email uniqueness**: users.email carries a UNIQUE constraint. Inserts use
   ON CONFLICT DO NOTHING so a concurrent duplicate signup reports False
   instead of creating a second row.

2. **Code expiry**: verification_codes.expires_at is stamped from database
   time at insert and compared against NOW() on every read, so an expired
   code is indistinguishable from a missing one even before purge_expired
   removes it.

3. **Monotonic verification**: set_verified only ever writes TRUE.
"""

import logging
from datetime import timedelta
from pathlib import Path

from psycopg_pool import ConnectionPool

from cinepass.domain.ports import UserRecord, VerificationCodeRecord

logger = logging.getLogger(__name__)


class PostgresCredentialStore:
    """
    Implements CredentialStore protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize store with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def find_by_email(self, email: str) -> UserRecord | None:
        sql = """
            SELECT username, email, password_hash, verified
            FROM users
            WHERE email = %s
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (email,))
            row = cursor.fetchone()

        if row is None:
            return None
        return UserRecord(username=row[0], email=row[1], password_hash=row[2], verified=row[3])

    def insert(self, user: UserRecord) -> bool:
        """
        Insert a credential record.

        The UNIQUE constraint on email makes this atomic with respect to
        concurrent signups for the same address.

        Returns:
            True if inserted, False if the email already exists
        """
        sql = """
            INSERT INTO users (username, email, password_hash, verified, created_at)
            VALUES (%s, %s, %s, %s, NOW())
            ON CONFLICT (email) DO NOTHING
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (user.username, user.email, user.password_hash, user.verified))
            conn.commit()
            return cursor.rowcount == 1

    def set_verified(self, email: str) -> bool:
        sql = """
            UPDATE users
            SET verified = TRUE, verified_at = COALESCE(verified_at, NOW())
            WHERE email = %s
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (email,))
            conn.commit()
            return cursor.rowcount == 1


class PostgresVerificationCodeStore:
    """
    Implements VerificationCodeStore protocol via psycopg3.

    Expiry is evaluated against database time (NOW()).
    """

    def __init__(self, pool: ConnectionPool, ttl_seconds: int = 600) -> None:
        """
        Initialize store with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
            ttl_seconds: Lifetime of each code from its insertion
        """
        self._pool = pool
        self._ttl_seconds = ttl_seconds

    def insert(self, email: str, code: str) -> VerificationCodeRecord:
        sql = """
            INSERT INTO verification_codes (email, code, created_at, expires_at)
            VALUES (%s, %s, NOW(), NOW() + %s)
            RETURNING email, code, created_at, expires_at
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (email, code, timedelta(seconds=self._ttl_seconds)))
            row = cursor.fetchone()
            conn.commit()

        return VerificationCodeRecord(email=row[0], code=row[1], created_at=row[2], expires_at=row[3])

    def find_by_email_and_code(self, email: str, code: str) -> VerificationCodeRecord | None:
        sql = """
            SELECT email, code, created_at, expires_at
            FROM verification_codes
            WHERE email = %s AND code = %s AND expires_at > NOW()
            ORDER BY created_at DESC
            LIMIT 1
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (email, code))
            row = cursor.fetchone()

        if row is None:
            return None
        return VerificationCodeRecord(email=row[0], code=row[1], created_at=row[2], expires_at=row[3])

    def delete_by_email_and_code(self, email: str, code: str) -> bool:
        sql = "DELETE FROM verification_codes WHERE email = %s AND code = %s"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (email, code))
            conn.commit()
            return cursor.rowcount > 0

    def purge_expired(self) -> int:
        sql = "DELETE FROM verification_codes WHERE expires_at <= NOW()"

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql)
            conn.commit()
            purged = cursor.rowcount

        if purged:
            logger.info("Purged %d expired verification code(s)", purged)
        return purged


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: cinepass/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info("Migration complete: %s", sql_file.name)
        except Exception as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
