"""
Fixtures for SQLite-specific integration tests.
"""
import pytest
from dbbatch.decorators import batch_in_clause


@pytest.fixture
def statement_log(sqlite_conn):
    """Record every statement executed on the connection."""
    statements = []
    sqlite_conn.set_trace_callback(statements.append)
    yield statements
    sqlite_conn.set_trace_callback(None)


@pytest.fixture
def user_repository():
    """Repository whose lookups are batched below the SQLite parameter limit."""
    class UserRepository:
        def __init__(self, cn):
            self.cn = cn

        @batch_in_clause('ids', chunk_size=500)
        def find_names(self, ids):
            placeholders = ','.join('?' * len(ids))
            cursor = self.cn.execute(
                f'SELECT name FROM users WHERE id IN ({placeholders}) ORDER BY id', list(ids))
            return [row[0] for row in cursor.fetchall()]

    return UserRepository
