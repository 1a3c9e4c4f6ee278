"""
Task table provisioning

Normally the schema is applied by whoever provisions the database.
apply_schema() exists for local runs (--init-db, AUTO_CREATE_SCHEMA) and tests.
"""

import logging

from taskboard.core.store import RowStore

logger = logging.getLogger(__name__)

SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS tasks (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL,
        description TEXT DEFAULT '',
        status TEXT DEFAULT 'TODO',
        priority TEXT DEFAULT 'Normal',
        created_at DATETIME DEFAULT CURRENT_TIMESTAMP
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_tasks_created_at ON tasks(created_at)",
)


async def apply_schema(store: RowStore) -> None:
    """Create the tasks table and its index if missing"""
    await store.execute_script(SCHEMA_STATEMENTS)
    logger.info("✅ Task schema is in place")
