import aiosqlite
import structlog

from score_import.config import settings

logger = structlog.get_logger()

_db: aiosqlite.Connection | None = None

DDL_STATEMENTS = [
    """
    CREATE TABLE IF NOT EXISTS imports (
        import_id TEXT PRIMARY KEY,
        user_id INTEGER NOT NULL,
        import_type TEXT NOT NULL,
        user_intent INTEGER NOT NULL,
        time_started INTEGER NOT NULL,
        time_finished INTEGER NOT NULL,
        document TEXT NOT NULL
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_imports_user
    ON imports (user_id, time_started DESC)
    """,
    """
    CREATE TABLE IF NOT EXISTS import_timings (
        import_id TEXT PRIMARY KEY,
        timestamp INTEGER NOT NULL,
        total INTEGER NOT NULL,
        rel TEXT NOT NULL,
        abs TEXT NOT NULL
    )
    """,
]


async def create_schema(db: aiosqlite.Connection) -> None:
    for ddl in DDL_STATEMENTS:
        await db.execute(ddl)
    await db.commit()


async def init_database() -> None:
    global _db
    _db = await aiosqlite.connect(settings.db_path)
    _db.row_factory = aiosqlite.Row
    await _db.execute("PRAGMA journal_mode=WAL")
    await _db.execute("PRAGMA foreign_keys=ON")
    await create_schema(_db)

    logger.info("database_initialized", path=settings.db_path)


async def close_database() -> None:
    global _db
    if _db is not None:
        await _db.close()
        _db = None
        logger.info("database_closed")


def get_db() -> aiosqlite.Connection:
    if _db is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")
    return _db


async def check_health() -> None:
    db = get_db()
    cursor = await db.execute("SELECT 1")
    await cursor.close()
