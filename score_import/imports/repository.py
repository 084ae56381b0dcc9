import json

import aiosqlite
import structlog

from score_import.exceptions import ConflictError
from score_import.imports.schemas import ImportSummary, ImportTiming

logger = structlog.get_logger()


class ImportRepository:
    def __init__(self, db: aiosqlite.Connection) -> None:
        self._db = db

    async def save_import(self, summary: ImportSummary) -> None:
        document = summary.model_dump_json(by_alias=True)
        try:
            await self._db.execute(
                """
                INSERT INTO imports (
                    import_id, user_id, import_type, user_intent,
                    time_started, time_finished, document
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    summary.import_id,
                    summary.user_id,
                    str(summary.import_type),
                    1 if summary.user_intent else 0,
                    summary.time_started,
                    summary.time_finished,
                    document,
                ),
            )
        except aiosqlite.IntegrityError as exc:
            raise ConflictError(f"Import '{summary.import_id}' already exists") from exc
        await self._db.commit()

        logger.info("import_saved", import_id=summary.import_id, user_id=summary.user_id)

    async def save_timing(self, timing: ImportTiming) -> None:
        await self._db.execute(
            """
            INSERT INTO import_timings (import_id, timestamp, total, rel, abs)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                timing.import_id,
                timing.timestamp,
                timing.total,
                json.dumps(timing.relative),
                json.dumps(timing.absolute),
            ),
        )
        await self._db.commit()

    async def get_import(self, import_id: str) -> ImportSummary | None:
        cursor = await self._db.execute(
            "SELECT document FROM imports WHERE import_id = ?",
            (import_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return ImportSummary.model_validate_json(row["document"])

    async def list_imports(self, user_id: int | None = None, limit: int = 50) -> list[ImportSummary]:
        if user_id is not None:
            cursor = await self._db.execute(
                """
                SELECT document FROM imports
                WHERE user_id = ?
                ORDER BY time_started DESC
                LIMIT ?
                """,
                (user_id, limit),
            )
        else:
            cursor = await self._db.execute(
                "SELECT document FROM imports ORDER BY time_started DESC LIMIT ?",
                (limit,),
            )
        rows = await cursor.fetchall()
        return [ImportSummary.model_validate_json(row["document"]) for row in rows]

    async def get_timing(self, import_id: str) -> ImportTiming | None:
        cursor = await self._db.execute(
            """
            SELECT import_id, timestamp, total, rel, abs
            FROM import_timings
            WHERE import_id = ?
            """,
            (import_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return ImportTiming(
            import_id=row["import_id"],
            timestamp=row["timestamp"],
            total=row["total"],
            relative=json.loads(row["rel"]),
            absolute=json.loads(row["abs"]),
        )
