"""数据库 schema 迁移模块

V1: 单一用途的 expenses 表 (id, amount, description, timestamp)
V2: 通用 transactions 表 (id, amount, description, timestamp, type, category)

是否已迁移的唯一判据是 expenses 表是否仍然存在，因此每次打开数据库都执行迁移，
不依赖一次性标记。schema_version 表仅用于诊断。
"""
import logging
import sqlite3
from dataclasses import dataclass
from typing import Final

from dailytrack.models.transaction import TransactionCategory, TransactionType
from dailytrack.settings import (
    DB_SCHEMA_VERSION,
    IDX_LEGACY_EXPENSES_TIMESTAMP,
    IDX_TRANSACTIONS_TIMESTAMP,
    IDX_TRANSACTIONS_TYPE,
    LEGACY_EXPENSES_TABLE,
    TRANSACTIONS_TABLE,
)

logger: Final = logging.getLogger(__name__)


@dataclass
class MigrationResult:
    """一次迁移的执行结果"""
    created_target: bool = False
    migrated_rows: int = 0
    legacy_dropped: bool = False
    fell_back: bool = False


class SchemaMigrator:
    """将旧版 expenses 表迁移到 transactions 表"""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def migrate(self) -> MigrationResult:
        """执行迁移（幂等）"""
        result = MigrationResult()

        if not self._table_exists(TRANSACTIONS_TABLE):
            result.created_target = self._ensure_target_schema()
            if result.created_target:
                logger.info("已创建 %s 表", TRANSACTIONS_TABLE)

        if self._table_exists(LEGACY_EXPENSES_TABLE):
            try:
                result.migrated_rows = self._copy_legacy_rows()
                result.legacy_dropped = True
                logger.info(
                    "已从 %s 迁移 %d 条记录", LEGACY_EXPENSES_TABLE, result.migrated_rows
                )
            except sqlite3.Error:
                # 保留旧表和未迁移数据，仅保证新 schema 可用
                logger.exception("迁移旧版支出数据失败，保留 %s 表", LEGACY_EXPENSES_TABLE)
                self._ensure_target_schema()
                result.fell_back = True

        if not result.fell_back:
            self._write_schema_version()
        return result

    def _table_exists(self, name: str) -> bool:
        try:
            cursor = self.conn.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table' AND name = ?",
                (name,),
            )
            return cursor.fetchone() is not None
        except sqlite3.Error:
            logger.warning("查询表 %s 失败，按不存在处理", name, exc_info=True)
            return False

    def _create_target_schema(self) -> None:
        self.conn.execute(f"""
            CREATE TABLE IF NOT EXISTS {TRANSACTIONS_TABLE} (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                amount REAL NOT NULL,
                description TEXT NOT NULL,
                timestamp INTEGER NOT NULL,
                type INTEGER NOT NULL,
                category INTEGER NOT NULL
            )
        """)
        self.conn.execute(f"""
            CREATE INDEX IF NOT EXISTS {IDX_TRANSACTIONS_TIMESTAMP}
            ON {TRANSACTIONS_TABLE}(timestamp)
        """)
        self.conn.execute(f"""
            CREATE INDEX IF NOT EXISTS {IDX_TRANSACTIONS_TYPE}
            ON {TRANSACTIONS_TABLE}(type)
        """)
        self.conn.commit()

    def _ensure_target_schema(self) -> bool:
        try:
            self._create_target_schema()
            return True
        except sqlite3.Error:
            logger.exception("创建 %s 表失败", TRANSACTIONS_TABLE)
            return False

    def _copy_legacy_rows(self) -> int:
        """在单个事务内复制旧数据并删除旧表"""
        conn = self.conn
        if conn.in_transaction:
            conn.commit()
        conn.execute("BEGIN")
        try:
            cursor = conn.execute(
                f"""
                INSERT INTO {TRANSACTIONS_TABLE} (amount, description, timestamp, type, category)
                SELECT amount, description, timestamp, ?, ?
                FROM {LEGACY_EXPENSES_TABLE}
                ORDER BY id
                """,
                (int(TransactionType.EXPENSE), int(TransactionCategory.MISC)),
            )
            copied = cursor.rowcount
            conn.execute(f"DROP INDEX IF EXISTS {IDX_LEGACY_EXPENSES_TIMESTAMP}")
            conn.execute(f"DROP TABLE {LEGACY_EXPENSES_TABLE}")
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
        return copied

    def _write_schema_version(self) -> None:
        try:
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                )
            """)
            self.conn.execute("DELETE FROM schema_version")
            self.conn.execute(
                "INSERT INTO schema_version (version) VALUES (?)", (DB_SCHEMA_VERSION,)
            )
            self.conn.commit()
        except sqlite3.Error:
            logger.warning("写入 schema_version 失败", exc_info=True)
