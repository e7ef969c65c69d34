import logging
import sqlite3
from calendar import monthrange
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Final, Iterator, List, Optional, Tuple, Union

from dailytrack.db.migration import MigrationResult, SchemaMigrator
from dailytrack.exceptions import InvalidArgumentError, NotFoundError, StoreError
from dailytrack.models.expense import Expense
from dailytrack.models.transaction import Transaction, TransactionType, to_millis
from dailytrack.settings import DB_PATH, TRANSACTIONS_TABLE

logger: Final = logging.getLogger(__name__)

DateLike = Union[date, datetime]

_COLUMNS: Final = "id, amount, description, timestamp, type, category"


def start_of_day(day: DateLike) -> datetime:
    return datetime(day.year, day.month, day.day)


def end_of_day(day: DateLike) -> datetime:
    return datetime(day.year, day.month, day.day, 23, 59, 59, 999000)


def month_range(year: int, month: int) -> Tuple[datetime, datetime]:
    """获取某月的时间范围（首日 00:00:00.000 至末日 23:59:59.999）"""
    _, last_day = monthrange(year, month)
    return datetime(year, month, 1), end_of_day(date(year, month, last_day))


@contextmanager
def _store_errors(action: str) -> Iterator[None]:
    """将底层异常统一转换为 StoreError"""
    try:
        yield
    except StoreError:
        raise
    except (sqlite3.Error, OSError, ValueError) as e:
        raise StoreError(f"{action}失败: {e}") from e


class Database:
    """数据库访问层，连接在首次访问时打开，关闭后再次访问会重新打开"""

    def __init__(self, db_path: Optional[Union[str, Path]] = None):
        self._db_path = db_path or DB_PATH
        self._conn: Optional[sqlite3.Connection] = None
        self.last_migration: Optional[MigrationResult] = None

    @property
    def db_path(self) -> Union[str, Path]:
        return self._db_path

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._connect()
        return self._conn

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def _connect(self) -> None:
        """建立数据库连接并执行 schema 迁移"""
        with _store_errors("打开数据库"):
            if str(self._db_path) != ":memory:":
                Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self._db_path))
            try:
                self.last_migration = SchemaMigrator(conn).migrate()
            except sqlite3.Error:
                conn.close()
                raise
            self._conn = conn
            logger.debug("数据库已打开: %s", self._db_path)

    def init_database(self) -> None:
        """应用启动时调用，确保连接已打开且 schema 为最新"""
        _ = self.conn

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _query(self, sql: str, params: Tuple = ()) -> List[Transaction]:
        cursor = self.conn.execute(sql, params)
        return [Transaction.from_row(row) for row in cursor.fetchall()]

    # ==================== Transaction CRUD ====================

    def insert_transaction(self, transaction: Transaction) -> int:
        """新增交易，返回新ID"""
        with _store_errors("新增交易"):
            _, amount, description, timestamp, tx_type, category = transaction.to_row()
            cursor = self.conn.execute(f"""
                INSERT INTO {TRANSACTIONS_TABLE} (amount, description, timestamp, type, category)
                VALUES (?, ?, ?, ?, ?)
            """, (amount, description, timestamp, tx_type, category))
            self.conn.commit()
            transaction.id = cursor.lastrowid
            return transaction.id

    def update_transaction(self, transaction: Transaction) -> None:
        """更新交易（按ID整体替换所有字段）"""
        if transaction.id is None:
            raise InvalidArgumentError("无法更新没有ID的交易")
        with _store_errors("更新交易"):
            tx_id, amount, description, timestamp, tx_type, category = transaction.to_row()
            cursor = self.conn.execute(f"""
                UPDATE {TRANSACTIONS_TABLE} SET
                    amount = ?,
                    description = ?,
                    timestamp = ?,
                    type = ?,
                    category = ?
                WHERE id = ?
            """, (amount, description, timestamp, tx_type, category, tx_id))
            self.conn.commit()
            if cursor.rowcount == 0:
                raise NotFoundError(f"ID 为 {tx_id} 的交易不存在")

    def delete_transaction(self, transaction_id: int) -> None:
        """删除交易"""
        with _store_errors("删除交易"):
            cursor = self.conn.execute(
                f"DELETE FROM {TRANSACTIONS_TABLE} WHERE id = ?", (transaction_id,)
            )
            self.conn.commit()
            if cursor.rowcount == 0:
                raise NotFoundError(f"ID 为 {transaction_id} 的交易不存在")

    def delete_all_transactions(self) -> None:
        """删除全部交易（用于重置/测试）"""
        with _store_errors("清空交易"):
            self.conn.execute(f"DELETE FROM {TRANSACTIONS_TABLE}")
            self.conn.commit()

    def get_transaction_by_id(self, transaction_id: int) -> Optional[Transaction]:
        """根据ID获取交易"""
        with _store_errors("读取交易"):
            rows = self._query(
                f"SELECT {_COLUMNS} FROM {TRANSACTIONS_TABLE} WHERE id = ?", (transaction_id,)
            )
            return rows[0] if rows else None

    def get_all_transactions(self) -> List[Transaction]:
        """获取所有交易，按时间倒序"""
        with _store_errors("读取全部交易"):
            return self._query(
                f"SELECT {_COLUMNS} FROM {TRANSACTIONS_TABLE} ORDER BY timestamp DESC, id DESC"
            )

    def get_transactions_by_date_range(self, start: DateLike, end: DateLike) -> List[Transaction]:
        """根据时间范围获取交易（包含两端，毫秒精度），按时间倒序

        传入 date 时按整天处理：start 取当天 00:00:00.000，end 取当天 23:59:59.999
        """
        if not isinstance(start, datetime):
            start = start_of_day(start)
        if not isinstance(end, datetime):
            end = end_of_day(end)
        with _store_errors("按时间范围读取交易"):
            return self._query(f"""
                SELECT {_COLUMNS} FROM {TRANSACTIONS_TABLE}
                WHERE timestamp >= ? AND timestamp <= ?
                ORDER BY timestamp DESC, id DESC
            """, (to_millis(start), to_millis(end)))

    def get_transactions_for_date(self, day: DateLike) -> List[Transaction]:
        return self.get_transactions_by_date_range(start_of_day(day), end_of_day(day))

    def get_transactions_for_month(self, year: int, month: int) -> List[Transaction]:
        start, end = month_range(year, month)
        return self.get_transactions_by_date_range(start, end)

    def get_transaction_count_for_date(self, day: DateLike) -> int:
        return len(self.get_transactions_for_date(day))

    # ==================== 旧版支出视图 ====================

    def get_expenses_for_date(self, day: DateLike) -> List[Expense]:
        return [
            Expense.from_transaction(t)
            for t in self.get_transactions_for_date(day) if t.is_expense
        ]

    def get_expenses_for_month(self, year: int, month: int) -> List[Expense]:
        return [
            Expense.from_transaction(t)
            for t in self.get_transactions_for_month(year, month) if t.is_expense
        ]

    # ==================== Statistics ====================

    @staticmethod
    def _sum(transactions: List[Transaction], tx_type: TransactionType) -> float:
        return sum((t.amount for t in transactions if t.type == tx_type), 0.0)

    def sum_income_for_date(self, day: DateLike) -> float:
        return self._sum(self.get_transactions_for_date(day), TransactionType.INCOME)

    def sum_expense_for_date(self, day: DateLike) -> float:
        return self._sum(self.get_transactions_for_date(day), TransactionType.EXPENSE)

    def sum_income_for_month(self, year: int, month: int) -> float:
        return self._sum(self.get_transactions_for_month(year, month), TransactionType.INCOME)

    def sum_expense_for_month(self, year: int, month: int) -> float:
        return self._sum(self.get_transactions_for_month(year, month), TransactionType.EXPENSE)

    def get_current_balance(self) -> float:
        """本月结余（收入 - 支出），每次调用时按当前系统月份计算"""
        today = date.today()
        transactions = self.get_transactions_for_month(today.year, today.month)
        return (
            self._sum(transactions, TransactionType.INCOME)
            - self._sum(transactions, TransactionType.EXPENSE)
        )

    def close(self) -> None:
        """关闭数据库连接"""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
