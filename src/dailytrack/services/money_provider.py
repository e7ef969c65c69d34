"""收支状态服务模块

维护"今日交易"列表和四个汇总值（今日收入/支出、本月收入/支出），
每次写操作后从数据库重新计算汇总，不依赖内存列表，避免数据漂移。
今日列表只是缓存，随时可以从数据库重建。
"""
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Callable, Final, List, Optional, Tuple, TypeVar, Union

from PySide6.QtCore import QObject, Signal

from dailytrack.db.database import Database, end_of_day, start_of_day
from dailytrack.exceptions import ParseError, StoreError
from dailytrack.models.expense import Expense
from dailytrack.models.transaction import Transaction, TransactionCategory, TransactionType
from dailytrack.services import csv_exporter, input_parser
from dailytrack.services.csv_exporter import CsvExportResult

logger: Final = logging.getLogger(__name__)

T = TypeVar("T")


class MoneyProvider(QObject):
    """收支状态提供者，界面层只读取其状态并监听 changed 信号"""

    changed = Signal()
    loading_changed = Signal(bool)
    error_occurred = Signal(str)

    def __init__(self, db: Optional[Database] = None, parent=None):
        super().__init__(parent)
        self.db = db or Database()
        self._today_transactions: List[Transaction] = []
        self._daily_income = 0.0
        self._daily_expenses = 0.0
        self._monthly_income = 0.0
        self._monthly_expenses = 0.0
        self._current_balance = 0.0
        self._is_loading = False
        self._error_message: Optional[str] = None

    # ==================== 只读状态 ====================

    @property
    def today_transactions(self) -> Tuple[Transaction, ...]:
        return tuple(self._today_transactions)

    @property
    def today_income(self) -> List[Transaction]:
        return [t for t in self._today_transactions if t.is_income]

    @property
    def today_expenses(self) -> List[Transaction]:
        return [t for t in self._today_transactions if t.is_expense]

    @property
    def daily_income(self) -> float:
        return self._daily_income

    @property
    def daily_expenses(self) -> float:
        return self._daily_expenses

    @property
    def daily_net(self) -> float:
        return self._daily_income - self._daily_expenses

    @property
    def monthly_income(self) -> float:
        return self._monthly_income

    @property
    def monthly_expenses(self) -> float:
        return self._monthly_expenses

    @property
    def monthly_net(self) -> float:
        return self._monthly_income - self._monthly_expenses

    @property
    def current_balance(self) -> float:
        return self._current_balance

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def error_message(self) -> Optional[str]:
        return self._error_message

    # ==================== 生命周期 ====================

    def initialize(self) -> bool:
        """打开数据库（执行迁移），加载今日数据并计算汇总"""
        self._clear_error()
        self._set_loading(True)
        try:
            self.db.init_database()
            self._load_today()
            self._calculate_totals()
            return True
        except StoreError as e:
            logger.exception("初始化失败")
            self._set_error(str(e))
            return False
        finally:
            self._set_loading(False)

    def load_today_transactions(self) -> None:
        self._clear_error()
        try:
            self._load_today()
        except StoreError as e:
            logger.exception("加载今日交易失败")
            self._set_error(str(e))

    def refresh(self) -> None:
        """重新加载今日交易并重新计算汇总"""
        self._clear_error()
        self._set_loading(True)
        try:
            self._load_today()
            self._calculate_totals()
        except StoreError as e:
            logger.exception("刷新数据失败")
            self._set_error(str(e))
        finally:
            self._set_loading(False)

    def close(self) -> None:
        self.db.close()

    # ==================== 写操作 ====================

    def add_transaction(
        self,
        amount: float,
        description: str,
        tx_type: TransactionType,
        category: TransactionCategory,
        timestamp: Optional[datetime] = None,
    ) -> bool:
        """新增交易，校验失败时不写入数据库"""
        self._clear_error()
        transaction = Transaction(
            amount=amount,
            description=description.strip() if description else description,
            timestamp=timestamp or datetime.now(),
            type=tx_type,
            category=category,
        )
        errors = transaction.validate()
        if errors:
            self._set_error(errors[0])
            return False

        self._set_loading(True)
        try:
            tx_id = self.db.insert_transaction(transaction)
            if transaction.timestamp.date() == date.today():
                self._today_transactions.insert(0, transaction.copy_with(id=tx_id))
            self._calculate_totals()
            logger.info("已新增交易 #%d", tx_id)
            return True
        except StoreError as e:
            logger.exception("新增交易失败")
            self._set_error(str(e))
            return False
        finally:
            self._set_loading(False)

    def add_transaction_from_input(
        self,
        text: str,
        tx_type: TransactionType,
        category: TransactionCategory,
    ) -> bool:
        """解析快速输入（如 "120 coffee"），结构解析和语义校验都通过后才写入"""
        self._clear_error()
        try:
            parsed = input_parser.parse_and_validate(text)
        except ParseError as e:
            logger.warning("输入解析失败: %r (%s)", text, e)
            self._set_error(str(e))
            return False

        return self.add_transaction(
            amount=parsed.amount,
            description=parsed.description,
            tx_type=tx_type,
            category=category,
        )

    def add_expense_from_input(self, text: str) -> bool:
        """快速输入记为杂项支出"""
        return self.add_transaction_from_input(
            text, TransactionType.EXPENSE, TransactionCategory.MISC
        )

    def add_expense(self, expense: Expense) -> bool:
        return self.add_transaction(
            amount=expense.amount,
            description=expense.description,
            tx_type=TransactionType.EXPENSE,
            category=TransactionCategory.MISC,
            timestamp=expense.timestamp,
        )

    def update_transaction(self, transaction: Transaction) -> bool:
        """整体替换一条交易"""
        self._clear_error()
        errors = transaction.validate()
        if errors:
            self._set_error(errors[0])
            return False

        self._set_loading(True)
        try:
            self.db.update_transaction(transaction)
            self._load_today()
            self._calculate_totals()
            return True
        except StoreError as e:
            logger.exception("更新交易失败")
            self._set_error(str(e))
            return False
        finally:
            self._set_loading(False)

    def delete_transaction(self, transaction_id: int) -> bool:
        self._clear_error()
        self._set_loading(True)
        try:
            self.db.delete_transaction(transaction_id)
            self._today_transactions = [
                t for t in self._today_transactions if t.id != transaction_id
            ]
            self._calculate_totals()
            logger.info("已删除交易 #%d", transaction_id)
            return True
        except StoreError as e:
            logger.exception("删除交易失败")
            self._set_error(str(e))
            return False
        finally:
            self._set_loading(False)

    def delete_expense(self, expense_id: int) -> bool:
        return self.delete_transaction(expense_id)

    def clear_all_transactions(self) -> None:
        """清空全部交易（用于重置/测试）"""
        self._clear_error()
        self._set_loading(True)
        try:
            self.db.delete_all_transactions()
            self._today_transactions = []
            self._daily_income = self._daily_expenses = 0.0
            self._monthly_income = self._monthly_expenses = 0.0
            self._current_balance = 0.0
            self.changed.emit()
        except StoreError as e:
            logger.exception("清空交易失败")
            self._set_error(str(e))
        finally:
            self._set_loading(False)

    # ==================== 查询 ====================

    def _query(self, action: str, fetch: Callable[[], T], default: T) -> T:
        """只读查询：开始时清除旧错误，失败时记录日志并返回默认值"""
        self._clear_error()
        try:
            return fetch()
        except StoreError as e:
            logger.exception("%s失败", action)
            self._set_error(str(e))
            return default

    def get_transactions_for_date(self, day: date) -> List[Transaction]:
        return self._query("按日查询交易", lambda: self.db.get_transactions_for_date(day), [])

    def get_transactions_for_month(self, year: int, month: int) -> List[Transaction]:
        return self._query(
            "按月查询交易", lambda: self.db.get_transactions_for_month(year, month), []
        )

    def get_expenses_for_date(self, day: date) -> List[Expense]:
        return self._query("按日查询支出", lambda: self.db.get_expenses_for_date(day), [])

    def get_expenses_for_month(self, year: int, month: int) -> List[Expense]:
        return self._query(
            "按月查询支出", lambda: self.db.get_expenses_for_month(year, month), []
        )

    def get_total_for_date(self, day: date) -> float:
        return self._query("计算当日支出", lambda: self.db.sum_expense_for_date(day), 0.0)

    def get_total_for_month(self, year: int, month: int) -> float:
        return self._query(
            "计算当月支出", lambda: self.db.sum_expense_for_month(year, month), 0.0
        )

    # ==================== 导出 ====================

    def export_monthly_expenses(
        self, directory: Optional[Union[str, Path]] = None
    ) -> CsvExportResult:
        """导出本月支出"""
        today = date.today()
        self._clear_error()
        self._set_loading(True)
        try:
            expenses = self.db.get_transactions_for_month(today.year, today.month)
            result = csv_exporter.export_monthly_expenses(
                expenses, today.year, today.month, directory=directory
            )
        except StoreError as e:
            logger.exception("导出失败")
            result = CsvExportResult.error(str(e))
        finally:
            self._set_loading(False)

        if not result.success:
            self._set_error(result.error_message or "导出失败")
        return result

    def export_date_range(
        self, start: date, end: date, directory: Optional[Union[str, Path]] = None
    ) -> CsvExportResult:
        """导出 [start, end] 区间内的支出"""
        self._clear_error()
        if end < start:
            result = CsvExportResult.error("结束日期不能早于开始日期")
            self._set_error(result.error_message)
            return result

        self._set_loading(True)
        try:
            expenses = self.db.get_transactions_by_date_range(start_of_day(start), end_of_day(end))
            result = csv_exporter.export_expenses(
                expenses,
                file_name=csv_exporter.range_file_name(start, end),
                directory=directory,
            )
        except StoreError as e:
            logger.exception("导出失败")
            result = CsvExportResult.error(str(e))
        finally:
            self._set_loading(False)

        if not result.success:
            self._set_error(result.error_message or "导出失败")
        return result

    # ==================== 内部方法 ====================

    def _load_today(self) -> None:
        self._today_transactions = self.db.get_transactions_for_date(date.today())
        self.changed.emit()

    def _calculate_totals(self) -> None:
        """从数据库重新计算今日/本月汇总"""
        today = date.today()
        self._daily_income = self.db.sum_income_for_date(today)
        self._daily_expenses = self.db.sum_expense_for_date(today)
        self._monthly_income = self.db.sum_income_for_month(today.year, today.month)
        self._monthly_expenses = self.db.sum_expense_for_month(today.year, today.month)
        self._current_balance = self.db.get_current_balance()
        self.changed.emit()

    def _set_loading(self, loading: bool) -> None:
        if self._is_loading != loading:
            self._is_loading = loading
            self.loading_changed.emit(loading)
            self.changed.emit()

    def _set_error(self, message: str) -> None:
        self._error_message = message
        self.error_occurred.emit(message)
        self.changed.emit()

    def _clear_error(self) -> None:
        if self._error_message is not None:
            self._error_message = None
            self.changed.emit()
