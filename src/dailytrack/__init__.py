"""
DailyTrack - 本地每日记账应用
"""
from dailytrack.models.transaction import Transaction, TransactionType, TransactionCategory
from dailytrack.models.expense import Expense
from dailytrack.db.database import Database
from dailytrack.db.migration import SchemaMigrator, MigrationResult
from dailytrack.exceptions import ParseError, StoreError, NotFoundError, InvalidArgumentError
from dailytrack.settings import VERSION, APP_NAME, CURRENCY_SYMBOL, format_money

__all__ = [
    # 数据模型
    "Transaction",
    "TransactionType",
    "TransactionCategory",
    "Expense",
    # 数据库
    "Database",
    "SchemaMigrator",
    "MigrationResult",
    # 异常
    "ParseError",
    "StoreError",
    "NotFoundError",
    "InvalidArgumentError",
    # 配置
    "VERSION",
    "APP_NAME",
    "CURRENCY_SYMBOL",
    # 工具函数
    "format_money",
]
__version__ = VERSION
