"""数据模型模块"""
from dailytrack.models.transaction import Transaction, TransactionType, TransactionCategory
from dailytrack.models.expense import Expense

__all__ = ["Transaction", "TransactionType", "TransactionCategory", "Expense"]
