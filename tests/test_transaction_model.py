"""
今日交易表格模型测试
"""
from datetime import datetime

from PySide6.QtCore import Qt

from dailytrack.models.transaction import Transaction, TransactionCategory, TransactionType
from dailytrack.ui.transaction_model import COLUMN_HEADERS, TransactionColumn, TransactionTableModel


def _rows():
    return [
        Transaction(id=2, amount=1234.5, description="salary", timestamp=datetime(2024, 1, 5, 9, 5),
                    type=TransactionType.INCOME, category=TransactionCategory.SALARY),
        Transaction(id=1, amount=40, description="lunch", timestamp=datetime(2024, 1, 5, 12, 30),
                    type=TransactionType.EXPENSE, category=TransactionCategory.FOOD),
    ]


def test_shape():
    model = TransactionTableModel()
    model.set_transactions(_rows())
    assert model.rowCount() == 2
    assert model.columnCount() == len(COLUMN_HEADERS)
    assert model.headerData(0, Qt.Horizontal) == "时间"


def test_display_values():
    model = TransactionTableModel()
    model.set_transactions(_rows())

    def cell(row, col):
        return model.data(model.index(row, int(col)), Qt.DisplayRole)

    assert cell(0, TransactionColumn.TIME) == "09:05"
    assert cell(0, TransactionColumn.TYPE) == "收入"
    assert cell(0, TransactionColumn.AMOUNT) == "+₹1,234.50"
    assert cell(1, TransactionColumn.AMOUNT) == "-₹40.00"
    assert cell(1, TransactionColumn.DESCRIPTION) == "lunch"


def test_user_role_returns_transaction():
    model = TransactionTableModel()
    rows = _rows()
    model.set_transactions(rows)
    assert model.data(model.index(1, 0), Qt.UserRole) is rows[1]
    assert model.get_transaction(5) is None
