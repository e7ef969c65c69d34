"""交易表格数据模型模块"""
from typing import Any, Final, Optional, Sequence
from enum import IntEnum

from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex
from PySide6.QtGui import QColor

from dailytrack.models.transaction import Transaction
from dailytrack.settings import format_money
from dailytrack.ui.theme import get_type_color


class TransactionColumn(IntEnum):
    """交易表格列定义"""
    TIME = 0
    TYPE = 1
    CATEGORY = 2
    DESCRIPTION = 3
    AMOUNT = 4


COLUMN_HEADERS: Final = ["时间", "类型", "分类", "描述", "金额"]


class TransactionTableModel(QAbstractTableModel):
    """今日交易表格数据模型（Model/View架构）"""

    def __init__(self, parent=None):
        super().__init__(parent)
        self._transactions: Sequence[Transaction] = ()

    def set_transactions(self, transactions: Sequence[Transaction]) -> None:
        self.beginResetModel()
        self._transactions = tuple(transactions)
        self.endResetModel()

    def get_transaction(self, row: int) -> Optional[Transaction]:
        """根据行号获取交易对象"""
        if 0 <= row < len(self._transactions):
            return self._transactions[row]
        return None

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return len(self._transactions)

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return len(TransactionColumn)

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole) -> Any:
        if not index.isValid() or not (0 <= index.row() < len(self._transactions)):
            return None

        tx = self._transactions[index.row()]
        col = index.column()

        if role == Qt.DisplayRole:
            if col == TransactionColumn.TIME:
                return tx.timestamp.strftime("%H:%M")
            elif col == TransactionColumn.TYPE:
                return tx.type.display_name
            elif col == TransactionColumn.CATEGORY:
                return f"{tx.category.icon} {tx.category.display_name}"
            elif col == TransactionColumn.DESCRIPTION:
                return tx.description
            elif col == TransactionColumn.AMOUNT:
                sign = "+" if tx.is_income else "-"
                return f"{sign}{format_money(tx.amount)}"

        elif role == Qt.TextAlignmentRole:
            return Qt.AlignCenter

        elif role == Qt.ForegroundRole:
            if col in (TransactionColumn.TYPE, TransactionColumn.AMOUNT):
                return QColor(get_type_color(tx.type))

        elif role == Qt.UserRole:
            return tx

        return None

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.DisplayRole) -> Any:
        if orientation == Qt.Horizontal and role == Qt.DisplayRole:
            if 0 <= section < len(COLUMN_HEADERS):
                return COLUMN_HEADERS[section]
        return None

    def flags(self, index: QModelIndex) -> Qt.ItemFlags:
        return Qt.ItemIsEnabled | Qt.ItemIsSelectable
