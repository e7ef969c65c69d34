"""快速记账输入组件模块"""
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLineEdit, QComboBox, QPushButton, QLabel
)

from dailytrack.models.transaction import TransactionCategory, TransactionType
from dailytrack.services.input_parser import supported_formats
from dailytrack.services.money_provider import MoneyProvider
from dailytrack.ui.theme import COLOR_EXPENSE


class TransactionInputWidget(QWidget):
    """快速记账输入：一行文本（金额 + 描述）+ 类型 + 分类"""

    def __init__(self, provider: MoneyProvider, parent=None):
        super().__init__(parent)
        self.provider = provider
        self._init_ui()

    def _init_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(6)

        row = QHBoxLayout()

        # 类型
        self.type_combo = QComboBox()
        self.type_combo.addItem(TransactionType.EXPENSE.display_name, int(TransactionType.EXPENSE))
        self.type_combo.addItem(TransactionType.INCOME.display_name, int(TransactionType.INCOME))
        row.addWidget(self.type_combo)

        # 分类（随类型切换）
        self.category_combo = QComboBox()
        self._populate_categories()
        self.type_combo.currentIndexChanged.connect(self._on_type_changed)
        row.addWidget(self.category_combo)

        # 金额 + 描述
        self.text_input = QLineEdit()
        examples = "、".join(supported_formats()[:2])
        self.text_input.setPlaceholderText(f"金额 描述，如 {examples}")
        self.text_input.returnPressed.connect(self._on_submit)
        row.addWidget(self.text_input, 1)

        add_btn = QPushButton("➕ 记一笔")
        add_btn.setDefault(True)
        add_btn.clicked.connect(self._on_submit)
        row.addWidget(add_btn)

        layout.addLayout(row)

        # 校验错误提示
        self.error_label = QLabel("")
        self.error_label.setStyleSheet(f"color: {COLOR_EXPENSE}; font-size: 12px;")
        self.error_label.setVisible(False)
        layout.addWidget(self.error_label)

    def _current_type(self) -> TransactionType:
        return TransactionType(self.type_combo.currentData())

    def _populate_categories(self) -> None:
        """按当前类型填充分类下拉框，支出默认选中杂项"""
        self.category_combo.clear()
        for category in TransactionCategory.for_type(self._current_type()):
            self.category_combo.addItem(f"{category.icon} {category.display_name}", int(category))
        idx = self.category_combo.findData(int(TransactionCategory.MISC))
        if idx >= 0:
            self.category_combo.setCurrentIndex(idx)

    def _on_type_changed(self) -> None:
        self._populate_categories()

    def _on_submit(self) -> None:
        text = self.text_input.text()
        category = TransactionCategory(self.category_combo.currentData())
        if self.provider.add_transaction_from_input(text, self._current_type(), category):
            self.text_input.clear()
            self.error_label.setVisible(False)
        else:
            # 保留输入内容，方便修改
            self.error_label.setText(self.provider.error_message or "")
            self.error_label.setVisible(True)
