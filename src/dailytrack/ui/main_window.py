import logging
from typing import Optional, Final

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QLabel, QPushButton, QTableView, QHeaderView,
    QMessageBox, QStatusBar
)
from PySide6.QtGui import QCloseEvent, QAction, QKeySequence, QShortcut

from dailytrack.models.transaction import Transaction
from dailytrack.services.money_provider import MoneyProvider
from dailytrack.settings import APP_NAME, format_money
from dailytrack.ui.summary_card import SummaryPanel
from dailytrack.ui.theme import get_text_color_str
from dailytrack.ui.transaction_input import TransactionInputWidget
from dailytrack.ui.transaction_model import TransactionTableModel

logger: Final = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """主窗口"""

    def __init__(self, provider: Optional[MoneyProvider] = None):
        super().__init__()
        self.provider = provider or MoneyProvider(parent=self)

        self.setWindowTitle(f"{APP_NAME} - 每日记账")
        self.resize(900, 680)

        self._init_menu()
        self._init_ui()
        self._init_shortcuts()
        self._init_statusbar()

        self.provider.changed.connect(self._on_provider_changed)
        self.provider.loading_changed.connect(self._on_loading_changed)
        self.provider.error_occurred.connect(self._on_error)

        if not self.provider.initialize():
            QMessageBox.critical(self, "错误", self.provider.error_message or "初始化失败")

    def _init_menu(self) -> None:
        menubar = self.menuBar()

        # 文件菜单
        file_menu = menubar.addMenu("文件")

        export_action = QAction("导出本月支出 (CSV)", self)
        export_action.setShortcut(QKeySequence("Ctrl+E"))
        export_action.triggered.connect(self._on_export)
        file_menu.addAction(export_action)

        file_menu.addSeparator()

        exit_action = QAction("退出", self)
        exit_action.setShortcut(QKeySequence.Quit)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        # 编辑菜单
        edit_menu = menubar.addMenu("编辑")

        delete_action = QAction("删除交易", self)
        delete_action.triggered.connect(self._on_delete_transaction)
        edit_menu.addAction(delete_action)

        refresh_action = QAction("刷新", self)
        refresh_action.setShortcut(QKeySequence.Refresh)
        refresh_action.triggered.connect(self.provider.refresh)
        edit_menu.addAction(refresh_action)

    def _init_ui(self) -> None:
        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        layout = QVBoxLayout(central_widget)
        layout.setContentsMargins(20, 20, 20, 20)
        layout.setSpacing(16)

        # 汇总卡片
        self.summary_panel = SummaryPanel(self.provider)
        layout.addWidget(self.summary_panel)

        # 快速输入
        self.input_widget = TransactionInputWidget(self.provider)
        layout.addWidget(self.input_widget)

        # 工具栏
        toolbar_layout = QHBoxLayout()

        self.list_title = QLabel("今日交易")
        self.list_title.setStyleSheet(
            f"font-size: 16px; font-weight: bold; color: {get_text_color_str()};"
        )
        toolbar_layout.addWidget(self.list_title)
        toolbar_layout.addStretch()

        delete_btn = QPushButton("🗑️ 删除")
        delete_btn.clicked.connect(self._on_delete_transaction)
        toolbar_layout.addWidget(delete_btn)

        self.export_btn = QPushButton("📤 导出本月")
        self.export_btn.clicked.connect(self._on_export)
        toolbar_layout.addWidget(self.export_btn)

        layout.addLayout(toolbar_layout)

        # 今日交易列表
        self.transaction_model = TransactionTableModel()
        self.transaction_view = QTableView()
        self.transaction_view.setModel(self.transaction_model)
        self.transaction_view.setSelectionBehavior(QTableView.SelectRows)
        self.transaction_view.setSelectionMode(QTableView.SingleSelection)
        self.transaction_view.setAlternatingRowColors(True)
        self.transaction_view.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        layout.addWidget(self.transaction_view, 1)

    def _init_shortcuts(self) -> None:
        delete_shortcut = QShortcut(QKeySequence.Delete, self.transaction_view)
        delete_shortcut.activated.connect(self._on_delete_transaction)

    def _init_statusbar(self) -> None:
        self.statusbar = QStatusBar()
        self.setStatusBar(self.statusbar)
        self.statusbar.showMessage("就绪")

    def _on_provider_changed(self) -> None:
        transactions = self.provider.today_transactions
        self.transaction_model.set_transactions(transactions)
        self.list_title.setText(f"今日交易（{len(transactions)} 笔）")

    def _on_loading_changed(self, loading: bool) -> None:
        self.export_btn.setEnabled(not loading)
        if loading:
            self.statusbar.showMessage("处理中…")
        elif self.provider.error_message is None:
            self.statusbar.showMessage("就绪")

    def _on_error(self, message: str) -> None:
        self.statusbar.showMessage(f"⚠️ {message}", 5000)

    def _get_selected_transaction(self) -> Optional[Transaction]:
        indexes = self.transaction_view.selectedIndexes()
        if not indexes:
            return None
        return self.transaction_model.get_transaction(indexes[0].row())

    def _on_delete_transaction(self) -> None:
        tx = self._get_selected_transaction()
        if not tx:
            QMessageBox.information(self, "提示", "请先选择要删除的交易")
            return

        reply = QMessageBox.question(
            self,
            "确认删除",
            f"确定要删除这笔交易吗？\n\n"
            f"时间: {tx.timestamp:%Y-%m-%d %H:%M}\n"
            f"类型: {tx.type.display_name}\n"
            f"金额: {format_money(tx.amount)}\n"
            f"描述: {tx.description}\n\n"
            f"此操作无法撤销！",
            QMessageBox.Yes | QMessageBox.No,
            QMessageBox.No
        )

        if reply == QMessageBox.Yes and self.provider.delete_transaction(tx.id):
            self.statusbar.showMessage("交易已删除", 3000)

    def _on_export(self) -> None:
        result = self.provider.export_monthly_expenses()
        if result.success:
            QMessageBox.information(
                self, "导出成功",
                f"已导出 {result.record_count} 条支出记录\n\n{result.file_path}"
            )
        else:
            QMessageBox.warning(self, "导出失败", result.error_message or "导出失败")

    def closeEvent(self, event: QCloseEvent) -> None:
        self.provider.close()
        event.accept()
