"""收支汇总卡片模块"""
from datetime import date

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QGridLayout, QLabel, QFrame
)

from dailytrack.services.money_provider import MoneyProvider
from dailytrack.settings import format_money
from dailytrack.ui.theme import (
    COLOR_INCOME, COLOR_EXPENSE,
    get_text_color_str, get_secondary_text_color, get_card_style, get_balance_color
)


class SummaryCard(QFrame):
    """数据卡片组件"""

    def __init__(self, title: str, parent=None):
        super().__init__(parent)
        self.setFrameStyle(QFrame.StyledPanel | QFrame.Raised)
        self.setStyleSheet(get_card_style())

        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 12, 16, 12)
        layout.setSpacing(8)

        self.title_label = QLabel(title)
        self.title_label.setStyleSheet(
            f"color: {get_secondary_text_color()}; font-size: 13px;"
        )
        layout.addWidget(self.title_label)

        self.value_label = QLabel(format_money(0))
        self._update_value_style()
        layout.addWidget(self.value_label)

    def _update_value_style(self, color: str = None) -> None:
        if color is None:
            color = get_text_color_str()
        self.value_label.setStyleSheet(f"color: {color}; font-size: 24px; font-weight: bold;")

    def set_value(self, value: float, color: str = None) -> None:
        self.value_label.setText(format_money(value))
        self._update_value_style(color)


class SummaryPanel(QWidget):
    """今日/本月收支汇总面板"""

    def __init__(self, provider: MoneyProvider, parent=None):
        super().__init__(parent)
        self.provider = provider
        self._init_ui()
        self.provider.changed.connect(self.refresh)

    def _init_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(12)

        self.title_label = QLabel()
        self.title_label.setStyleSheet(
            f"font-size: 20px; font-weight: bold; color: {get_text_color_str()};"
        )
        layout.addWidget(self.title_label)

        grid = QGridLayout()
        grid.setSpacing(16)

        self.daily_income_card = SummaryCard("今日收入")
        self.daily_expense_card = SummaryCard("今日支出")
        self.daily_net_card = SummaryCard("今日结余")
        grid.addWidget(self.daily_income_card, 0, 0)
        grid.addWidget(self.daily_expense_card, 0, 1)
        grid.addWidget(self.daily_net_card, 0, 2)

        self.monthly_income_card = SummaryCard("本月收入")
        self.monthly_expense_card = SummaryCard("本月支出")
        self.monthly_net_card = SummaryCard("本月结余")
        grid.addWidget(self.monthly_income_card, 1, 0)
        grid.addWidget(self.monthly_expense_card, 1, 1)
        grid.addWidget(self.monthly_net_card, 1, 2)

        layout.addLayout(grid)
        self.refresh()

    def refresh(self) -> None:
        """根据 provider 当前状态刷新卡片"""
        today = date.today()
        self.title_label.setText(f"📊 {today.year}年{today.month}月{today.day}日 收支概览")

        p = self.provider
        self.daily_income_card.set_value(p.daily_income, COLOR_INCOME)
        self.daily_expense_card.set_value(p.daily_expenses, COLOR_EXPENSE)
        self.daily_net_card.set_value(p.daily_net, get_balance_color(p.daily_net))

        self.monthly_income_card.set_value(p.monthly_income, COLOR_INCOME)
        self.monthly_expense_card.set_value(p.monthly_expenses, COLOR_EXPENSE)
        self.monthly_net_card.set_value(p.monthly_net, get_balance_color(p.monthly_net))
