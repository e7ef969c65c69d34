"""用户界面模块"""
from dailytrack.ui.main_window import MainWindow
from dailytrack.ui.transaction_input import TransactionInputWidget
from dailytrack.ui.transaction_model import TransactionTableModel
from dailytrack.ui.summary_card import SummaryCard, SummaryPanel
from dailytrack.ui.theme import (
    COLOR_INCOME, COLOR_EXPENSE,
    get_text_color_str, get_secondary_text_color,
    get_card_style, get_balance_color, get_type_color
)

__all__ = [
    # 窗口和组件
    "MainWindow",
    "TransactionInputWidget",
    "TransactionTableModel",
    "SummaryCard",
    "SummaryPanel",
    # 主题常量和函数
    "COLOR_INCOME",
    "COLOR_EXPENSE",
    "get_text_color_str",
    "get_secondary_text_color",
    "get_card_style",
    "get_balance_color",
    "get_type_color",
]
