"""界面配色：收支语义色 + 跟随系统调色板的文字/卡片样式"""
from typing import Final

from PySide6.QtGui import QColor, QPalette
from PySide6.QtWidgets import QApplication

from dailytrack.models.transaction import TransactionType

COLOR_INCOME: Final = "#2e7d32"
COLOR_EXPENSE: Final = "#c62828"

SECONDARY_TEXT_ALPHA: Final = 180


def _palette_color(role: QPalette.ColorRole) -> QColor:
    return QApplication.palette().color(role)


def get_text_color_str() -> str:
    return _palette_color(QPalette.WindowText).name()


def get_secondary_text_color() -> str:
    color = _palette_color(QPalette.WindowText)
    color.setAlpha(SECONDARY_TEXT_ALPHA)
    return color.name(QColor.NameFormat.HexArgb)


def get_card_style() -> str:
    """汇总卡片样式（背景、边框随系统主题变化）"""
    return (
        f"SummaryCard {{"
        f" background-color: {_palette_color(QPalette.Base).name()};"
        f" border: 1px solid {_palette_color(QPalette.Mid).name()};"
        f" border-radius: 8px; }}"
    )


def get_type_color(tx_type: TransactionType) -> str:
    return COLOR_INCOME if tx_type == TransactionType.INCOME else COLOR_EXPENSE


def get_balance_color(balance: float) -> str:
    # 结余为 0 时按收入色显示
    return COLOR_INCOME if balance >= 0 else COLOR_EXPENSE
