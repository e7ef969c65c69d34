"""
界面配色测试
"""
from dailytrack.models.transaction import TransactionType
from dailytrack.ui import theme


def test_type_colors():
    assert theme.get_type_color(TransactionType.INCOME) == theme.COLOR_INCOME
    assert theme.get_type_color(TransactionType.EXPENSE) == theme.COLOR_EXPENSE


def test_balance_colors():
    assert theme.get_balance_color(0) == theme.COLOR_INCOME
    assert theme.get_balance_color(12.5) == theme.COLOR_INCOME
    assert theme.get_balance_color(-0.01) == theme.COLOR_EXPENSE


def test_palette_styles():
    assert theme.get_text_color_str().startswith("#")
    secondary = theme.get_secondary_text_color()
    assert secondary.startswith("#") and len(secondary) == 9
    assert "SummaryCard" in theme.get_card_style()
