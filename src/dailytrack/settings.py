"""应用程序配置模块"""
import os
from pathlib import Path
from typing import Final, Dict

# ==================== 路径配置 ====================
DATA_DIR: Final = Path(
    os.environ.get("DAILYTRACK_DATA_DIR") or Path.home() / ".dailytrack"
).expanduser()
DB_PATH: Final = DATA_DIR / "daily_track.db"
EXPORT_DIR: Final = DATA_DIR / "exports"
DOWNLOADS_DIR: Final = Path.home() / "Downloads"

# ==================== 应用信息 ====================
APP_NAME: Final = "DailyTrack"
VERSION: Final = "2.0.0"

# ==================== 日志配置 ====================
LOG_LEVEL: Final = os.environ.get("DAILYTRACK_LOG_LEVEL", "INFO").upper()
LOG_FORMAT: Final = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# ==================== 数据库配置 ====================
DB_SCHEMA_VERSION: Final = 2  # V2: expenses 表迁移为通用 transactions 表

TRANSACTIONS_TABLE: Final = "transactions"
LEGACY_EXPENSES_TABLE: Final = "expenses"
IDX_TRANSACTIONS_TIMESTAMP: Final = "idx_transactions_timestamp"
IDX_TRANSACTIONS_TYPE: Final = "idx_transactions_type"
IDX_LEGACY_EXPENSES_TIMESTAMP: Final = "idx_expenses_timestamp"

# ==================== 货币设置 ====================
CURRENCY_SYMBOL: Final = "₹"

# ==================== 业务规则 ====================
MAX_AMOUNT: Final = 999_999  # 金额上限
MAX_DESCRIPTION_LENGTH: Final = 100  # 描述长度上限（去除首尾空白后）

# ==================== 导出设置 ====================
EXPORT_FILE_PREFIX: Final = "DailyTrack_"
EXPORT_FILE_EXTENSION: Final = ".csv"

# ==================== 类型映射 ====================
TYPE_NAMES: Final[Dict[str, str]] = {
    "income": "收入",
    "expense": "支出",
}

CATEGORY_NAMES: Final[Dict[str, str]] = {
    "salary": "工资",
    "freelance": "自由职业",
    "business": "经营",
    "investment": "投资",
    "gift": "礼金",
    "other": "其他收入",
    "food": "餐饮",
    "transport": "交通",
    "shopping": "购物",
    "bills": "账单",
    "entertainment": "娱乐",
    "health": "医疗",
    "education": "教育",
    "misc": "杂项",
}

CATEGORY_ICONS: Final[Dict[str, str]] = {
    "salary": "💼",
    "freelance": "💻",
    "business": "📈",
    "investment": "💰",
    "gift": "🎁",
    "other": "📝",
    "food": "🍽️",
    "transport": "🚗",
    "shopping": "🛍️",
    "bills": "📄",
    "entertainment": "🎬",
    "health": "💊",
    "education": "📚",
    "misc": "📦",
}


# ==================== 工具函数 ====================
def format_money(amount: float) -> str:
    """统一的金额格式化函数，返回货币格式（如 ₹1,234.56）"""
    return f"{CURRENCY_SYMBOL}{amount:,.2f}"
