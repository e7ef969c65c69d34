import math
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import IntEnum
from typing import List, Optional, Tuple

from dailytrack.settings import MAX_DESCRIPTION_LENGTH


class TransactionType(IntEnum):
    """交易类型（序号写入数据库，不可调整）"""
    INCOME = 0
    EXPENSE = 1

    @property
    def display_name(self) -> str:
        from dailytrack.settings import TYPE_NAMES
        return TYPE_NAMES[self.name.lower()]


class TransactionCategory(IntEnum):
    """交易分类（序号写入数据库，不可调整）"""
    # 收入分类
    SALARY = 0
    FREELANCE = 1
    BUSINESS = 2
    INVESTMENT = 3
    GIFT = 4
    OTHER = 5
    # 支出分类
    FOOD = 6
    TRANSPORT = 7
    SHOPPING = 8
    BILLS = 9
    ENTERTAINMENT = 10
    HEALTH = 11
    EDUCATION = 12
    MISC = 13

    @property
    def display_name(self) -> str:
        from dailytrack.settings import CATEGORY_NAMES
        return CATEGORY_NAMES[self.name.lower()]

    @property
    def icon(self) -> str:
        from dailytrack.settings import CATEGORY_ICONS
        return CATEGORY_ICONS[self.name.lower()]

    @property
    def is_income_category(self) -> bool:
        return self in _INCOME_CATEGORIES

    @classmethod
    def income_categories(cls) -> List["TransactionCategory"]:
        return [c for c in cls if c.is_income_category]

    @classmethod
    def expense_categories(cls) -> List["TransactionCategory"]:
        return [c for c in cls if not c.is_income_category]

    @classmethod
    def for_type(cls, tx_type: TransactionType) -> List["TransactionCategory"]:
        """获取某交易类型可用的分类列表"""
        if tx_type == TransactionType.INCOME:
            return cls.income_categories()
        return cls.expense_categories()


_INCOME_CATEGORIES = frozenset({
    TransactionCategory.SALARY,
    TransactionCategory.FREELANCE,
    TransactionCategory.BUSINESS,
    TransactionCategory.INVESTMENT,
    TransactionCategory.GIFT,
    TransactionCategory.OTHER,
})


def to_millis(value: datetime) -> int:
    """datetime -> 毫秒时间戳（本地时间）"""
    return round(value.timestamp() * 1000)


def from_millis(millis: int) -> datetime:
    """毫秒时间戳 -> datetime（本地时间）"""
    seconds, ms = divmod(int(millis), 1000)
    return datetime.fromtimestamp(seconds).replace(microsecond=ms * 1000)


def _truncate_to_millis(value: datetime) -> datetime:
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def validate_amount(amount: Optional[float]) -> Optional[str]:
    if amount is None or not math.isfinite(amount) or amount <= 0:
        return "金额必须大于0"
    return None


def validate_description(description: Optional[str]) -> Optional[str]:
    if description is None or not description.strip():
        return "描述不能为空"
    if len(description.strip()) > MAX_DESCRIPTION_LENGTH:
        return f"描述不能超过{MAX_DESCRIPTION_LENGTH}个字符"
    return None


@dataclass(slots=True)
class Transaction:
    """收支交易数据模型"""
    amount: float = 0.0
    description: str = ""
    timestamp: datetime = field(default_factory=datetime.now)
    type: TransactionType = TransactionType.EXPENSE
    category: TransactionCategory = TransactionCategory.MISC
    id: Optional[int] = None

    def __post_init__(self) -> None:
        # 存储精度为毫秒
        self.timestamp = _truncate_to_millis(self.timestamp)
        self.type = TransactionType(self.type)
        self.category = TransactionCategory(self.category)

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE

    @property
    def is_valid(self) -> bool:
        return not self.validate()

    def validate(self) -> List[str]:
        """校验交易数据，按规则顺序返回错误信息列表"""
        errors = []
        amount_error = validate_amount(self.amount)
        if amount_error:
            errors.append(amount_error)
        description_error = validate_description(self.description)
        if description_error:
            errors.append(description_error)
        return errors

    def copy_with(self, **changes) -> "Transaction":
        return replace(self, **changes)

    def to_row(self) -> Tuple:
        """转换为数据库行 (id, amount, description, timestamp, type, category)"""
        return (
            self.id,
            float(self.amount),
            self.description,
            to_millis(self.timestamp),
            int(self.type),
            int(self.category),
        )

    @classmethod
    def from_row(cls, row: Tuple) -> "Transaction":
        """从数据库行创建Transaction对象"""
        return cls(
            id=row[0],
            amount=float(row[1]),
            description=row[2],
            timestamp=from_millis(row[3]),
            type=TransactionType(row[4]),
            category=TransactionCategory(row[5]),
        )
