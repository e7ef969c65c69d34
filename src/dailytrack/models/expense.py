"""旧版支出数据模型（迁移前的 expenses 表视图）"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from dailytrack.models.transaction import (
    Transaction, TransactionCategory, TransactionType,
    validate_amount, validate_description,
)


@dataclass(slots=True)
class Expense:
    """支出数据模型，固定对应 (支出, 杂项) 的交易"""
    amount: float = 0.0
    description: str = ""
    timestamp: datetime = field(default_factory=datetime.now)
    id: Optional[int] = None

    def validate(self) -> List[str]:
        errors = []
        for error in (validate_amount(self.amount), validate_description(self.description)):
            if error:
                errors.append(error)
        return errors

    @property
    def is_valid(self) -> bool:
        return not self.validate()

    def to_transaction(self) -> Transaction:
        return Transaction(
            id=self.id,
            amount=self.amount,
            description=self.description,
            timestamp=self.timestamp,
            type=TransactionType.EXPENSE,
            category=TransactionCategory.MISC,
        )

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "Expense":
        return cls(
            id=transaction.id,
            amount=transaction.amount,
            description=transaction.description,
            timestamp=transaction.timestamp,
        )
