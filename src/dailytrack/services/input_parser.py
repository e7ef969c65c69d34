"""快速记账输入解析模块

支持的输入格式（按顺序尝试，先匹配者优先）：
    "120 - coffee"   金额 + 短横线 + 描述
    "120 coffee"     金额 + 空白 + 描述
金额支持小数（"25.50 lunch"），不支持千分位、货币符号和正负号。

结构解析（parse_expense_input）与语义校验（validate_parsed_input）是两个独立步骤，
两步都通过才能生成交易。
"""
import math
import re
from dataclasses import dataclass
from typing import Final, List, Optional

from dailytrack.exceptions import ParseError
from dailytrack.settings import MAX_AMOUNT, MAX_DESCRIPTION_LENGTH

_NUMBER: Final = r"([0-9]+(?:\.[0-9]+)?)"
_DASH_PATTERN: Final = re.compile(rf"^{_NUMBER}\s*-\s*(.+)$")
_SPACE_PATTERN: Final = re.compile(rf"^{_NUMBER}\s+(.+)$")
_WHITESPACE: Final = re.compile(r"\s+")

INVALID_FORMAT_MESSAGE: Final = '输入格式不正确，请使用 "120 咖啡" 或 "120 - 咖啡" 的格式'

SUPPORTED_FORMATS: Final = (
    "120 - coffee",
    "120 coffee",
    "25.50 - lunch",
    "25.50 lunch",
    "100 groceries",
)


@dataclass(frozen=True)
class ParsedInput:
    """解析结果"""
    amount: float
    description: str


def _match(pattern: re.Pattern, text: str) -> Optional[ParsedInput]:
    match = pattern.match(text)
    if not match:
        return None
    amount = float(match.group(1))
    description = match.group(2).strip()
    if amount <= 0 or not description or description == "-":
        return None
    return ParsedInput(amount=amount, description=description)


def parse_expense_input(text: Optional[str]) -> Optional[ParsedInput]:
    """解析快速输入文本，无法匹配时返回 None"""
    if text is None or not text.strip():
        return None

    trimmed = text.strip()
    for pattern in (_DASH_PATTERN, _SPACE_PATTERN):
        result = _match(pattern, trimmed)
        if result is not None:
            return result
    return None


def validate_amount(amount: Optional[float]) -> Optional[str]:
    """校验金额，通过时返回 None"""
    if amount is None:
        return "请输入金额"
    if not math.isfinite(amount) or amount <= 0:
        return "金额必须大于0"
    if amount > MAX_AMOUNT:
        return f"金额过大（上限：{MAX_AMOUNT}）"
    return None


def validate_description(description: Optional[str]) -> Optional[str]:
    """校验描述，通过时返回 None"""
    if description is None or not description.strip():
        return "请输入描述"
    if len(description.strip()) > MAX_DESCRIPTION_LENGTH:
        return f"描述不能超过{MAX_DESCRIPTION_LENGTH}个字符"
    return None


def validate_parsed_input(parsed: Optional[ParsedInput]) -> List[str]:
    """对解析结果做语义校验，返回错误信息列表（空列表表示通过）"""
    if parsed is None:
        return [INVALID_FORMAT_MESSAGE]

    errors = []
    amount_error = validate_amount(parsed.amount)
    if amount_error:
        errors.append(amount_error)
    description_error = validate_description(parsed.description)
    if description_error:
        errors.append(description_error)
    return errors


def parse_and_validate(text: Optional[str]) -> ParsedInput:
    """解析并校验，失败时抛出 ParseError（携带第一条错误信息）"""
    parsed = parse_expense_input(text)
    errors = validate_parsed_input(parsed)
    if errors:
        raise ParseError(errors[0])
    return parsed


def is_valid_format(text: Optional[str]) -> bool:
    return parse_expense_input(text) is not None


def extract_amount(text: Optional[str]) -> Optional[float]:
    parsed = parse_expense_input(text)
    return parsed.amount if parsed else None


def extract_description(text: Optional[str]) -> Optional[str]:
    parsed = parse_expense_input(text)
    return parsed.description if parsed else None


def supported_formats() -> List[str]:
    return list(SUPPORTED_FORMATS)


def format_amount(amount: float) -> str:
    """整数金额不显示小数，否则保留两位小数"""
    if amount == round(amount):
        return str(int(amount))
    return f"{amount:.2f}"


def normalize_input(text: str) -> str:
    """去除首尾空白并合并连续空白"""
    return _WHITESPACE.sub(" ", text.strip())
