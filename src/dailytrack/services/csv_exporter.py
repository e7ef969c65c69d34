"""CSV 导出模块

导出格式：
    表头 Date,Description,Amount
    每条支出一行，日期为 D-M-YY（日、月不补零，两位年份），金额截断为整数
"""
import csv
import io
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Final, Iterable, List, Optional, Sequence, Union

from dailytrack.models.expense import Expense
from dailytrack.models.transaction import Transaction
from dailytrack.settings import (
    DOWNLOADS_DIR, EXPORT_DIR, EXPORT_FILE_EXTENSION, EXPORT_FILE_PREFIX,
)

logger: Final = logging.getLogger(__name__)

ExportItem = Union[Transaction, Expense]

CSV_HEADER: Final = ["Date", "Description", "Amount"]

# 文件名中的月份固定使用英文，避免受系统 locale 影响
MONTH_NAMES: Final = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


@dataclass(frozen=True)
class CsvExportResult:
    """导出结果"""
    success: bool
    file_path: Optional[str] = None
    file_name: Optional[str] = None
    record_count: Optional[int] = None
    error_message: Optional[str] = None

    @classmethod
    def ok(cls, file_path: str, file_name: str, record_count: int) -> "CsvExportResult":
        return cls(success=True, file_path=file_path, file_name=file_name,
                   record_count=record_count)

    @classmethod
    def error(cls, message: str) -> "CsvExportResult":
        return cls(success=False, error_message=message)


@dataclass(frozen=True)
class DateRange:
    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def is_same_day(self) -> bool:
        return self.start.date() == self.end.date()

    @property
    def is_same_month(self) -> bool:
        return (self.start.year, self.start.month) == (self.end.year, self.end.month)


@dataclass(frozen=True)
class ExportStatistics:
    total_expenses: int
    total_amount: float
    date_range: Optional[DateRange]
    average_amount: float


def _expenses_only(items: Iterable[ExportItem]) -> List[ExportItem]:
    # Expense 固定为支出；Transaction 只导出支出类型
    return [item for item in items if not isinstance(item, Transaction) or item.is_expense]


def format_csv_date(value: Union[date, datetime]) -> str:
    """日期格式化为 D-M-YY，如 2024-01-05 -> 5-1-24"""
    return f"{value.day}-{value.month}-{value.year % 100:02d}"


def format_csv_amount(amount: float) -> str:
    """金额截断为整数（向零取整，不四舍五入）"""
    return str(int(amount))


def generate_csv_content(items: Iterable[ExportItem]) -> str:
    """生成 CSV 文本内容（仅包含支出）"""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for item in _expenses_only(items):
        writer.writerow([
            format_csv_date(item.timestamp),
            item.description,
            format_csv_amount(item.amount),
        ])
    return buffer.getvalue()


def monthly_file_name(year: int, month: int) -> str:
    return f"{EXPORT_FILE_PREFIX}{MONTH_NAMES[month - 1]}_{year}{EXPORT_FILE_EXTENSION}"


def generate_file_name(items: Sequence[ExportItem]) -> str:
    """根据记录的时间跨度生成文件名（同一天 > 同一月 > 日期区间）"""
    if not items:
        return f"{EXPORT_FILE_PREFIX}empty{EXPORT_FILE_EXTENSION}"

    timestamps = sorted(item.timestamp for item in items)
    span = DateRange(timestamps[0], timestamps[-1])

    if span.is_same_day:
        return f"{EXPORT_FILE_PREFIX}{span.start:%Y-%m-%d}{EXPORT_FILE_EXTENSION}"
    if span.is_same_month:
        return monthly_file_name(span.start.year, span.start.month)
    return (
        f"{EXPORT_FILE_PREFIX}{span.start:%Y-%m-%d}_to_{span.end:%Y-%m-%d}"
        f"{EXPORT_FILE_EXTENSION}"
    )


def range_file_name(start: date, end: date) -> str:
    """按查询区间（而非记录时间）生成文件名"""
    if start == end:
        return f"{EXPORT_FILE_PREFIX}{start:%Y-%m-%d}{EXPORT_FILE_EXTENSION}"
    return f"{EXPORT_FILE_PREFIX}{start:%Y-%m-%d}_to_{end:%Y-%m-%d}{EXPORT_FILE_EXTENSION}"


def get_export_directory() -> Path:
    """优先使用 ~/Downloads，不存在时使用应用数据目录下的 exports"""
    if DOWNLOADS_DIR.is_dir():
        return DOWNLOADS_DIR
    EXPORT_DIR.mkdir(parents=True, exist_ok=True)
    return EXPORT_DIR


def export_expenses(
    items: Sequence[ExportItem],
    file_name: Optional[str] = None,
    directory: Optional[Union[str, Path]] = None,
) -> CsvExportResult:
    """导出支出到 CSV 文件"""
    expenses = _expenses_only(items)
    if not expenses:
        return CsvExportResult.error("没有可导出的支出记录")

    name = file_name or generate_file_name(expenses)
    try:
        target_dir = Path(directory) if directory is not None else get_export_directory()
        path = target_dir / name
        path.write_text(generate_csv_content(expenses), encoding="utf-8")
    except OSError as e:
        logger.exception("写入导出文件失败")
        return CsvExportResult.error(f"导出失败: {e}")

    logger.info("已导出 %d 条支出到 %s", len(expenses), path)
    return CsvExportResult.ok(str(path), name, len(expenses))


def export_monthly_expenses(
    items: Sequence[ExportItem],
    year: int,
    month: int,
    directory: Optional[Union[str, Path]] = None,
) -> CsvExportResult:
    return export_expenses(items, file_name=monthly_file_name(year, month), directory=directory)


def validate_expenses_for_export(items: Sequence[ExportItem]) -> List[str]:
    """导出前校验，返回错误信息列表"""
    if not items:
        return ["没有可导出的支出记录"]

    errors = []
    for index, item in enumerate(items, start=1):
        item_errors = item.validate()
        if item_errors:
            errors.append(f"第 {index} 条记录: {item_errors[0]}")
    return errors


def get_export_statistics(items: Sequence[ExportItem]) -> ExportStatistics:
    if not items:
        return ExportStatistics(total_expenses=0, total_amount=0.0,
                                date_range=None, average_amount=0.0)

    timestamps = sorted(item.timestamp for item in items)
    total = sum(item.amount for item in items)
    return ExportStatistics(
        total_expenses=len(items),
        total_amount=total,
        date_range=DateRange(timestamps[0], timestamps[-1]),
        average_amount=total / len(items),
    )
