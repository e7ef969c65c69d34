"""
DailyTrack 测试公共夹具
"""
import os
import sys
import sqlite3
from datetime import datetime

import pytest

# Add the 'src' directory to sys.path
script_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.dirname(script_dir)
sys.path.insert(0, os.path.join(project_root, "src"))

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication

from dailytrack.db.database import Database
from dailytrack.services.money_provider import MoneyProvider


@pytest.fixture(scope="session", autouse=True)
def qt_app():
    """信号槽和界面组件需要一个 Qt 应用实例"""
    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "test_daily_track.db"


@pytest.fixture
def db(db_path):
    database = Database(db_path)
    yield database
    database.close()


@pytest.fixture
def provider(db):
    p = MoneyProvider(db)
    yield p
    p.close()


def millis(value: datetime) -> int:
    return round(value.timestamp() * 1000)


def create_legacy_db(path, rows, strict: bool = True) -> None:
    """创建 V1 版本的数据库（仅有 expenses 表）"""
    not_null = "NOT NULL" if strict else ""
    conn = sqlite3.connect(str(path))
    conn.execute(f"""
        CREATE TABLE expenses (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            amount REAL {not_null},
            description TEXT {not_null},
            timestamp INTEGER {not_null}
        )
    """)
    conn.execute("CREATE INDEX idx_expenses_timestamp ON expenses(timestamp)")
    conn.executemany(
        "INSERT INTO expenses (amount, description, timestamp) VALUES (?, ?, ?)",
        rows,
    )
    conn.commit()
    conn.close()
