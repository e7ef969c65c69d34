"""
数据库访问层测试：CRUD、时间范围查询、汇总、连接生命周期、异常封装
"""
import sqlite3
from datetime import date, datetime, timedelta

import pytest

from dailytrack.db.database import Database, end_of_day, month_range, start_of_day
from dailytrack.exceptions import InvalidArgumentError, NotFoundError, StoreError
from dailytrack.models.transaction import Transaction, TransactionCategory, TransactionType


def make_tx(amount, ts, tx_type=TransactionType.EXPENSE,
            category=TransactionCategory.FOOD, description="test"):
    return Transaction(amount=amount, description=description, timestamp=ts,
                       type=tx_type, category=category)


class TestPeriodHelpers:

    def test_day_bounds(self):
        d = date(2024, 1, 15)
        assert start_of_day(d) == datetime(2024, 1, 15)
        assert end_of_day(d) == datetime(2024, 1, 15, 23, 59, 59, 999000)

    @pytest.mark.parametrize("year, month, last_day", [
        (2024, 2, 29), (2023, 2, 28), (2024, 4, 30), (2024, 12, 31),
    ])
    def test_month_range(self, year, month, last_day):
        start, end = month_range(year, month)
        assert start == datetime(year, month, 1)
        assert end == datetime(year, month, last_day, 23, 59, 59, 999000)


class TestTransactionCrud:

    def test_insert_assigns_id(self, db):
        tx = make_tx(12.5, datetime(2024, 1, 10, 12, 0))
        tx_id = db.insert_transaction(tx)
        assert tx_id > 0
        assert tx.id == tx_id
        assert db.get_transaction_by_id(tx_id) == tx

    def test_ids_unique(self, db):
        ids = {db.insert_transaction(make_tx(1, datetime(2024, 1, 10))) for _ in range(5)}
        assert len(ids) == 5

    def test_get_all_ordered_desc(self, db):
        for hour in (8, 20, 12):
            db.insert_transaction(make_tx(hour, datetime(2024, 1, 10, hour)))
        hours = [t.timestamp.hour for t in db.get_all_transactions()]
        assert hours == [20, 12, 8]

    def test_update_replaces_all_fields(self, db):
        tx = make_tx(10, datetime(2024, 1, 10, 9))
        db.insert_transaction(tx)

        updated = Transaction(
            id=tx.id, amount=99.9, description="salary",
            timestamp=datetime(2024, 2, 1, 10), type=TransactionType.INCOME,
            category=TransactionCategory.SALARY,
        )
        db.update_transaction(updated)
        assert db.get_transaction_by_id(tx.id) == updated

    def test_update_without_id(self, db):
        with pytest.raises(InvalidArgumentError):
            db.update_transaction(make_tx(10, datetime(2024, 1, 10)))

    def test_update_missing_id(self, db):
        tx = make_tx(10, datetime(2024, 1, 10))
        tx.id = 12345
        with pytest.raises(NotFoundError):
            db.update_transaction(tx)

    def test_delete_then_get(self, db):
        ts = datetime(2024, 1, 10, 15)
        tx = make_tx(10, ts)
        db.insert_transaction(tx)

        db.delete_transaction(tx.id)
        remaining = db.get_transactions_by_date_range(ts - timedelta(hours=1), ts + timedelta(hours=1))
        assert all(t.id != tx.id for t in remaining)
        assert db.get_transaction_by_id(tx.id) is None

        with pytest.raises(NotFoundError):
            db.delete_transaction(tx.id)

    def test_not_found_is_store_error(self, db):
        with pytest.raises(StoreError):
            db.delete_transaction(1)

    def test_delete_all(self, db):
        for i in range(3):
            db.insert_transaction(make_tx(i + 1, datetime(2024, 1, 10)))
        db.delete_all_transactions()
        assert db.get_all_transactions() == []


class TestRangeQueries:

    def test_end_of_day_inclusive(self, db):
        d = date(2024, 1, 15)
        tx = make_tx(5, datetime(2024, 1, 15, 23, 59, 59, 999000))
        db.insert_transaction(tx)

        assert [t.id for t in db.get_transactions_for_date(d)] == [tx.id]
        assert db.get_transactions_for_date(d + timedelta(days=1)) == []

    def test_start_of_day_inclusive(self, db):
        tx = make_tx(5, datetime(2024, 1, 16, 0, 0, 0))
        db.insert_transaction(tx)
        assert [t.id for t in db.get_transactions_for_date(date(2024, 1, 16))] == [tx.id]
        assert db.get_transactions_for_date(date(2024, 1, 15)) == []

    def test_range_ordered_desc(self, db):
        for day in (3, 1, 2):
            db.insert_transaction(make_tx(day, datetime(2024, 1, day, 12)))
        result = db.get_transactions_by_date_range(datetime(2024, 1, 1), datetime(2024, 1, 3, 23))
        assert [t.timestamp.day for t in result] == [3, 2, 1]

    def test_range_accepts_plain_dates(self, db):
        first = make_tx(1, datetime(2024, 1, 10, 0, 0))
        last = make_tx(2, datetime(2024, 1, 12, 23, 59, 59, 999000))
        outside = make_tx(3, datetime(2024, 1, 13, 0, 0))
        for tx in (first, last, outside):
            db.insert_transaction(tx)

        result = db.get_transactions_by_date_range(date(2024, 1, 10), date(2024, 1, 12))
        assert [t.id for t in result] == [last.id, first.id]

    def test_month_includes_last_instant(self, db):
        inside = make_tx(1, datetime(2024, 2, 29, 23, 59, 59, 999000))
        outside = make_tx(2, datetime(2024, 3, 1, 0, 0))
        db.insert_transaction(inside)
        db.insert_transaction(outside)

        assert [t.id for t in db.get_transactions_for_month(2024, 2)] == [inside.id]
        assert [t.id for t in db.get_transactions_for_month(2024, 3)] == [outside.id]

    def test_count_for_date(self, db):
        for _ in range(3):
            db.insert_transaction(make_tx(1, datetime(2024, 1, 10, 10)))
        assert db.get_transaction_count_for_date(date(2024, 1, 10)) == 3

    def test_legacy_expense_view(self, db):
        db.insert_transaction(make_tx(100, datetime(2024, 1, 10, 9), TransactionType.INCOME,
                                      TransactionCategory.SALARY))
        db.insert_transaction(make_tx(40, datetime(2024, 1, 10, 10)))

        expenses = db.get_expenses_for_date(date(2024, 1, 10))
        assert [e.amount for e in expenses] == [40]
        assert [e.amount for e in db.get_expenses_for_month(2024, 1)] == [40]


class TestAggregation:

    def _seed(self, db):
        db.insert_transaction(make_tx(100, datetime(2024, 1, 15, 9), TransactionType.INCOME,
                                      TransactionCategory.SALARY))
        db.insert_transaction(make_tx(40, datetime(2024, 1, 15, 12), TransactionType.EXPENSE,
                                      TransactionCategory.FOOD))
        db.insert_transaction(make_tx(60, datetime(2024, 1, 20, 18), TransactionType.EXPENSE,
                                      TransactionCategory.BILLS))

    def test_monthly_sums(self, db):
        self._seed(db)
        assert db.sum_income_for_month(2024, 1) == 100
        assert db.sum_expense_for_month(2024, 1) == 100
        assert db.sum_income_for_month(2024, 1) - db.sum_expense_for_month(2024, 1) == 0

    def test_daily_sums(self, db):
        self._seed(db)
        assert db.sum_income_for_date(date(2024, 1, 15)) == 100
        assert db.sum_expense_for_date(date(2024, 1, 15)) == 40
        assert db.sum_expense_for_date(date(2024, 1, 20)) == 60
        assert db.sum_income_for_date(date(2024, 1, 20)) == 0

    def test_empty_sums(self, db):
        assert db.sum_income_for_month(2024, 1) == 0.0
        assert db.sum_expense_for_date(date(2024, 1, 1)) == 0.0

    def test_current_balance_uses_current_month(self, db):
        now = datetime.now()
        db.insert_transaction(make_tx(500, now, TransactionType.INCOME, TransactionCategory.SALARY))
        db.insert_transaction(make_tx(120, now, TransactionType.EXPENSE))
        # 上一年的数据不计入
        db.insert_transaction(make_tx(999, now.replace(year=now.year - 1, day=1)))
        assert db.get_current_balance() == pytest.approx(380)


class TestConnectionLifecycle:

    def test_lazy_open(self, db_path):
        db = Database(db_path)
        assert not db.is_open
        db.init_database()
        assert db.is_open
        db.close()

    def test_reopen_after_close(self, db):
        tx = make_tx(10, datetime(2024, 1, 10))
        db.insert_transaction(tx)
        db.close()
        assert not db.is_open

        assert db.get_transaction_by_id(tx.id) == tx
        assert db.is_open

    def test_persistence_across_instances(self, db_path):
        with Database(db_path) as first:
            first.insert_transaction(make_tx(10, datetime(2024, 1, 10)))
        with Database(db_path) as second:
            assert len(second.get_all_transactions()) == 1

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "app.db"
        with Database(path) as db:
            db.init_database()
        assert path.exists()


class TestErrorWrapping:

    def test_sqlite_error_wrapped(self, db):
        db.conn.execute("DROP TABLE transactions")
        db.conn.commit()
        with pytest.raises(StoreError) as exc_info:
            db.get_all_transactions()
        assert isinstance(exc_info.value.__cause__, sqlite3.Error)
        assert not isinstance(exc_info.value, sqlite3.Error)

    def test_insert_failure_wrapped(self, db):
        db.conn.execute("DROP TABLE transactions")
        db.conn.commit()
        with pytest.raises(StoreError, match="新增交易失败"):
            db.insert_transaction(make_tx(1, datetime(2024, 1, 1)))

    def test_unknown_ordinal_wrapped(self, db):
        db.conn.execute(
            "INSERT INTO transactions (amount, description, timestamp, type, category) "
            "VALUES (1, 'x', 0, 1, 42)"
        )
        db.conn.commit()
        with pytest.raises(StoreError):
            db.get_all_transactions()

    def test_unopenable_path(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        db = Database(blocker / "app.db")
        with pytest.raises(StoreError):
            db.init_database()
