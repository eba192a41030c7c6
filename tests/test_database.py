"""
Database tests.
Tests schema creation, seed data and the uniqueness guards.
"""

import sqlite3

import pytest

from database import get_db
from conftest import TEST_DATE


def _insert_reservation(db, restaurant_id, service_id, table_id=None, link_id=None,
                        shift_id=None, status='confirmed'):
    db.execute('''
        INSERT INTO reservations
        (restaurant_id, reservation_date, service_id, shift_id, reservation_time,
         customer_name, party_size, table_id, table_link_id, status)
        VALUES (?, ?, ?, ?, '20:00', 'Raw Guest', 2, ?, ?, ?)
    ''', (restaurant_id, TEST_DATE, service_id, shift_id, table_id, link_id, status))


class TestSchema:

    def test_tables_exist(self, app):
        cursor = get_db().execute("SELECT name FROM sqlite_master WHERE type='table'")
        tables = {row['name'] for row in cursor.fetchall()}

        assert tables >= {
            'restaurants', 'restaurant_settings', 'services', 'shifts', 'tables',
            'table_merge_rules', 'table_links', 'reservations', 'reservation_status_history',
        }

    def test_pragmas(self, app):
        db = get_db()
        assert db.execute('PRAGMA foreign_keys').fetchone()[0] == 1
        assert db.execute('PRAGMA journal_mode').fetchone()[0] == 'wal'

    def test_dates_stay_strings(self, bistro):
        from conftest import make_reservation

        make_reservation(bistro)
        row = get_db().execute('SELECT reservation_date, created_at FROM reservations').fetchone()

        assert isinstance(row['reservation_date'], str)
        assert isinstance(row['created_at'], str)


class TestSeedData:

    def test_demo_restaurant(self, app):
        db = get_db()

        restaurant = db.execute("SELECT * FROM restaurants WHERE slug = 'demo-bistro'").fetchone()
        assert restaurant is not None

        counts = {
            'services': 'SELECT COUNT(*) FROM services WHERE restaurant_id = ?',
            'tables': 'SELECT COUNT(*) FROM tables WHERE restaurant_id = ?',
            'rules': 'SELECT COUNT(*) FROM table_merge_rules WHERE restaurant_id = ?',
            'settings': 'SELECT COUNT(*) FROM restaurant_settings WHERE restaurant_id = ?',
        }
        totals = {key: db.execute(sql, (restaurant['id'],)).fetchone()[0]
                  for key, sql in counts.items()}

        assert totals == {'services': 2, 'tables': 6, 'rules': 3, 'settings': 1}

    def test_init_without_seed(self, app):
        from database import init_db

        init_db(seed=False)

        assert get_db().execute('SELECT COUNT(*) FROM restaurants').fetchone()[0] == 0


class TestUniqueGuards:
    """Indexes that back the application-level conflict checks."""

    def test_merge_pair_is_unordered(self, bistro):
        db = get_db()
        a, b = bistro['table_a']['id'], bistro['table_b']['id']

        db.execute('INSERT INTO table_merge_rules (restaurant_id, table_a_id, table_b_id) '
                   'VALUES (?, ?, ?)', (bistro['restaurant_id'], a, b))
        with pytest.raises(sqlite3.IntegrityError):
            db.execute('INSERT INTO table_merge_rules (restaurant_id, table_a_id, table_b_id) '
                       'VALUES (?, ?, ?)', (bistro['restaurant_id'], b, a))
        db.rollback()

    def test_one_live_reservation_per_table(self, bistro):
        db = get_db()
        args = (bistro['restaurant_id'], bistro['dinner_id'], bistro['table_a']['id'])

        _insert_reservation(db, *args)
        with pytest.raises(sqlite3.IntegrityError):
            _insert_reservation(db, *args)
        db.rollback()

    def test_released_reservations_do_not_count(self, bistro):
        db = get_db()
        args = (bistro['restaurant_id'], bistro['dinner_id'], bistro['table_a']['id'])

        _insert_reservation(db, *args, status='cancelled')
        _insert_reservation(db, *args, status='no_show')
        _insert_reservation(db, *args)
        db.commit()

        assert db.execute('SELECT COUNT(*) FROM reservations').fetchone()[0] == 3

    def test_table_in_one_link_per_context(self, bistro):
        from models.table import create_table

        db = get_db()
        table_c = create_table(bistro['restaurant_id'], 'C')
        insert = '''
            INSERT INTO table_links
            (restaurant_id, primary_table_id, secondary_table_id, link_date,
             service_id, combined_capacity)
            VALUES (?, ?, ?, ?, ?, 10)
        '''

        db.execute(insert, (bistro['restaurant_id'], bistro['table_a']['id'],
                            bistro['table_b']['id'], TEST_DATE, bistro['dinner_id']))
        with pytest.raises(sqlite3.IntegrityError):
            db.execute(insert, (bistro['restaurant_id'], table_c['id'],
                                bistro['table_b']['id'], TEST_DATE, bistro['dinner_id']))
        db.rollback()

    def test_table_numbers_unique_per_restaurant(self, bistro):
        db = get_db()

        with pytest.raises(sqlite3.IntegrityError):
            db.execute('INSERT INTO tables (restaurant_id, table_number) VALUES (?, ?)',
                       (bistro['restaurant_id'], 'A'))
        db.rollback()
