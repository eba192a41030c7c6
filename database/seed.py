"""
Database seed data.
Demo tenant for fresh installations.
"""


def seed_database(db):
    """Insert a demo restaurant with services, shifts, tables and merge rules."""

    # 1. Restaurant and its settings
    cursor = db.execute('''
        INSERT INTO restaurants (name, slug)
        VALUES (?, ?)
    ''', ('Demo Bistro', 'demo-bistro'))
    restaurant_id = cursor.lastrowid

    db.execute('''
        INSERT INTO restaurant_settings (restaurant_id) VALUES (?)
    ''', (restaurant_id,))

    # 2. Services
    services_data = [
        ('Lunch', 'lunch', '12:00', '14:30'),
        ('Dinner', 'dinner', '19:00', '22:30'),
    ]

    service_ids = {}
    for name, service_type, start_time, end_time in services_data:
        cursor = db.execute('''
            INSERT INTO services (restaurant_id, name, type, start_time, end_time)
            VALUES (?, ?, ?, ?, ?)
        ''', (restaurant_id, name, service_type, start_time, end_time))
        service_ids[service_type] = cursor.lastrowid

    # 3. Dinner shifts
    shifts_data = [
        ('First seating', '19:00', '20:45', 1),
        ('Second seating', '21:00', '22:30', 2),
    ]

    for name, start_time, end_time, sort_order in shifts_data:
        db.execute('''
            INSERT INTO shifts (service_id, name, start_time, end_time, sort_order)
            VALUES (?, ?, ?, ?, ?)
        ''', (service_ids['dinner'], name, start_time, end_time, sort_order))

    # 4. Tables (number, min, max, x, y, shape)
    tables_data = [
        ('1', 1, 2, 80, 80, 'circle'),
        ('2', 1, 2, 200, 80, 'circle'),
        ('3', 2, 4, 80, 220, 'rectangle'),
        ('4', 2, 4, 200, 220, 'rectangle'),
        ('5', 4, 6, 360, 150, 'rectangle'),
        ('6', 6, 8, 520, 150, 'square'),
    ]

    table_ids = {}
    for number, min_capacity, max_capacity, x, y, shape in tables_data:
        cursor = db.execute('''
            INSERT INTO tables (restaurant_id, table_number, min_capacity, max_capacity,
                                position_x, position_y, shape)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        ''', (restaurant_id, number, min_capacity, max_capacity, x, y, shape))
        table_ids[number] = cursor.lastrowid

    # 5. Neighbouring tables that may be pushed together
    for a, b in [('1', '2'), ('3', '4'), ('5', '6')]:
        db.execute('''
            INSERT INTO table_merge_rules (restaurant_id, table_a_id, table_b_id)
            VALUES (?, ?, ?)
        ''', (restaurant_id, table_ids[a], table_ids[b]))
