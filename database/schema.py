"""
Database schema definitions.
Table creation, indexes, and structure management.
"""

RELEASING_STATUSES = ('cancelled', 'no_show')


def drop_tables(db):
    """Drop all existing tables."""
    # Disable foreign key constraints before dropping
    db.execute('PRAGMA foreign_keys = OFF')

    tables = [
        'reservation_status_history',
        'reservations',
        'table_links',
        'table_merge_rules',
        'tables',
        'shifts',
        'services',
        'restaurant_settings',
        'restaurants',
    ]

    for table in tables:
        db.execute(f'DROP TABLE IF EXISTS {table}')

    # Re-enable foreign key constraints
    db.execute('PRAGMA foreign_keys = ON')


def create_tables(db):
    """Create all database tables."""

    # 1. Tenants
    db.execute('''
        CREATE TABLE restaurants (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            slug TEXT UNIQUE NOT NULL,
            logo_url TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    db.execute('''
        CREATE TABLE restaurant_settings (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            restaurant_id INTEGER UNIQUE NOT NULL REFERENCES restaurants(id) ON DELETE CASCADE,
            module_dashboard INTEGER DEFAULT 1,
            module_floor_plan INTEGER DEFAULT 1,
            module_planning INTEGER DEFAULT 1,
            module_reservations INTEGER DEFAULT 1,
            enable_table_merge INTEGER DEFAULT 1,
            link_requires_merge_rule INTEGER DEFAULT 1,
            default_reservation_duration INTEGER DEFAULT 90 CHECK (default_reservation_duration > 0),
            max_party_size INTEGER DEFAULT 20 CHECK (max_party_size > 0),
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # 2. Services and shifts
    db.execute('''
        CREATE TABLE services (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            restaurant_id INTEGER NOT NULL REFERENCES restaurants(id) ON DELETE CASCADE,
            name TEXT NOT NULL,
            type TEXT NOT NULL CHECK (type IN ('lunch', 'dinner')),
            start_time TEXT NOT NULL,
            end_time TEXT NOT NULL,
            is_active INTEGER DEFAULT 1,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    db.execute('''
        CREATE TABLE shifts (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            service_id INTEGER NOT NULL REFERENCES services(id) ON DELETE CASCADE,
            name TEXT NOT NULL,
            start_time TEXT NOT NULL,
            end_time TEXT NOT NULL,
            max_covers INTEGER,
            sort_order INTEGER DEFAULT 0,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # 3. Floor
    db.execute('''
        CREATE TABLE tables (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            restaurant_id INTEGER NOT NULL REFERENCES restaurants(id) ON DELETE CASCADE,
            table_number TEXT NOT NULL,
            min_capacity INTEGER NOT NULL DEFAULT 1 CHECK (min_capacity > 0),
            max_capacity INTEGER NOT NULL DEFAULT 4 CHECK (max_capacity >= min_capacity),
            position_x REAL DEFAULT 100,
            position_y REAL DEFAULT 100,
            width REAL DEFAULT 80,
            height REAL DEFAULT 80,
            shape TEXT DEFAULT 'rectangle' CHECK (shape IN ('rectangle', 'circle', 'square')),
            is_active INTEGER DEFAULT 1,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    db.execute('''
        CREATE TABLE table_merge_rules (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            restaurant_id INTEGER NOT NULL REFERENCES restaurants(id) ON DELETE CASCADE,
            table_a_id INTEGER NOT NULL REFERENCES tables(id) ON DELETE CASCADE,
            table_b_id INTEGER NOT NULL REFERENCES tables(id) ON DELETE CASCADE,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            CHECK (table_a_id != table_b_id)
        )
    ''')

    db.execute('''
        CREATE TABLE table_links (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            restaurant_id INTEGER NOT NULL REFERENCES restaurants(id) ON DELETE CASCADE,
            primary_table_id INTEGER NOT NULL REFERENCES tables(id),
            secondary_table_id INTEGER NOT NULL REFERENCES tables(id),
            link_date DATE NOT NULL,
            service_id INTEGER NOT NULL REFERENCES services(id),
            shift_id INTEGER REFERENCES shifts(id),
            combined_capacity INTEGER NOT NULL,
            created_by TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            CHECK (primary_table_id != secondary_table_id)
        )
    ''')

    # 4. Reservations
    db.execute('''
        CREATE TABLE reservations (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            restaurant_id INTEGER NOT NULL REFERENCES restaurants(id) ON DELETE CASCADE,
            reservation_date DATE NOT NULL,
            service_id INTEGER NOT NULL REFERENCES services(id),
            shift_id INTEGER REFERENCES shifts(id),
            reservation_time TEXT NOT NULL,
            customer_name TEXT NOT NULL,
            customer_phone TEXT,
            customer_email TEXT,
            party_size INTEGER NOT NULL CHECK (party_size > 0),
            table_id INTEGER REFERENCES tables(id) ON DELETE SET NULL,
            table_link_id INTEGER REFERENCES table_links(id) ON DELETE SET NULL,
            status TEXT NOT NULL DEFAULT 'confirmed'
                CHECK (status IN ('confirmed', 'seated', 'completed', 'cancelled', 'no_show')),
            source TEXT NOT NULL DEFAULT 'manual'
                CHECK (source IN ('manual', 'online', 'voice', 'walk_in')),
            notes TEXT,
            internal_notes TEXT,
            duration_minutes INTEGER NOT NULL DEFAULT 90 CHECK (duration_minutes > 0),
            created_by TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            CHECK (table_id IS NULL OR table_link_id IS NULL)
        )
    ''')

    db.execute('''
        CREATE TABLE reservation_status_history (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            reservation_id INTEGER NOT NULL REFERENCES reservations(id) ON DELETE CASCADE,
            old_status TEXT,
            new_status TEXT NOT NULL,
            changed_by TEXT,
            notes TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')


def create_indexes(db):
    """Create indexes, including the uniqueness guards against double-booking."""
    releasing = ', '.join(f"'{status}'" for status in RELEASING_STATUSES)

    statements = [
        # Tenant lookups
        'CREATE INDEX idx_services_restaurant ON services(restaurant_id)',
        'CREATE INDEX idx_shifts_service ON shifts(service_id)',
        'CREATE INDEX idx_tables_restaurant ON tables(restaurant_id, is_active)',
        'CREATE UNIQUE INDEX uq_tables_number ON tables(restaurant_id, table_number)',
        'CREATE INDEX idx_merge_rules_restaurant ON table_merge_rules(restaurant_id)',
        # Unordered pair uniqueness
        '''CREATE UNIQUE INDEX uq_merge_rules_pair ON table_merge_rules(
               MIN(table_a_id, table_b_id), MAX(table_a_id, table_b_id))''',

        # Context lookups
        '''CREATE INDEX idx_links_context
           ON table_links(restaurant_id, link_date, service_id, shift_id)''',
        '''CREATE INDEX idx_reservations_context
           ON reservations(restaurant_id, reservation_date, service_id, shift_id)''',
        'CREATE INDEX idx_reservations_time ON reservations(reservation_time)',
        'CREATE INDEX idx_status_history_reservation ON reservation_status_history(reservation_id)',

        # At most one link per table per context
        '''CREATE UNIQUE INDEX uq_links_primary_context
           ON table_links(primary_table_id, link_date, service_id, COALESCE(shift_id, 0))''',
        '''CREATE UNIQUE INDEX uq_links_secondary_context
           ON table_links(secondary_table_id, link_date, service_id, COALESCE(shift_id, 0))''',

        # At most one live reservation per table / link per context
        f'''CREATE UNIQUE INDEX uq_reservations_table_context
           ON reservations(table_id, reservation_date, service_id, COALESCE(shift_id, 0))
           WHERE table_id IS NOT NULL AND status NOT IN ({releasing})''',
        f'''CREATE UNIQUE INDEX uq_reservations_link_context
           ON reservations(table_link_id, reservation_date, service_id, COALESCE(shift_id, 0))
           WHERE table_link_id IS NOT NULL AND status NOT IN ({releasing})''',
    ]

    for statement in statements:
        db.execute(statement)
