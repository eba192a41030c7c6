"""
Tests for the floor plan projection.
"""

from conftest import TEST_DATE, make_reservation


class TestTableStatus:
    """Status derivation from the matching reservation."""

    def test_no_reservation_is_available(self):
        from models.floor_plan import table_status
        assert table_status(None) == 'available'

    def test_seated_is_occupied(self):
        from models.floor_plan import table_status
        assert table_status({'status': 'seated'}) == 'occupied'

    def test_confirmed_is_reserved(self):
        from models.floor_plan import table_status
        assert table_status({'status': 'confirmed'}) == 'reserved'


class TestProjectTableStatuses:
    """Projection without a database."""

    def test_linked_table_without_reservation_is_available(self):
        """A link alone is not a booking."""
        from models.floor_plan import project_table_statuses

        tables = [{'id': 1}, {'id': 2}, {'id': 3}]
        links = [{'id': 7, 'primary_table_id': 1, 'secondary_table_id': 2}]

        projected = project_table_statuses(tables, [], links)

        assert [t['status'] for t in projected] == ['available'] * 3
        assert [t['is_linked'] for t in projected] == [True, True, False]
        assert projected[0]['link_info']['id'] == 7
        assert projected[2]['link_info'] is None

    def test_reservation_on_link_marks_both_tables(self):
        """Both tables of a booked link carry the link's reservation."""
        from models.floor_plan import project_table_statuses

        tables = [{'id': 1}, {'id': 2}]
        links = [{'id': 7, 'primary_table_id': 1, 'secondary_table_id': 2}]
        reservations = [{'id': 50, 'table_id': None, 'table_link_id': 7, 'status': 'seated'}]

        projected = project_table_statuses(tables, reservations, links)

        assert [t['status'] for t in projected] == ['occupied', 'occupied']
        assert all(t['reservation']['id'] == 50 for t in projected)

    def test_direct_reservation(self):
        from models.floor_plan import project_table_statuses

        tables = [{'id': 1}, {'id': 2}]
        reservations = [{'id': 5, 'table_id': 2, 'table_link_id': None, 'status': 'confirmed'}]

        projected = project_table_statuses(tables, reservations, [])

        assert projected[0]['status'] == 'available'
        assert projected[0]['reservation'] is None
        assert projected[1]['status'] == 'reserved'
        assert projected[1]['reservation']['id'] == 5


class TestProjectFloorPlan:
    """Floor plan against the database."""

    def test_statuses_follow_reservations(self, bistro):
        """Seated is occupied, confirmed is reserved, cancelled frees the table."""
        from models.floor_plan import project_floor_plan
        from models.reservation import change_reservation_status

        seated = make_reservation(bistro, table_id=bistro['table_a']['id'])
        change_reservation_status(seated['id'], 'seated')

        plan = project_floor_plan(bistro['restaurant_id'], TEST_DATE, bistro['dinner_id'])
        statuses = {t['table_number']: t['status'] for t in plan['tables']}
        assert statuses == {'A': 'occupied', 'B': 'available'}

        make_reservation(bistro, table_id=bistro['table_b']['id'], party_size=4)
        plan = project_floor_plan(bistro['restaurant_id'], TEST_DATE, bistro['dinner_id'])
        statuses = {t['table_number']: t['status'] for t in plan['tables']}
        assert statuses == {'A': 'occupied', 'B': 'reserved'}
        assert len(plan['reservations']) == 2

    def test_cancelled_reservation_shows_available(self, bistro):
        from models.floor_plan import project_floor_plan
        from models.reservation import cancel_reservation

        reservation = make_reservation(bistro, table_id=bistro['table_a']['id'])
        cancel_reservation(reservation['id'])

        plan = project_floor_plan(bistro['restaurant_id'], TEST_DATE, bistro['dinner_id'])

        assert all(t['status'] == 'available' for t in plan['tables'])
        assert plan['reservations'] == []

    def test_link_is_reported(self, bistro):
        """Linked tables stay available and carry the link."""
        from models.floor_plan import project_floor_plan
        from models.merge_rule import create_merge_rule
        from models.table_link import create_table_link

        create_merge_rule(bistro['restaurant_id'], bistro['table_a']['id'], bistro['table_b']['id'])
        link = create_table_link(bistro['table_a']['id'], bistro['table_b']['id'],
                                 TEST_DATE, bistro['dinner_id'])

        plan = project_floor_plan(bistro['restaurant_id'], TEST_DATE, bistro['dinner_id'])

        assert [l['id'] for l in plan['links']] == [link['id']]
        assert all(t['is_linked'] for t in plan['tables'])
        assert all(t['status'] == 'available' for t in plan['tables'])
        assert plan['context'] == {'date': TEST_DATE, 'service_id': bistro['dinner_id'],
                                   'shift_id': None}

    def test_inactive_tables_are_omitted(self, bistro):
        from models.floor_plan import project_floor_plan
        from models.table import deactivate_table

        deactivate_table(bistro['table_b']['id'])

        plan = project_floor_plan(bistro['restaurant_id'], TEST_DATE, bistro['dinner_id'])
        assert [t['table_number'] for t in plan['tables']] == ['A']
