"""
Tests for reservation status transitions.

The transition table:
    confirmed -> seated, cancelled, no_show
    seated    -> completed, cancelled
    completed, cancelled, no_show are terminal
"""

import pytest

from conftest import make_reservation


class TestValidateStatusTransition:
    """Transition table checks without a database."""

    @pytest.mark.parametrize('current,new', [
        ('confirmed', 'seated'),
        ('confirmed', 'cancelled'),
        ('confirmed', 'no_show'),
        ('seated', 'completed'),
        ('seated', 'cancelled'),
    ])
    def test_allowed(self, current, new):
        from models.reservation_state import validate_status_transition
        assert validate_status_transition(current, new) is True

    @pytest.mark.parametrize('current,new', [
        ('completed', 'confirmed'),
        ('completed', 'seated'),
        ('cancelled', 'confirmed'),
        ('no_show', 'seated'),
        ('seated', 'confirmed'),
        ('seated', 'no_show'),
        ('confirmed', 'completed'),
    ])
    def test_rejected(self, current, new):
        from models.reservation_state import validate_status_transition
        from utils.errors import InvalidStatusTransitionError

        with pytest.raises(InvalidStatusTransitionError) as exc_info:
            validate_status_transition(current, new)

        assert exc_info.value.current_status == current
        assert exc_info.value.new_status == new
        assert exc_info.value.status_code == 400

    def test_same_status_is_no_change(self):
        from models.reservation_state import validate_status_transition
        assert validate_status_transition('seated', 'seated') is False

    def test_unknown_status(self):
        from models.reservation_state import validate_status_transition
        from utils.errors import ValidationError

        with pytest.raises(ValidationError):
            validate_status_transition('confirmed', 'teleported')

    def test_terminal_statuses_have_no_transitions(self):
        from models.reservation_state import get_valid_transitions

        for status in ('completed', 'cancelled', 'no_show'):
            assert get_valid_transitions(status) == []
        assert get_valid_transitions('confirmed') == ['cancelled', 'no_show', 'seated']


class TestChangeReservationStatus:
    """Status changes against the database."""

    def test_happy_path(self, bistro):
        from models.reservation import change_reservation_status, get_status_history

        reservation = make_reservation(bistro)
        change_reservation_status(reservation['id'], 'seated', changed_by='host-1')
        completed = change_reservation_status(reservation['id'], 'completed', changed_by='host-1',
                                              notes='Paid')

        assert completed['status'] == 'completed'

        history = get_status_history(reservation['id'])
        assert [(h['old_status'], h['new_status']) for h in history] == [
            (None, 'confirmed'),
            ('confirmed', 'seated'),
            ('seated', 'completed'),
        ]
        assert history[-1]['notes'] == 'Paid'

    def test_illegal_jump_leaves_status_untouched(self, bistro):
        from models.reservation import change_reservation_status, get_reservation_by_id
        from utils.errors import InvalidStatusTransitionError

        reservation = make_reservation(bistro)
        change_reservation_status(reservation['id'], 'no_show')

        with pytest.raises(InvalidStatusTransitionError):
            change_reservation_status(reservation['id'], 'seated')

        assert get_reservation_by_id(reservation['id'])['status'] == 'no_show'

    def test_missing_reservation(self, app):
        from models.reservation import change_reservation_status
        from utils.errors import NotFoundError

        with pytest.raises(NotFoundError):
            change_reservation_status(98765, 'seated')

    def test_other_tenant(self, bistro, other_restaurant):
        from models.reservation import change_reservation_status
        from utils.errors import NotFoundError

        reservation = make_reservation(bistro)
        with pytest.raises(NotFoundError):
            change_reservation_status(reservation['id'], 'seated',
                                      restaurant_id=other_restaurant['restaurant_id'])


class TestCancelReservation:
    """Cancellation."""

    def test_cancel_twice(self, bistro):
        """The second cancel succeeds and records nothing new."""
        from models.reservation import cancel_reservation, get_status_history

        reservation = make_reservation(bistro, table_id=bistro['table_a']['id'])

        first = cancel_reservation(reservation['id'], cancelled_by='staff-1')
        second = cancel_reservation(reservation['id'], cancelled_by='staff-1')

        assert first['status'] == 'cancelled'
        assert second['status'] == 'cancelled'
        assert len(get_status_history(reservation['id'])) == 2

    def test_cancel_seated(self, bistro):
        from models.reservation import cancel_reservation, change_reservation_status

        reservation = make_reservation(bistro)
        change_reservation_status(reservation['id'], 'seated')

        assert cancel_reservation(reservation['id'])['status'] == 'cancelled'

    def test_cancel_completed_is_rejected(self, bistro):
        from models.reservation import cancel_reservation, change_reservation_status
        from utils.errors import InvalidStatusTransitionError

        reservation = make_reservation(bistro)
        change_reservation_status(reservation['id'], 'seated')
        change_reservation_status(reservation['id'], 'completed')

        with pytest.raises(InvalidStatusTransitionError):
            cancel_reservation(reservation['id'])

    def test_cancel_keeps_link(self, bistro):
        """Cancelling a reservation on a link leaves the link in place."""
        from conftest import TEST_DATE
        from models.context import get_context_links
        from models.merge_rule import create_merge_rule
        from models.reservation import cancel_reservation
        from models.table_link import create_table_link

        create_merge_rule(bistro['restaurant_id'], bistro['table_a']['id'], bistro['table_b']['id'])
        link = create_table_link(bistro['table_a']['id'], bistro['table_b']['id'],
                                 TEST_DATE, bistro['dinner_id'])
        reservation = make_reservation(bistro, table_link_id=link['id'], party_size=8)

        cancel_reservation(reservation['id'])

        links = get_context_links(bistro['restaurant_id'], TEST_DATE, bistro['dinner_id'])
        assert [l['id'] for l in links] == [link['id']]
