"""
Tests for restaurants, settings, services and shifts.
"""

import pytest


class TestCreateRestaurant:

    def test_defaults(self, app):
        """New tenants get a settings row and the default lunch and dinner services."""
        from models.restaurant import create_restaurant

        restaurant = create_restaurant('Chez Test', 'chez-test')

        assert restaurant['slug'] == 'chez-test'
        settings = restaurant['settings']
        assert settings['enable_table_merge'] is True
        assert settings['link_requires_merge_rule'] is True
        assert settings['default_reservation_duration'] == 90
        assert settings['max_party_size'] == 20

        services = [(s['name'], s['type'], s['start_time'], s['end_time'])
                    for s in restaurant['services']]
        assert services == [
            ('Lunch', 'lunch', '12:00', '14:30'),
            ('Dinner', 'dinner', '19:00', '22:30'),
        ]

    def test_settings_overrides(self, app):
        from models.restaurant import create_restaurant

        restaurant = create_restaurant('Small', 'small', settings={
            'max_party_size': 6, 'enable_table_merge': False, 'unknown': 1
        })

        assert restaurant['settings']['max_party_size'] == 6
        assert restaurant['settings']['enable_table_merge'] is False

    def test_config_defaults_apply(self, app):
        from models.restaurant import create_restaurant

        app.config['DEFAULT_MAX_PARTY_SIZE'] = 12
        restaurant = create_restaurant('Configured', 'configured')

        assert restaurant['settings']['max_party_size'] == 12

    def test_duplicate_slug(self, app):
        from models.restaurant import create_restaurant
        from utils.errors import ConflictError

        create_restaurant('One', 'same-slug')
        with pytest.raises(ConflictError):
            create_restaurant('Two', 'same-slug')

    @pytest.mark.parametrize('name,slug', [('', 'x'), ('Name', ''), ('Name', 'Bad Slug!')])
    def test_invalid_input(self, app, name, slug):
        from models.restaurant import create_restaurant
        from utils.errors import ValidationError

        with pytest.raises(ValidationError):
            create_restaurant(name, slug)

    def test_seeded_demo_restaurant(self, app):
        """init_db seeds one demo tenant."""
        from models.restaurant import get_all_restaurants

        slugs = [r['slug'] for r in get_all_restaurants()]
        assert slugs == ['demo-bistro']


class TestRestaurantSettings:

    def test_update(self, bistro):
        from models.restaurant import get_restaurant_settings, update_restaurant_settings

        update_restaurant_settings(bistro['restaurant_id'], max_party_size=8,
                                   link_requires_merge_rule='false')

        settings = get_restaurant_settings(bistro['restaurant_id'])
        assert settings['max_party_size'] == 8
        assert settings['link_requires_merge_rule'] is False

    def test_invalid_integer(self, bistro):
        from models.restaurant import update_restaurant_settings
        from utils.errors import ValidationError

        with pytest.raises(ValidationError):
            update_restaurant_settings(bistro['restaurant_id'], max_party_size=0)

    def test_no_known_fields(self, bistro):
        from models.restaurant import update_restaurant_settings
        from utils.errors import ValidationError

        with pytest.raises(ValidationError):
            update_restaurant_settings(bistro['restaurant_id'], theme='dark')

    def test_missing_restaurant(self, app):
        from models.restaurant import get_restaurant_settings
        from utils.errors import NotFoundError

        with pytest.raises(NotFoundError):
            get_restaurant_settings(31337)


class TestServicesAndShifts:

    def test_services_with_shifts(self, bistro, dinner_shifts):
        from models.service import get_services

        services = get_services(bistro['restaurant_id'])
        dinner = [s for s in services if s['type'] == 'dinner'][0]

        assert [sh['name'] for sh in dinner['shifts']] == ['First seating', 'Second seating']

    def test_shift_times_validated(self, bistro):
        from models.service import create_shift
        from utils.errors import ValidationError

        with pytest.raises(ValidationError):
            create_shift(bistro['dinner_id'], 'Late', '23:00', '22:00')
        with pytest.raises(ValidationError):
            create_shift(bistro['dinner_id'], 'Late', 'late', '23:30')

    def test_single_digit_hours(self, bistro):
        """Morning shifts written without a leading zero compare by clock time."""
        from models.service import create_shift

        shift = create_shift(bistro['lunch_id'], 'Early', '9:00', '12:00')

        assert (shift['start_time'], shift['end_time']) == ('09:00', '12:00')

    def test_reversed_times_message(self, bistro):
        from models.service import create_shift
        from utils.errors import ValidationError

        with pytest.raises(ValidationError, match='end_time must be after start_time'):
            create_shift(bistro['dinner_id'], 'Late', '22:00', '9:30')

    def test_shift_for_missing_service(self, app):
        from models.service import create_shift
        from utils.errors import NotFoundError

        with pytest.raises(NotFoundError):
            create_shift(777, 'Ghost', '19:00', '20:00')

    def test_validate_context(self, bistro, dinner_shifts, other_restaurant):
        from models.service import validate_context
        from utils.errors import NotFoundError, ValidationError

        rid = bistro['restaurant_id']
        assert validate_context(rid, bistro['dinner_id'], dinner_shifts['first']['id'])['id'] == \
            bistro['dinner_id']

        with pytest.raises(NotFoundError):
            validate_context(rid, other_restaurant['dinner_id'])
        with pytest.raises(NotFoundError):
            validate_context(rid, bistro['dinner_id'], 9999)
        with pytest.raises(ValidationError):
            validate_context(rid, bistro['lunch_id'], dinner_shifts['first']['id'])
