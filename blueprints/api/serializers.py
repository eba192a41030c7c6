"""
JSON shapes for availability options and floor plan tables.
"""


def serialize_option(option: dict) -> dict:
    """Availability option with camelCase keys."""
    data = {'type': option['type']}
    if option['type'] == 'single':
        data['tableId'] = option['table_id']
    else:
        data['tableIds'] = option['table_ids']

    data['tableNumber'] = option['table_number']
    data['capacity'] = option['capacity']
    data['recommendation'] = option['recommendation']
    return data


def serialize_plan_table(table: dict) -> dict:
    """Floor plan table: stored columns plus status, reservation and link markers."""
    data = {key: value for key, value in table.items()
            if key not in ('is_linked', 'link_info')}
    data['isLinked'] = table['is_linked']
    data['linkInfo'] = table['link_info']
    return data
