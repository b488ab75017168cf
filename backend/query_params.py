"""
Query-string parsing for list filters and report parameters.

Malformed values raise a DRF ValidationError naming the parameter, so the
client gets a 400 instead of a database error.
"""
from django.utils.dateparse import parse_date
from rest_framework.exceptions import ValidationError


def int_param(request, name, required=False):
    value = request.query_params.get(name, '').strip()
    if not value:
        if required:
            raise ValidationError({name: f'{name} is required'})
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError({name: f'Invalid {name}'})


def date_param(request, name):
    value = request.query_params.get(name, '').strip()
    if not value:
        return None
    try:
        parsed = parse_date(value)
    except ValueError:
        # well formed but impossible, e.g. 2025-02-30
        parsed = None
    if parsed is None:
        raise ValidationError({name: f'Invalid {name}. Use YYYY-MM-DD.'})
    return parsed
