import json

from flask import request

from .errors import ValidationError


def json_body():
    """Parsed JSON object from the request, or ValidationError"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Invalid request body')
    return data


def load_json_list(value):
    """Decode a JSON list column; anything else becomes an empty list"""
    if not value:
        return []
    if isinstance(value, list):
        return value
    try:
        parsed = json.loads(value)
    except (json.JSONDecodeError, TypeError):
        return []
    return parsed if isinstance(parsed, list) else []
