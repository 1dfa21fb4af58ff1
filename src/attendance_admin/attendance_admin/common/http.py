from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify

from ..core.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def error_response(message: str, status: int):
    return jsonify({"error": message}), status


def json_errors(view):
    """Translate domain errors into ``{"error": ...}`` responses.

    Validation -> 400, not found -> 404; store failures and anything
    unexpected -> 500 with the underlying message.
    """

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except ValidationError as e:
            return error_response(str(e), 400)
        except NotFoundError as e:
            return error_response(str(e), 404)
        except Exception as e:
            logger.exception("%s failed", view.__name__)
            return error_response(str(e), 500)

    return wrapper
