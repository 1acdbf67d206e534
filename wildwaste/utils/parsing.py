"""Response envelope parsing and failure classification.

Every service response is a JSON object carrying a `status` field; anything
other than "success" is a server-reported failure even under HTTP 2xx.
"""

import json

from wildwaste.errors import parse_error, server_error

SUCCESS_STATUS = "success"


def parse_json_object(text: str) -> dict | None:
    """Return the body as a dict, or None if it is not a JSON object."""
    try:
        data = json.loads(text)
    # ValueError covers JSONDecodeError and integer literals past the digit limit
    except (ValueError, TypeError, RecursionError):
        return None
    return data if isinstance(data, dict) else None


def _message(body: dict) -> str | None:
    message = body.get("message")
    if isinstance(message, str) and message.strip():
        return message
    return None


def read_envelope(response, fallback: str) -> dict:
    """Return the parsed body of a successful response.

    Raises ApiError:
    - non-2xx with a parseable error envelope -> server, envelope message
    - non-2xx otherwise -> parse, fallback
    - 2xx with a body that is not a JSON object -> parse, fallback
    - 2xx with status != "success" -> server, body message or fallback
    """
    body = parse_json_object(response.text)

    if not response.ok:
        message = _message(body) if body is not None else None
        if message is None:
            raise parse_error(fallback)
        raise server_error(message)

    if body is None:
        raise parse_error(fallback)
    if body.get("status") != SUCCESS_STATUS:
        raise server_error(_message(body) or fallback)
    return body
