"""JSON envelopes for the ward console endpoints.

    Success: {"success": true, "data": ..., "message": ...}
    Error:   {"success": false, "error": ..., "details": ...}

A draft that fails validation is still a successful request: the verdict
travels in ``data`` and the console decides how to display it. ``api_error``
is reserved for requests the engine could not evaluate at all.
"""

from flask import jsonify


def api_success(data=None, message=None):
    """Wrap a result for the console; empty parts are left out."""
    body = {"success": True}
    body.update({k: v for k, v in (("data", data), ("message", message)) if v is not None})
    return jsonify(body)


def api_error(error, status_code=400, details: dict | None = None):
    """Reject a request, optionally telling the console what was expected.

    Args:
        error: Exception or message shown to the prescriber
        status_code: HTTP status (400 malformed request, 500 engine failure)
        details: Extra machine-readable context, e.g. the accepted field names
    """
    body = {"success": False, "error": str(error)}
    if details:
        body["details"] = details
    return jsonify(body), status_code
