"""
JSON renderer producing the standard response envelope.

Every response body has the shape:
{
    "status": "success" | "error",
    "message": "string message or empty",
    "data": {...} | [] | null
}

DRF loads this module while rest_framework.views is still importing; it
must not import rest_framework.views or directory_project.response_formatter.
"""
from rest_framework.renderers import JSONRenderer


def format_error_response(errors, status_code):
    """
    Flatten DRF error payloads into a single message string.

    - {"field": ["error1", "error2"]} -> "field: error1, error2"
    - {"detail": "message"} -> "message"
    - ["error1", "error2"] -> "error1, error2"
    """
    message = ""

    if isinstance(errors, dict):
        error_messages = []
        for field, field_errors in errors.items():
            if field == 'detail':
                message = str(field_errors)
            elif isinstance(field_errors, list):
                error_messages.append(f"{field}: {', '.join(str(e) for e in field_errors)}")
            elif isinstance(field_errors, dict):
                error_messages.append(f"{field}: {format_nested_errors(field_errors)}")
            else:
                error_messages.append(f"{field}: {str(field_errors)}")

        if error_messages:
            message = "; ".join(error_messages)

    elif isinstance(errors, list):
        message = ", ".join(str(e) for e in errors)

    else:
        message = str(errors)

    return {
        "status": "error",
        "message": message,
        "data": None
    }


def format_nested_errors(errors_dict):
    """Format nested error dictionaries."""
    messages = []
    for key, value in errors_dict.items():
        if isinstance(value, list):
            messages.append(f"{key}: {', '.join(str(v) for v in value)}")
        elif isinstance(value, dict):
            messages.append(f"{key}: {format_nested_errors(value)}")
        else:
            messages.append(f"{key}: {str(value)}")
    return "; ".join(messages)


class StandardizedJSONRenderer(JSONRenderer):
    """
    JSON renderer that wraps any response not already in the envelope.
    """

    def render(self, data, accepted_media_type=None, renderer_context=None):
        response = renderer_context.get('response') if renderer_context else None
        # 204 No Content keeps an empty body
        if response is not None and response.status_code == 204:
            return b''
        if response is not None and not self.is_already_formatted(data):
            if response.status_code >= 400:
                data = format_error_response(data, response.status_code)
            else:
                data = self.format_success_response(data, response.status_code)

        return super().render(data, accepted_media_type, renderer_context)

    def is_already_formatted(self, data):
        """True when the payload already carries status/message/data."""
        if isinstance(data, dict):
            return 'status' in data and 'message' in data and 'data' in data
        return False

    def format_success_response(self, data, status_code):
        if isinstance(data, dict) and 'detail' in data:
            message = str(data['detail'])
            response_data = None
        elif data is None or (isinstance(data, dict) and not data):
            message = ""
            response_data = None
        else:
            message = ""
            response_data = data

        return {
            "status": "success",
            "message": message,
            "data": response_data
        }
