"""
Input validation schemas using Marshmallow for API endpoints.
"""
from marshmallow import EXCLUDE, Schema, ValidationError, fields, pre_load, validate


class ProcessRequestSchema(Schema):
    """Validation schema for the form fields of /api/process."""

    class Meta:
        unknown = EXCLUDE

    model = fields.Str(
        required=False,
        load_default="openai",
        error_messages={'invalid': 'Model must be a string'}
    )
    api_key = fields.Str(
        data_key="apiKey",
        required=True,
        validate=validate.Length(min=1, error='API key is required'),
        error_messages={
            'required': 'API key is required',
            'null': 'API key is required',
            'invalid': 'API key must be a string'
        }
    )

    @pre_load
    def drop_blank_model(self, data, **kwargs):
        # An empty selector means the default provider
        if isinstance(data.get("model"), str) and not data["model"].strip():
            data = {k: v for k, v in data.items() if k != "model"}
        return data


class ContactRequestSchema(Schema):
    """Validation schema for contact form submissions."""

    class Meta:
        unknown = EXCLUDE

    name = fields.Str(
        required=True,
        validate=validate.Length(min=1, max=200),
        error_messages={'required': 'Name is required'}
    )
    email = fields.Email(
        required=True,
        error_messages={'required': 'Email is required', 'invalid': 'Email must be a valid address'}
    )
    subject = fields.Str(
        required=False,
        allow_none=True,
        validate=validate.Length(max=200),
        load_default=None
    )
    message = fields.Str(
        required=True,
        validate=validate.Length(min=1, max=5000),
        error_messages={'required': 'Message is required'}
    )


def first_error(err: ValidationError) -> str:
    """Flatten a marshmallow error into the first human-readable message."""
    messages = err.messages
    if isinstance(messages, dict):
        for value in messages.values():
            if isinstance(value, list) and value:
                return str(value[0])
            if isinstance(value, str):
                return value
            if isinstance(value, dict):
                return first_error(ValidationError(value))
    if isinstance(messages, list) and messages:
        return str(messages[0])
    return "Invalid request"
