from marshmallow import EXCLUDE, Schema, fields, validate
from marshmallow import ValidationError as SchemaValidationError

from errors import ValidationError


class RequestSchema(Schema):
    class Meta:
        unknown = EXCLUDE


class RegisterSchema(RequestSchema):
    username       = fields.Str(required=True, validate=validate.Length(min=3, max=64))
    password       = fields.Str(required=True, load_only=True, validate=validate.Length(min=8))
    wallet_address = fields.Str(load_default=None, allow_none=True, validate=validate.Length(max=128))


class LoginSchema(RequestSchema):
    username = fields.Str(required=True)
    password = fields.Str(required=True, load_only=True)


class RecordCreateSchema(RequestSchema):
    record_type     = fields.Str(required=True, validate=validate.Length(min=1, max=64))
    title           = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    content_address = fields.Str(required=True, validate=validate.Length(min=1, max=255))
    transaction_ref = fields.Str(load_default=None, allow_none=True, validate=validate.Length(max=255))


class GrantCreateSchema(RequestSchema):
    provider_address = fields.Str(required=True, validate=validate.Length(min=1, max=128))
    patient_id       = fields.Int(load_default=None, allow_none=True)


class EmergencyGrantSchema(GrantCreateSchema):
    minutes = fields.Int(load_default=None, allow_none=True, validate=validate.Range(min=1))


class UserSchema(Schema):
    id             = fields.Int(dump_only=True)
    username       = fields.Str()
    wallet_address = fields.Str(allow_none=True)
    created_at     = fields.DateTime(dump_only=True)


class RecordSchema(Schema):
    id              = fields.Int(dump_only=True)
    owner_id        = fields.Int()
    record_type     = fields.Str()
    title           = fields.Str()
    content_address = fields.Str()
    transaction_ref = fields.Str(allow_none=True)
    created_at      = fields.DateTime(dump_only=True)


class GrantSchema(Schema):
    id               = fields.Int(dump_only=True)
    patient_id       = fields.Int()
    provider_address = fields.Str()
    grant_type       = fields.Str()
    is_active        = fields.Bool()
    granted_at       = fields.DateTime()
    revoked_at       = fields.DateTime(allow_none=True)
    expires_at       = fields.DateTime(allow_none=True)


class AuditLogSchema(Schema):
    id        = fields.Int()
    action    = fields.Str()
    record_id = fields.Int(allow_none=True)
    grant_id  = fields.Int(allow_none=True)
    detail    = fields.Str(allow_none=True)
    status    = fields.Str()
    timestamp = fields.DateTime()


user_schema = UserSchema()
record_schema = RecordSchema()
records_schema = RecordSchema(many=True)
grant_schema = GrantSchema()
grants_schema = GrantSchema(many=True)
audit_logs_schema = AuditLogSchema(many=True)


def load_payload(schema, data):
    """Validate a request body, raising the service ValidationError on failure."""
    if data is None:
        raise ValidationError("No JSON data received")
    try:
        return schema.load(data)
    except SchemaValidationError as e:
        raise ValidationError("Invalid request data", details=e.messages) from e
