from marshmallow import fields, validate
from eventus import ma


class UserLoginSchema(ma.Schema):
    username = fields.Str(required=True, validate=validate.Length(min=1))
    password = fields.Str(required=True, load_only=True,
                          validate=validate.Length(min=1))


class UserRegisterSchema(ma.Schema):
    first_name = fields.Str(data_key='firstName', required=True,
                            validate=validate.Length(min=1))
    last_name = fields.Str(data_key='lastName', required=True,
                           validate=validate.Length(min=1))
    email = fields.Email(required=True)
    username = fields.Str(required=True, validate=validate.Length(min=1))
    password = fields.Str(required=True, load_only=True,
                          validate=validate.Length(min=1))
    # Nome do papel do cliente no provedor de identidade (ex.: client_user)
    role = fields.Str(required=True, validate=validate.Length(min=1))


user_login_schema = UserLoginSchema()
user_register_schema = UserRegisterSchema()
