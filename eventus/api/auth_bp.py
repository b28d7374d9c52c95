from flask import Blueprint, current_app, request, jsonify
from marshmallow import ValidationError

from eventus.schemas import user_login_schema, user_register_schema
from eventus.services.identity_service import IdentityProvider, IdentityError
from eventus.utils.auth_helpers import MSG_TOKEN_MISSING, get_current_principal
from eventus.utils.proxy_helpers import internal_error
from eventus.utils.token_utils import principal_from_token

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')


def _cookie_name():
    return current_app.config.get('TOKEN_COOKIE_NAME', 'token')

# Login (password grant no provedor de identidade)


@auth_bp.route('/login', methods=['POST'])
def login():
    try:
        data = user_login_schema.load(request.get_json() or {})

        payload = IdentityProvider.from_app().password_login(
            data['username'], data['password'])
        token = payload.get('access_token')
        expires_in = int(payload.get('expires_in') or 0)
        if not token:
            return jsonify({'message': 'Resposta de login sem token'}), 502

        principal = principal_from_token(
            token, current_app.config['IDENTITY_CLIENT_ID'])

        response = jsonify({
            'message': 'Login realizado com sucesso',
            'access_token': token,
            'expires_in': expires_in,
            'user': principal.to_dict(),
        })
        # Tempo de vida do cookie = tempo de vida do token
        response.set_cookie(_cookie_name(), token, max_age=expires_in, path='/')
        return response, 200

    except ValidationError as err:
        return jsonify({'message': 'Dados inválidos', 'errors': err.messages}), 400
    except IdentityError as e:
        return jsonify({'message': e.message}), e.status_code
    except Exception as e:
        return internal_error(e)


@auth_bp.route('/logout', methods=['POST'])
def logout():
    response = jsonify({'message': 'Logout realizado com sucesso'})
    response.set_cookie(_cookie_name(), '', max_age=0, path='/')
    return response, 200

# Cadastro: cria o usuário no provedor e atribui o papel do cliente


@auth_bp.route('/register', methods=['POST'])
def register():
    try:
        data = user_register_schema.load(request.get_json() or {})
    except ValidationError as err:
        return jsonify({
            'message': 'Todos os campos são obrigatórios',
            'errors': err.messages,
        }), 400

    try:
        user_id = IdentityProvider.from_app().register_user(
            first_name=data['first_name'],
            last_name=data['last_name'],
            email=data['email'],
            username=data['username'],
            password=data['password'],
            role=data['role'],
        )
        return jsonify({
            'message': 'Usuário registrado com sucesso',
            'userId': user_id,
        }), 201

    except IdentityError as e:
        current_app.logger.error(f"[identity] Falha no cadastro de {data['username']}: {e.message}")
        return jsonify({'message': e.message}), e.status_code
    except Exception as e:
        return internal_error(e)


@auth_bp.route('/session', methods=['GET'])
def session():
    """Principal do token atual (header ou cookie)."""
    principal = get_current_principal(allow_cookie=True)
    if not principal.is_authenticated:
        return jsonify({'message': MSG_TOKEN_MISSING}), 401
    return jsonify({'user': principal.to_dict()}), 200
