import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    SECRET_KEY = os.environ.get(
        'SECRET_KEY') or 'dev-secret-key-change-in-production'

    # Backend REST (eventos, atividades, inscrições, planejamentos)
    BACKEND_API_URL = os.environ.get(
        'BACKEND_API_URL', 'http://localhost:9000').rstrip('/')

    # Provedor de identidade (realm da aplicação + realm de administração)
    IDENTITY_PROVIDER_URL = os.environ.get(
        'IDENTITY_PROVIDER_URL', 'http://localhost:8080').rstrip('/')
    IDENTITY_REALM = os.environ.get('IDENTITY_REALM', 'lucassousa')
    IDENTITY_ADMIN_REALM = os.environ.get('IDENTITY_ADMIN_REALM', 'master')
    IDENTITY_CLIENT_ID = os.environ.get(
        'IDENTITY_CLIENT_ID', 'eventus-rest-api')
    IDENTITY_ADMIN_CLIENT_ID = os.environ.get(
        'IDENTITY_ADMIN_CLIENT_ID', 'admin-cli')
    IDENTITY_ADMIN_USERNAME = os.environ.get(
        'IDENTITY_ADMIN_USERNAME', 'admin')
    IDENTITY_ADMIN_PASSWORD = os.environ.get(
        'IDENTITY_ADMIN_PASSWORD', 'admin')

    REQUEST_TIMEOUT = int(os.environ.get('REQUEST_TIMEOUT', 10))

    # Cookie com o bearer token do usuário
    TOKEN_COOKIE_NAME = os.environ.get('TOKEN_COOKIE_NAME', 'token')

    # Intervalo (segundos) da re-verificação de inscrição enquanto inscrito
    REGISTRATION_POLL_INTERVAL = int(
        os.environ.get('REGISTRATION_POLL_INTERVAL', 30))

    CORS_ALLOW_ORIGIN = os.environ.get('CORS_ALLOW_ORIGIN', '*')
    REPORT_BRAND = os.environ.get('REPORT_BRAND', 'EVENTUS')
    APP_TIMEZONE = os.environ.get('APP_TIMEZONE', 'America/Sao_Paulo')


class DevelopmentConfig(Config):
    DEBUG = True


class TestingConfig(Config):
    TESTING = True
    DEBUG = True
    # URLs fixas para que os testes não dependam do ambiente
    BACKEND_API_URL = 'http://backend.test'
    IDENTITY_PROVIDER_URL = 'http://identity.test'
    REGISTRATION_POLL_INTERVAL = 1


class ProductionConfig(Config):
    DEBUG = False


config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}
