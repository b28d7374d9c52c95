from flask import Flask, jsonify, request, Response
from flask_marshmallow import Marshmallow
import os

# Extensões
ma = Marshmallow()

CORS_ALLOW_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
CORS_ALLOW_HEADERS = "Content-Type, Authorization, X-HTTP-Method-Override, Accept"
CORS_MAX_AGE = "86400"  # 24 horas


def create_app(config_name=None):
    if config_name is None:
        config_name = os.environ.get("FLASK_CONFIG", "default")

    app = Flask(__name__)

    # Importar configuração
    from config import config

    app.config.from_object(config[config_name])

    # Inicializar extensões com a app
    ma.init_app(app)

    # Registrar blueprints
    from eventus.api.auth_bp import auth_bp
    from eventus.api.event_plans_bp import event_plans_bp
    from eventus.api.events_bp import events_bp, event_registrations_bp
    from eventus.api.activities_bp import activities_bp, activity_registrations_bp
    from eventus.api.attendance_bp import attendance_bp
    from eventus.api.calendar_bp import calendar_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(event_plans_bp)
    app.register_blueprint(events_bp)
    app.register_blueprint(event_registrations_bp)
    app.register_blueprint(activities_bp)
    app.register_blueprint(activity_registrations_bp)
    app.register_blueprint(attendance_bp)
    app.register_blueprint(calendar_bp)

    # Preflight OPTIONS para qualquer rota da API (uso em desenvolvimento cross-origin)
    @app.before_request
    def _cors_preflight():
        if request.method == "OPTIONS" and request.path.startswith("/api/"):
            app.logger.debug(f"[cors] Preflight para {request.path}")
            return Response(status=204)
        return None

    @app.after_request
    def _cors_headers(response):
        if request.path.startswith("/api/"):
            response.headers["Access-Control-Allow-Origin"] = app.config.get(
                "CORS_ALLOW_ORIGIN", "*"
            )
            response.headers["Access-Control-Allow-Methods"] = CORS_ALLOW_METHODS
            response.headers["Access-Control-Allow-Headers"] = CORS_ALLOW_HEADERS
            response.headers["Access-Control-Max-Age"] = CORS_MAX_AGE
        return response

    @app.route("/")
    def index():
        return jsonify({"name": "eventus", "status": "ok"}), 200

    @app.route("/api/health")
    def health():
        return jsonify({"status": "ok"}), 200

    return app
