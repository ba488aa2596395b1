"""
Text to Handwriting Application Factory
"""
from datetime import datetime, timezone
from flask import Flask, jsonify
from config import config


def create_app(config_name='default'):
    app = Flask(__name__)
    app.config.from_object(config[config_name])

    # Register blueprints
    from handwriting.api import api_bp

    app.register_blueprint(api_bp)

    # Health check endpoint
    @app.route('/healthz')
    def healthz():
        """Health check for load balancers and monitoring"""
        from handwriting.services.openai_service import client_ready

        ok, msg = client_ready(app.config.get("OPENAI_API_KEY", ""))
        return jsonify({
            "status": "ok" if ok else "degraded",
            "version": app.config.get("APP_VERSION", ""),
            "upstream_ready": ok,
            "upstream_message": msg,
            "model": app.config.get("OPENAI_MODEL", ""),
            "timestamp": datetime.now(timezone.utc).isoformat()
        })

    # Version endpoint
    @app.route('/version')
    def version():
        """Version and build info"""
        return jsonify({
            "version": app.config.get("APP_VERSION", ""),
            "build_time": app.config.get("BUILD_TIME", ""),
            "git_commit": app.config.get("GIT_COMMIT", ""),
            "features": {
                "handwriting_extraction": True,
                "preview_render": True,
                "pdf_export": True,
            }
        })

    if not app.config.get("OPENAI_API_KEY"):
        app.logger.warning('OPENAI_API_KEY is not set - handwriting extraction will fail')

    return app
