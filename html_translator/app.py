"""
HTML Translator Application
===========================
Flask application factory and main entry point.
"""
from flask import Flask, send_from_directory
from flask_cors import CORS

from html_translator import __version__
from html_translator.config import config
from html_translator.api.routes import (
    create_units_blueprint,
    create_languages_blueprint,
    create_health_blueprint,
    create_logs_blueprint
)
from html_translator.api.middleware import add_rate_limit_headers
from html_translator.services.workspace import BulkTranslator, UnitStore, TranslateFn
from html_translator.utils.logging import get_logger, debug_print


def create_app(
    testing: bool = False,
    store: UnitStore = None,
    translator: BulkTranslator = None,
    translate_fn: TranslateFn = None
) -> Flask:
    """
    Application factory for Flask app.

    Args:
        testing: If True, configure for testing
        store: Unit store to serve (a fresh one is created if omitted)
        translator: Coordinator to use (built around ``store`` if omitted)
        translate_fn: Replacement for the remote translate call

    Returns:
        Configured Flask application
    """
    app = Flask(
        __name__,
        static_folder=config.paths.static_folder,
        static_url_path='/static'
    )

    app.config.update(
        SECRET_KEY=config.server.secret_key,
        # Room for a full unit plus JSON overhead
        MAX_CONTENT_LENGTH=config.workspace.max_input_chars * 4 + 1024,
        TESTING=testing
    )

    cors_origins = ['*'] if testing else config.server.cors_origins
    CORS(
        app,
        resources={r"/api/*": {"origins": cors_origins}},
        supports_credentials=True
    )

    if translator is None:
        translator = BulkTranslator(store or UnitStore(), translate_fn=translate_fn)
    app.extensions['html_translator'] = translator

    app.register_blueprint(create_units_blueprint(translator))
    app.register_blueprint(create_languages_blueprint(translator))
    app.register_blueprint(create_health_blueprint())
    app.register_blueprint(create_logs_blueprint())

    app.after_request(add_rate_limit_headers)

    @app.errorhandler(400)
    def bad_request(e):
        return {'error': 'Bad request', 'details': str(e)}, 400

    @app.errorhandler(404)
    def not_found(e):
        return {'error': 'Resource not found'}, 404

    @app.errorhandler(413)
    def payload_too_large(e):
        return {'error': f'Request too large. Maximum input is {config.workspace.max_input_chars} characters'}, 413

    @app.errorhandler(429)
    def rate_limited(e):
        return {'error': 'Rate limit exceeded'}, 429

    @app.errorhandler(500)
    def internal_error(e):
        get_logger().api_logger.error(f"Internal error: {e}")
        return {'error': 'Internal server error'}, 500

    @app.route('/')
    def index():
        return send_from_directory(config.paths.static_folder, 'index.html')

    logger = get_logger()
    logger.api_logger.info(
        f"HTML Translator ready: {len(translator.store)} units, model {config.gemini.model}"
    )

    if config.logging.verbose_debug:
        debug_print("Application initialized", 'INFO', 'APP')

    return app


def run_server():
    """Run the Flask development server."""
    app = create_app()

    print(f"""
============================================================
  HTML Translator v{__version__}
------------------------------------------------------------
  Server:    http://{config.server.host}:{config.server.port}
  Model:     {config.gemini.model}
  API key:   {'configured' if config.gemini.is_configured else 'MISSING (set GEMINI_API_KEY)'}
  Target:    {config.workspace.default_language.value}
============================================================
    """)

    app.run(
        host=config.server.host,
        port=config.server.port,
        debug=config.server.debug,
        threaded=True
    )


if __name__ == '__main__':
    run_server()
