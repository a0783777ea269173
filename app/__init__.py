"""Flask application factory."""
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException
from app.database import init_db
from app.utils.clock import SystemClock


def create_app(config_object='config.Config'):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.json.sort_keys = app.config.get('JSON_SORT_KEYS', False)

    # Clock used for order numbers and delivery timestamps (tests swap in a FixedClock)
    app.extensions.setdefault('clock', SystemClock())

    # Setup Prometheus metrics instrumentation
    from app.blueprints.metrics import setup_metrics_instrumentation
    setup_metrics_instrumentation(app)

    # Production: Enable ProxyFix for HTTPS behind Nginx reverse proxy
    if app.config.get('ENV') == 'production':
        from werkzeug.middleware.proxy_fix import ProxyFix
        app.wsgi_app = ProxyFix(
            app.wsgi_app,
            x_for=1,      # Trust X-Forwarded-For with 1 proxy
            x_proto=1,    # Trust X-Forwarded-Proto
            x_host=1,     # Trust X-Forwarded-Host
            x_port=1,     # Trust X-Forwarded-Port
            x_prefix=0    # No prefix (not behind a URL prefix)
        )

    # Initialize database
    init_db(app)

    # Load the bearer-token user before each request
    from app.middleware import load_current_user

    @app.before_request
    def before_request_handler():
        load_current_user()

    # Error Handlers
    from app.exceptions import GroceryError

    @app.errorhandler(GroceryError)
    def handle_grocery_error(error):
        """Handle custom application exceptions."""
        if error.status_code >= 500:
            app.logger.error(f"GroceryError [{error.status_code}]: {error.message}")
        else:
            app.logger.warning(f"GroceryError [{error.status_code}]: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'status': 'error', 'message': error.description}), error.code

    @app.errorhandler(Exception)
    def internal_error(error):
        app.logger.error(f"Unhandled Exception: {error}", exc_info=error)
        return jsonify({'status': 'error', 'message': 'An unexpected error occurred'}), 500

    # Register blueprints
    from app.blueprints.main import main_bp
    from app.blueprints.auth import auth_bp
    from app.blueprints.users import users_bp
    from app.blueprints.catalog import catalog_bp
    from app.blueprints.cart import cart_bp
    from app.blueprints.addresses import addresses_bp
    from app.blueprints.orders import orders_bp
    from app.blueprints.admin import admin_bp
    from app.blueprints.metrics import metrics_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(catalog_bp)
    app.register_blueprint(cart_bp)
    app.register_blueprint(addresses_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(metrics_bp)

    # Register CLI commands
    from app.cli_commands import init_cli_commands
    init_cli_commands(app)

    return app
