# ph_payroll/__init__.py
import logging
from flask import Flask
from config import config

# Library use (without create_app) stays silent unless the caller configures logging
logging.getLogger(__name__).addHandler(logging.NullHandler())

def create_app(config_name='default'):
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config[config_name])

    # Initialize app-specific configuration (logging, etc.)
    config[config_name].init_app(app)

    # --- Register Blueprints ---
    from .payroll import bp as payroll_bp
    app.register_blueprint(payroll_bp)

    return app
