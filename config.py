import os
from decimal import Decimal
from dotenv import load_dotenv

load_dotenv()

basedir = os.path.abspath(os.path.dirname(__file__))

class Config:
    """Base configuration class."""
    # Divisors used to derive hourly and daily rates from a monthly salary
    PAYROLL_WORKING_HOURS_PER_MONTH = Decimal(os.environ.get('PAYROLL_WORKING_HOURS_PER_MONTH') or '176')
    PAYROLL_WORKING_DAYS_PER_MONTH = Decimal(os.environ.get('PAYROLL_WORKING_DAYS_PER_MONTH') or '22')
    PAYROLL_OVERTIME_MULTIPLIER = Decimal(os.environ.get('PAYROLL_OVERTIME_MULTIPLIER') or '1.25')

    # Logging
    LOG_TO_STDOUT = os.environ.get('LOG_TO_STDOUT')
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'
    LOG_DIR = os.path.join(basedir, 'logs')

    @staticmethod
    def init_app(app):
        """Initialize application-specific configuration."""
        import logging
        from logging import StreamHandler

        formatter = logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        )
        level = app.config.get('LOG_LEVEL', 'INFO').upper()

        if app.config.get('LOG_TO_STDOUT'):
            stream_handler = StreamHandler()
            stream_handler.setFormatter(formatter)
            stream_handler.setLevel(level)
            app.logger.addHandler(stream_handler)
        elif not app.debug and not app.testing:
            # Production logging
            log_dir = app.config.get('LOG_DIR', 'logs')
            if not os.path.exists(log_dir):
                os.mkdir(log_dir)
            file_handler = logging.FileHandler(os.path.join(log_dir, 'payroll.log'))
            file_handler.setFormatter(formatter)
            file_handler.setLevel(level)
            app.logger.addHandler(file_handler)
            # Engine modules log under the package namespace
            logging.getLogger('ph_payroll').addHandler(file_handler)

        app.logger.setLevel(level)
        app.logger.info('Payroll engine startup')

class DevelopmentConfig(Config):
    DEBUG = True
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'DEBUG'

class TestingConfig(Config):
    TESTING = True
    # Fixed defaults so tests don't depend on the local .env
    PAYROLL_WORKING_HOURS_PER_MONTH = Decimal('176')
    PAYROLL_WORKING_DAYS_PER_MONTH = Decimal('22')
    PAYROLL_OVERTIME_MULTIPLIER = Decimal('1.25')

class ProductionConfig(Config):
    DEBUG = False

    @staticmethod
    def init_app(app):
        """Initialize production configuration with validation."""
        Config.init_app(app)  # Call parent init_app for logging

        # A zero divisor would turn every rate into Infinity
        for key in ('PAYROLL_WORKING_HOURS_PER_MONTH', 'PAYROLL_WORKING_DAYS_PER_MONTH'):
            if app.config[key] <= 0:
                raise ValueError(f"{key} must be greater than zero in production!")

        if app.config['PAYROLL_OVERTIME_MULTIPLIER'] < 1:
            raise ValueError("PAYROLL_OVERTIME_MULTIPLIER cannot be below 1 in production!")

config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}
