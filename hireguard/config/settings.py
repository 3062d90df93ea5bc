"""
Configuration Classes for hireguard

This module implements environment-specific settings (Development, Testing, Production)
for the profile validation and error handling layer. Values are read from environment
variables loaded via python-dotenv, so a local `.env` file can override any of them.

Key Components:
- BaseConfig with the settings shared by every environment
- Environment-specific subclasses selected through get_config()
- validate_configuration() returning a list of human-readable issues
- create_app_config() refusing invalid configuration outside debug mode

Environment Variables:
    HIREGUARD_ENV / FLASK_ENV: environment name (development, testing, production)
    LOG_LEVEL, LOG_FORMAT: structured logging level and renderer (json, console)
    LOG_COLORS: colored console renderer output (true/false)
    ERROR_REPORTING_MODE: 'console' or 'remote'
    ERROR_REPORTING_ENDPOINT: URL the remote error logger POSTs to
    ERROR_REPORTING_TIMEOUT: remote delivery timeout in seconds
    ERROR_REPORTING_WORKERS, ERROR_REPORTING_MAX_PENDING: remote delivery pool and backlog limit
    RETRY_MAX_ATTEMPTS, RETRY_DELAY_SECONDS: retry handler policy
    PROFILE_PICTURE_MAX_BYTES, PROFILE_PICTURE_MIN_BYTES: upload size limits
"""

import logging
import os
from typing import Dict, List, Optional, Type

from dotenv import load_dotenv

from hireguard.business.exceptions import ConfigurationError

# Load environment variables early
load_dotenv()

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ('1', 'true', 'yes', 'on')


class BaseConfig:
    """
    Base configuration class providing common settings for all environments.

    Subclasses only override what differs; everything else is inherited so the
    structure of every environment stays identical.
    """

    # Application Metadata
    APP_NAME = os.getenv('APP_NAME', 'hireguard')
    APP_VERSION = os.getenv('APP_VERSION', '1.0.0')

    ENVIRONMENT = 'base'
    DEBUG = False
    TESTING = False

    # Structured Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
    LOG_FORMAT = os.getenv('LOG_FORMAT', 'json')
    LOG_COLORS = _env_bool('LOG_COLORS', 'true')

    # Error Reporting
    ERROR_REPORTING_MODE = os.getenv('ERROR_REPORTING_MODE', 'console')
    ERROR_REPORTING_ENDPOINT = os.getenv(
        'ERROR_REPORTING_ENDPOINT', 'http://localhost:8000/api/errors'
    )
    ERROR_REPORTING_TIMEOUT = float(os.getenv('ERROR_REPORTING_TIMEOUT', '5.0'))
    ERROR_REPORTING_WORKERS = int(os.getenv('ERROR_REPORTING_WORKERS', '2'))
    ERROR_REPORTING_MAX_PENDING = int(os.getenv('ERROR_REPORTING_MAX_PENDING', '100'))

    # Retry Policy
    RETRY_MAX_ATTEMPTS = int(os.getenv('RETRY_MAX_ATTEMPTS', '3'))
    RETRY_DELAY_SECONDS = float(os.getenv('RETRY_DELAY_SECONDS', '1.0'))

    # Profile Picture Uploads
    PROFILE_PICTURE_MAX_BYTES = int(os.getenv('PROFILE_PICTURE_MAX_BYTES', str(5 * 1024 * 1024)))
    PROFILE_PICTURE_MIN_BYTES = int(os.getenv('PROFILE_PICTURE_MIN_BYTES', '1024'))

    # Flask JSON Configuration
    JSON_SORT_KEYS = False


class DevelopmentConfig(BaseConfig):
    """
    Development environment configuration.

    Console-rendered logs and local console error reporting so failures are
    visible in the terminal running the service.
    """

    ENVIRONMENT = 'development'
    DEBUG = True
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'DEBUG').upper()
    LOG_FORMAT = os.getenv('LOG_FORMAT', 'console')
    ERROR_REPORTING_MODE = os.getenv('ERROR_REPORTING_MODE', 'console')


class TestingConfig(BaseConfig):
    """
    Testing environment configuration optimized for automated testing.

    No remote delivery and no backoff delay so test runs stay fast and isolated.
    """

    ENVIRONMENT = 'testing'
    DEBUG = True
    TESTING = True
    LOG_LEVEL = 'DEBUG'
    LOG_FORMAT = 'console'
    LOG_COLORS = False
    ERROR_REPORTING_MODE = 'console'
    RETRY_DELAY_SECONDS = 0.0


class ProductionConfig(BaseConfig):
    """Production environment configuration with remote error reporting."""

    ENVIRONMENT = 'production'
    LOG_FORMAT = os.getenv('LOG_FORMAT', 'json')
    ERROR_REPORTING_MODE = os.getenv('ERROR_REPORTING_MODE', 'remote')


config_map: Dict[str, Type[BaseConfig]] = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
}


def get_config(environment: Optional[str] = None) -> Type[BaseConfig]:
    """
    Get configuration class for the specified environment.

    Args:
        environment: Target environment name (defaults to HIREGUARD_ENV, then FLASK_ENV)

    Returns:
        Configuration class for the specified environment

    Raises:
        ConfigurationError: If environment is not supported
    """
    if environment is None:
        environment = os.getenv('HIREGUARD_ENV') or os.getenv('FLASK_ENV', 'development')

    environment = environment.lower()

    if environment not in config_map:
        raise ConfigurationError(
            f"Unsupported environment '{environment}'. "
            f"Supported environments: {list(config_map.keys())}"
        )

    config_class = config_map[environment]

    logger.debug(
        "Configuration class selected",
        extra={'environment': environment, 'config_class': config_class.__name__}
    )

    return config_class


def validate_configuration(config: Type[BaseConfig]) -> List[str]:
    """
    Validate configuration settings and return list of issues.

    Args:
        config: Configuration class to validate

    Returns:
        List of validation error messages (empty if valid)
    """
    issues = []

    if config.ERROR_REPORTING_MODE not in ('console', 'remote'):
        issues.append("ERROR_REPORTING_MODE must be 'console' or 'remote'")

    if config.ERROR_REPORTING_MODE == 'remote' and not config.ERROR_REPORTING_ENDPOINT.startswith(
        ('http://', 'https://')
    ):
        issues.append("ERROR_REPORTING_ENDPOINT must be an absolute HTTP/HTTPS URL")

    if config.ERROR_REPORTING_TIMEOUT <= 0:
        issues.append("ERROR_REPORTING_TIMEOUT must be positive")

    if config.ERROR_REPORTING_MAX_PENDING < 1:
        issues.append("ERROR_REPORTING_MAX_PENDING must be at least 1")

    if config.RETRY_MAX_ATTEMPTS < 1:
        issues.append("RETRY_MAX_ATTEMPTS must be at least 1")

    if config.RETRY_DELAY_SECONDS < 0:
        issues.append("RETRY_DELAY_SECONDS cannot be negative")

    if config.LOG_FORMAT not in ('json', 'console'):
        issues.append("LOG_FORMAT must be 'json' or 'console'")

    if config.PROFILE_PICTURE_MIN_BYTES >= config.PROFILE_PICTURE_MAX_BYTES:
        issues.append("PROFILE_PICTURE_MIN_BYTES must be smaller than PROFILE_PICTURE_MAX_BYTES")

    return issues


def create_app_config(environment: Optional[str] = None) -> Type[BaseConfig]:
    """
    Factory function to select and validate application configuration.

    Raises:
        ConfigurationError: If validation fails outside debug mode
    """
    config_class = get_config(environment)
    issues = validate_configuration(config_class)

    if issues and not config_class.DEBUG:
        raise ConfigurationError(f"Configuration validation failed: {'; '.join(issues)}")
    elif issues:
        logger.warning(
            "Configuration validation warnings (ignored in debug mode)",
            extra={'issues': issues}
        )

    return config_class


__all__ = [
    'BaseConfig',
    'DevelopmentConfig',
    'TestingConfig',
    'ProductionConfig',
    'config_map',
    'get_config',
    'validate_configuration',
    'create_app_config',
]
