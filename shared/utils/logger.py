"""
Logging utilities for the Pecha gateway

Provides centralized logging configuration and utilities.
"""

import os
import time
import logging
import logging.config
from copy import deepcopy
from typing import Optional, Dict, Any
import yaml
from pathlib import Path

# Default logging configuration
DEFAULT_LOGGING_CONFIG = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'default': {
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S'
        },
        'detailed': {
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(module)s - %(funcName)s - %(lineno)d - %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S'
        },
        'json': {
            'format': '{"timestamp": "%(asctime)s", "logger": "%(name)s", "level": "%(levelname)s", "message": "%(message)s"}',
            'datefmt': '%Y-%m-%d %H:%M:%S'
        }
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'level': 'INFO',
            'formatter': 'default',
            'stream': 'ext://sys.stdout'
        }
    },
    'root': {
        'level': 'INFO',
        'handlers': ['console']
    },
    'loggers': {
        'pecha_gateway': {
            'level': 'INFO',
            'handlers': ['console'],
            'propagate': False
        }
    }
}

SHARED_CONFIG_PATH = Path(__file__).parent.parent / "configs" / "logging.yml"


def load_logging_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load a dictConfig mapping

    Args:
        config_path: Path to a YAML logging configuration file

    Returns:
        The first configuration found among the given path, the shared
        configs/logging.yml and the built-in default
    """
    for candidate in (config_path, SHARED_CONFIG_PATH):
        if not candidate or not os.path.exists(candidate):
            continue
        try:
            with open(candidate, 'r') as f:
                config = yaml.safe_load(f)
            if config:
                return config
        except (OSError, yaml.YAMLError) as e:
            print(f"Failed to load logging config from {candidate}: {e}")

    return deepcopy(DEFAULT_LOGGING_CONFIG)


def setup_logging(
    config_path: Optional[str] = None,
    log_level: Optional[str] = None,
    log_format: Optional[str] = None
) -> Dict[str, Any]:
    """
    Setup logging configuration

    Args:
        config_path: Path to logging configuration file
        log_level: Override log level
        log_format: Override log format ('default', 'detailed', 'json')

    Returns:
        The configuration that was applied
    """
    config = load_logging_config(config_path)

    # Apply environment-specific overrides
    environment = os.getenv('ENVIRONMENT', 'development')
    env_config = config.pop('environments', {}).get(environment, {})
    if 'handlers' in env_config:
        config['handlers'].update(env_config['handlers'])
    if 'loggers' in env_config:
        config['loggers'].update(env_config['loggers'])

    # Override log level if specified
    if log_level:
        log_level = log_level.upper()
        for logger_config in config.get('loggers', {}).values():
            logger_config['level'] = log_level
        if 'root' in config:
            config['root']['level'] = log_level
        for handler_config in config['handlers'].values():
            handler_config['level'] = log_level

    # Override log format if specified
    if log_format and log_format in config['formatters']:
        for handler_config in config['handlers'].values():
            handler_config['formatter'] = log_format

    try:
        logging.config.dictConfig(config)
    except (ValueError, TypeError, AttributeError, ImportError) as e:
        print(f"Failed to configure logging: {e}")
        logging.basicConfig(
            level=getattr(logging, log_level or 'INFO', logging.INFO),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    return config


def get_logger(name: str) -> logging.Logger:
    """
    Get logger instance

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


class RequestLogger:
    """Logger for HTTP requests"""

    def __init__(self, name: str = "pecha_gateway.requests"):
        self.logger = logging.getLogger(name)

    def log_request(
        self,
        method: str,
        url: str,
        status_code: int,
        response_time: float,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None
    ):
        """Log HTTP request"""
        self.logger.info(
            f"{method} {url} {status_code} {response_time:.3f}s",
            extra={
                'request_method': method,
                'request_url': url,
                'response_status': status_code,
                'response_time': response_time,
                'ip_address': ip_address,
                'user_agent': user_agent,
                'event_type': 'http_request'
            }
        )


class AuditLogger:
    """Logger for resources submitted upstream"""

    def __init__(self, name: str = "pecha_gateway.audit"):
        self.logger = logging.getLogger(name)

    def log_resource_created(
        self,
        resource: str,
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None
    ):
        """Log a resource created through the gateway"""
        self.logger.info(
            f"Created {resource} {resource_id or '<unknown id>'}",
            extra={
                'resource': resource,
                'resource_id': resource_id,
                'details': details or {},
                'ip_address': ip_address,
                'event_type': 'resource_created'
            }
        )


class PerformanceLogger:
    """Logger for performance metrics"""

    def __init__(self, name: str = "pecha_gateway.performance"):
        self.logger = logging.getLogger(name)

    def log_performance(
        self,
        operation: str,
        duration: float,
        component: str,
        details: Optional[Dict[str, Any]] = None
    ):
        """Log performance metrics"""
        self.logger.info(
            f"Performance: {operation} took {duration:.3f}s in {component}",
            extra={
                'operation': operation,
                'duration': duration,
                'component': component,
                'details': details or {},
                'event_type': 'performance'
            }
        )


def get_request_logger() -> RequestLogger:
    """Get request logger instance"""
    return RequestLogger()


def get_audit_logger() -> AuditLogger:
    """Get audit logger instance"""
    return AuditLogger()


def get_performance_logger() -> PerformanceLogger:
    """Get performance logger instance"""
    return PerformanceLogger()


class performance_timer:
    """Context manager for timing operations"""

    def __init__(self, operation: str, component: str, logger: Optional[PerformanceLogger] = None):
        self.operation = operation
        self.component = component
        self.logger = logger or get_performance_logger()
        self.start_time = None
        self.duration = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = time.perf_counter() - self.start_time
        details = {'failed': exc_type is not None}
        self.logger.log_performance(self.operation, self.duration, self.component, details)


def init_logging():
    """Initialize logging with environment variables"""
    config_path = os.getenv('LOGGING_CONFIG_PATH')
    log_level = os.getenv('LOG_LEVEL', 'INFO')
    log_format = os.getenv('LOG_FORMAT', 'default')

    setup_logging(config_path, log_level, log_format)
