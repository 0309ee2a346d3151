import json
import logging
import logging.config
import sys

from core.config import configs


class JsonFormatter(logging.Formatter):
    """
    Formatter for logging in JSON format.
    """

    def format(self, record):
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(log_record, ensure_ascii=False)


def _loggers(handler: str, app_level: str) -> dict:
    return {
        # Application loggers
        "gallery": {
            "level": app_level,
            "handlers": [handler],
            "propagate": False,
        },
        "core": {
            "level": app_level,
            "handlers": [handler],
            "propagate": False,
        },
        "api": {
            "level": app_level,
            "handlers": [handler],
            "propagate": False,
        },
        # Uvicorn (FastAPI Server) Loggers
        "uvicorn": {
            "level": "INFO",
            "handlers": [handler],
            "propagate": False,
        },
        "uvicorn.access": {
            "level": "INFO",
            "handlers": [handler],
            "propagate": False,
        },
        "uvicorn.error": {
            "level": "INFO",
            "handlers": [handler],
            "propagate": False,
        },
        # External Libraries Noise Reduction
        "multipart": {
            "level": "WARNING",
            "handlers": [handler],
            "propagate": False,
        },
        "python_multipart": {
            "level": "WARNING",
            "handlers": [handler],
            "propagate": False,
        },
    }


# -----------------------------------------------------------------------------
# Development Logging Configuration
# -----------------------------------------------------------------------------
# Console-friendly, readable text format.
DEV_LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "stream": sys.stdout,
            "formatter": "default",
        },
    },
    "root": {
        "level": configs.LOG_LEVEL,
        "handlers": ["console"],
    },
    "loggers": _loggers("console", configs.LOG_LEVEL),
}

# -----------------------------------------------------------------------------
# Production Logging Configuration
# -----------------------------------------------------------------------------
# JSON structured, machine-parsable, suitable for aggregation.
PROD_LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "()": JsonFormatter,
            "datefmt": "%Y-%m-%dT%H:%M:%S%z",
        },
    },
    "handlers": {
        "console_json": {
            "class": "logging.StreamHandler",
            "stream": sys.stdout,
            "formatter": "json",
        },
    },
    "root": {
        "level": configs.LOG_LEVEL,
        "handlers": ["console_json"],
    },
    "loggers": _loggers("console_json", configs.LOG_LEVEL),
}


def setup_logging():
    """
    Set up logging configuration based on the environment.
    """
    env = configs.ENVIRONMENT.lower()

    if env == "production":
        log_config = PROD_LOGGING_CONFIG
    else:
        log_config = DEV_LOGGING_CONFIG

    logging.config.dictConfig(log_config)

    logger = logging.getLogger("gallery")
    logger.info(f"Logging setup complete for {env} environment with level {configs.LOG_LEVEL}")
