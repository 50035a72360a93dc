import logging
import logging.config
from pathlib import Path
from app.core.config import settings


def _build_config(log_level: str, log_dir: str, to_file: bool) -> dict:
    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": log_level,
            "formatter": "detailed",
            "stream": "ext://sys.stdout"
        }
    }
    app_handlers = ["console"]

    if to_file:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": log_level,
            "formatter": "detailed",
            "filename": f"{log_dir}/app.log",
            "maxBytes": 10485760,
            "backupCount": 5
        }
        handlers["error_file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "ERROR",
            "formatter": "detailed",
            "filename": f"{log_dir}/error.log",
            "maxBytes": 10485760,
            "backupCount": 5
        }
        app_handlers = ["console", "file", "error_file"]

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            }
        },
        "handlers": handlers,
        "root": {
            "level": log_level,
            "handlers": app_handlers
        },
        "loggers": {
            "app": {
                "level": log_level,
                "handlers": app_handlers,
                "propagate": False
            },
            "uvicorn.access": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False
            }
        }
    }


def configure_logging():
    if settings.LOG_TO_FILE:
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(
        _build_config(settings.LOG_LEVEL.upper(), settings.LOG_DIR, settings.LOG_TO_FILE)
    )
