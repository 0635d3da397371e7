"""
Logging configuration for the Staffing Dashboard.

Both entry points (the Streamlit dashboard and the Flask API) log to the
console and to a file in the logs/ directory, so a `streamlit run` session
and an API process leave the same trail.
"""

import logging
import sys
from pathlib import Path


def setup_logging(log_level=logging.INFO, log_dir="logs", log_name="dashboard.log"):
    """
    Configure logging for the application.

    Sets up dual output:
    - Console handler: short format for terminal output
    - File handler: detailed, timestamped format in log_dir

    Args:
        log_level: The logging level (int or level name, default: logging.INFO)
        log_dir: Directory for the log file (created if missing)
        log_name: File name of the log file

    Returns:
        logging.Logger: Configured root logger
    """
    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())
        if not isinstance(log_level, int):
            log_level = logging.INFO

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / log_name

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear any existing handlers to avoid duplicates on Streamlit reruns
    logger.handlers.clear()

    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_formatter = logging.Formatter(
        '%(levelname)s - %(message)s'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    # mode='w' starts a fresh file on every restart
    file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
    file_handler.setLevel(log_level)
    file_handler.setFormatter(detailed_formatter)
    logger.addHandler(file_handler)

    logger.info(f"Logging initialized. Log file: {log_file}")
    logger.info(f"Log level: {logging.getLevelName(log_level)}")

    # Route Streamlit's internal loggers to our file as well
    try:
        import streamlit.logger  # noqa: F401

        for logger_name in list(logging.root.manager.loggerDict):
            if logger_name.startswith('streamlit'):
                st_log = logging.getLogger(logger_name)
                st_log.propagate = True
                if not any(isinstance(h, logging.FileHandler) for h in st_log.handlers):
                    st_log.addHandler(file_handler)
    except ImportError:
        logger.warning("Could not import streamlit.logger - Streamlit logs may not be captured")

    return logger


def get_logger(name):
    """
    Get a logger instance for a specific module.

    Args:
        name: The name of the logger (typically __name__)

    Returns:
        logging.Logger: Logger instance for the specified module
    """
    return logging.getLogger(name)
