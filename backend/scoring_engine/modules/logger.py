"""
Engine Logger - Quiet background logging for scoring runs
Optionally saves a timestamped debug log without cluttering the console
"""

import logging
import os
from datetime import datetime
from typing import Optional

ENGINE_LOGGER_NAME = 'scoring_engine'


class EngineLogger:
    """
    Logger for the scoring engine package.
    Console shows warnings and errors only.
    An optional log file captures everything, including per-question debug output.
    """

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if EngineLogger._initialized:
            return

        # Parent of every scoring_engine.* module logger
        self.logger = logging.getLogger(ENGINE_LOGGER_NAME)
        self.logger.setLevel(logging.DEBUG)
        self.file_handler = None
        self.log_file_path = None

        self.console_handler = logging.StreamHandler()
        self.console_handler.setLevel(logging.WARNING)
        self.console_handler.setFormatter(logging.Formatter('[%(levelname)s] %(message)s'))
        self.logger.addHandler(self.console_handler)

        EngineLogger._initialized = True

    def setup_for_run(self, log_dir: str, run_name: str) -> str:
        """
        Start a log file for a scoring run.

        Args:
            log_dir: Directory to write the log into (created if missing)
            run_name: Used in the log file name

        Returns:
            Path of the new log file
        """
        if self.file_handler:
            self.logger.removeHandler(self.file_handler)
            self.file_handler.close()

        os.makedirs(log_dir, exist_ok=True)

        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        safe_name = ''.join(ch if ch.isalnum() or ch in '-_' else '_' for ch in run_name)
        self.log_file_path = os.path.join(log_dir, f"scoring_{safe_name}_{timestamp}.log")

        self.file_handler = logging.FileHandler(self.log_file_path, encoding='utf-8')
        self.file_handler.setLevel(logging.DEBUG)
        self.file_handler.setFormatter(logging.Formatter(
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        self.logger.addHandler(self.file_handler)

        self.info(f"=== Scoring Log Started for {run_name} ===")
        return self.log_file_path

    def close(self):
        """Detach and close the file handler, if any"""
        if self.file_handler:
            self.logger.removeHandler(self.file_handler)
            self.file_handler.close()
            self.file_handler = None

    def debug(self, msg: str, *args):
        self.logger.debug(msg, *args)

    def info(self, msg: str, *args):
        self.logger.info(msg, *args)

    def warning(self, msg: str, *args):
        self.logger.warning(msg, *args)

    def error(self, msg: str, *args):
        self.logger.error(msg, *args)

    def step_start(self, step_name: str):
        self.info(f">>> STEP START: {step_name}")

    def step_end(self, step_name: str, success: bool = True, details: str = None):
        status = "SUCCESS" if success else "FAILED"
        detail_str = f" - {details}" if details else ""
        self.info(f"<<< STEP END: {step_name} [{status}]{detail_str}")

    def get_log_path(self) -> Optional[str]:
        return self.log_file_path


_logger = None


def get_logger() -> EngineLogger:
    """Get the global engine logger instance"""
    global _logger
    if _logger is None:
        _logger = EngineLogger()
    return _logger


def setup_logging(log_dir: str, run_name: str) -> EngineLogger:
    """Convenience function to start a log file for a run"""
    logger = get_logger()
    logger.setup_for_run(log_dir, run_name)
    return logger
