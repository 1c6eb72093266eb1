"""
Logging for the X.509 toolkit.

Stdout is reserved for command output, so every logger writes to stderr;
X509_LOG_DIR adds one file per logger name.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

from config.x509_config import X509_SETTINGS

LOG_FORMAT = "[%(asctime)s] [%(name)s] [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _handlers(name: str, log_dir: Optional[str], console_output: bool) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []
    if console_output:
        handlers.append(logging.StreamHandler(sys.stderr))
    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path / f"{name}.log", encoding="utf-8"))
    return handlers


class X509Logger:
    """
    Logger factory: one configured logging.Logger per component name.
    """

    _loggers = {}

    @staticmethod
    def get_logger(
        name: str,
        log_dir: Optional[str] = None,
        level: Optional[int] = None,
        console_output: bool = True,
    ) -> logging.Logger:
        """
        Restituisce il logger del componente, creandolo alla prima richiesta.

        Args:
            name: Componente (es. "CertificateParser", "ExtensionDecoder")
            log_dir: Directory dei file di log (default: X509_LOG_DIR)
            level: Livello minimo (default: X509_LOG_LEVEL)
            console_output: Se False, nessun handler su stderr

        Returns:
            Logger con i propri handler, senza propagazione al root logger
        """
        cached = X509Logger._loggers.get(name)
        if cached is not None:
            return cached

        level = X509_SETTINGS.LOG_LEVEL if level is None else level
        if log_dir is None and X509_SETTINGS.LOG_DIR is not None:
            log_dir = str(X509_SETTINGS.LOG_DIR)

        logger = logging.getLogger(name)
        logger.setLevel(level)
        logger.propagate = False
        logger.handlers.clear()

        formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
        for handler in _handlers(name, log_dir, console_output):
            handler.setLevel(level)
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        X509Logger._loggers[name] = logger
        return logger

    @staticmethod
    def set_level(name: str, level: int):
        """Changes the level of a logger already handed out, handlers included."""
        logger = X509Logger._loggers.get(name)
        if logger is None:
            return
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)

    @staticmethod
    def clear_cache():
        """Forgets every logger; file handlers are closed."""
        for logger in X509Logger._loggers.values():
            for handler in logger.handlers:
                if isinstance(handler, logging.FileHandler):
                    handler.close()
        X509Logger._loggers.clear()
