# gm3d/logging_config.py
"""
Налаштування логування для простору імен 'gm3d'.
Бібліотека сама хендлерів не вішає, це робить застосунок (або приклади) через setup_logging().
"""
from __future__ import annotations

import logging
import sys
from typing import Optional


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Налаштувати логер пакета 'gm3d'.

    Args:
        level: рівень логування (logging.DEBUG, logging.INFO, ...)
        log_file: необов'язковий шлях до файлу логів.
    """
    logger = logging.getLogger("gm3d")
    logger.setLevel(level)

    # повторний виклик не повинен дублювати повідомлення чи лишати відкриті файли
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
    return logger
