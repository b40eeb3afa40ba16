"""Настройка логирования для точек входа (GUI и CLI).

Модули библиотеки только получают логгер через `logging.getLogger(__name__)`;
обработчики настраиваются здесь и не при импорте.
"""
from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str | int = "INFO") -> None:
    """Подключает один потоковый обработчик к корневому логгеру.

    Args:
        level: Уровень в виде имени ("DEBUG", "INFO", ...) или числа.
    """
    if isinstance(level, str):
        numeric = logging.getLevelName(level.upper())
        if not isinstance(numeric, int):
            raise ValueError(f"Неизвестный уровень логирования: {level}")
        level = numeric

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)

    # Pillow пишет много отладочных сообщений при открытии файлов
    logging.getLogger("PIL").setLevel(logging.WARNING)
