# json_utils.py
# gutasync.core.json_utils

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union
from gutasync.core.logger import logger


def load_json(
        file_path: Union[str, Path],
        default: Optional[Any] = None,
        encoding: str = 'utf-8'
) -> Any:
    """
    Загрузить JSON файл

    Args:
        file_path: Путь к JSON файлу
        default: Значение если файла нет или он повреждён
        encoding: Кодировка файла

    Returns:
        Данные из JSON или default

    Raises:
        FileNotFoundError: Файла нет и default не указан
        ValueError: JSON невалидный и default не указан
    """
    file_path = Path(file_path)

    if not file_path.exists():
        if default is not None:
            logger.debug(f"File not found: {file_path}, using default")
            return default
        raise FileNotFoundError(f"File not found: {file_path}")

    try:
        with open(file_path, 'r', encoding=encoding) as f:
            data = json.load(f)
        logger.debug(f"Loaded JSON from {file_path}")
        return data

    except json.JSONDecodeError as e:
        logger.error(f"❌ Invalid JSON in {file_path}: line {e.lineno}, column {e.colno}")
        if default is not None:
            logger.warning("⚠️ Using default value")
            return default
        raise ValueError(f"Invalid JSON: {e}") from e


def save_json(
        file_path: Union[str, Path],
        data: Any,
        indent: int = 2,
        encoding: str = 'utf-8'
) -> None:
    """
    Сохранить данные в JSON файл (директория создаётся при необходимости)
    """
    file_path = Path(file_path)

    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, 'w', encoding=encoding) as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)
        logger.debug(f"Saved JSON to {file_path}")

    except OSError as e:
        logger.error(f"❌ Error saving JSON to {file_path}: {e}")
        raise


def update_json(file_path: Union[str, Path], updates: Dict) -> Dict:
    """
    Обновить ключи в JSON-словаре на диске.

    Returns:
        Итоговый словарь
    """
    data = load_json(file_path, default={})
    if not isinstance(data, dict):
        raise TypeError(f"Can only update dict data in {file_path}")

    data.update(updates)
    save_json(file_path, data)
    return data


def remove_json_key(file_path: Union[str, Path], key: str) -> bool:
    """
    Удалить ключ из JSON-словаря на диске.

    Returns:
        True если ключ был и удалён
    """
    data = load_json(file_path, default={})
    if not isinstance(data, dict) or key not in data:
        return False

    del data[key]
    save_json(file_path, data)
    return True
