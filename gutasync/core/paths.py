# paths.py
# gutasync.core.paths

from pathlib import Path

# Корневая директория проекта
ROOT_DIR = Path(__file__).parent.parent.parent

# Основные директории
CONFIG_DIR = ROOT_DIR / "config"
LOGS_DIR = ROOT_DIR / "logs"

# Файлы конфигурации
GENERAL_SETTINGS_FILE = CONFIG_DIR / "general_settings.json"

# Файл .env (в корне проекта)
ENV_FILE = ROOT_DIR / ".env"

# Файлы логов
MAIN_LOG_FILE = LOGS_DIR / "gutasync.log"
SYNC_LOG_FILE = LOGS_DIR / "sync.log"
PRICES_LOG_FILE = LOGS_DIR / "prices.log"
ERRORS_LOG_FILE = LOGS_DIR / "errors.log"


if __name__ == "__main__":
    print("=" * 60)
    print("📁 Project Paths Configuration")
    print("=" * 60)
    print(f"Root Directory:       {ROOT_DIR}")
    print(f"Config Directory:     {CONFIG_DIR}")
    print(f"Logs Directory:       {LOGS_DIR}")
    print(f"General Settings:     {GENERAL_SETTINGS_FILE}")
    print(f"Environment File:     {ENV_FILE}")
    print("=" * 60)
