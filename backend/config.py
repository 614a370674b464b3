import os
from dotenv import load_dotenv

load_dotenv()


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}")


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key')
    DEBUG = os.getenv('FLASK_DEBUG', 'False').lower() == 'true'

    # Records file (required) and department boundaries (optional)
    DATA_CSV_PATH = os.getenv('DATA_CSV_PATH', 'data/data.csv')
    BOUNDARIES_PATH = os.getenv('BOUNDARIES_PATH', 'data/uruguay.geojson')

    # Fixed by configuration - never auto-detected
    CSV_DELIMITER = os.getenv('CSV_DELIMITER', ';')
    CSV_ENCODING = os.getenv('CSV_ENCODING', 'utf-8')

    # Increment analysis window (years) before the user moves the slider
    DEFAULT_WINDOW_YEARS = _get_int('DEFAULT_WINDOW_YEARS', 5)

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
