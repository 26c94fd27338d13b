"""
Application configuration loaded from the environment (.env supported)
"""
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or not value.strip():
        return None
    return float(value)


@dataclass
class Settings:
    db_path: str = "luxe_storefront.db"
    order_api_url: Optional[str] = None
    order_api_key: str = ""
    order_api_timeout: float = 10
    submit_timeout: Optional[float] = None
    secret_key: str = "your-secret-key-here"
    port: int = 5000
    debug: bool = False
    log_level: str = "INFO"


def load_settings() -> Settings:
    load_dotenv()

    return Settings(
        db_path=os.getenv('LUXE_DB_PATH', 'luxe_storefront.db'),
        order_api_url=os.getenv('ORDER_API_URL') or None,
        order_api_key=os.getenv('ORDER_API_KEY', ''),
        order_api_timeout=float(os.getenv('ORDER_API_TIMEOUT', '10')),
        submit_timeout=_optional_float(os.getenv('ORDER_SUBMIT_TIMEOUT')),
        secret_key=os.getenv('SECRET_KEY', 'your-secret-key-here'),
        port=int(os.getenv('PORT', 5000)),
        debug=os.getenv('DEBUG', 'False').lower() == 'true',
        log_level=os.getenv('LOG_LEVEL', 'INFO').upper()
    )
