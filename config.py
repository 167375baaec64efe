import os
from decimal import Decimal


def _env_bool(key: str, default: bool = False) -> bool:
    value = os.environ.get(key)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "t", "yes", "y"}


BASE_DIR = os.path.abspath(os.path.dirname(__file__))


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key")

    SQLALCHEMY_DATABASE_URI = (
        os.environ.get("SQLALCHEMY_DATABASE_URI")
        or os.environ.get("DATABASE_URL")
        or "sqlite:///" + os.path.join(BASE_DIR, "matriculas.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = _env_bool("SQLALCHEMY_ECHO", False)

    # IVA aplicado sobre el subtotal (horas + materiales)
    VAT_RATE = Decimal(os.environ.get("VAT_RATE", "0.15"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
