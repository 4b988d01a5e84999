import os


class Config:
    # Flask
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Freightos – publiczny kalkulator (bez klucza, limit ~100 zapytań/h na IP)
    FREIGHTOS_API_URL = os.environ.get(
        "FREIGHTOS_API_URL", "https://ship.freightos.com/api/shippingCalculator"
    )

    # Relay – klient wycen nigdy nie woła Freightos bezpośrednio, tylko przez /api/freight
    FREIGHT_RELAY_BASE_URL = os.environ.get("FREIGHT_RELAY_BASE_URL", "http://127.0.0.1:5000")
    FREIGHT_RELAY_PATH = os.environ.get("FREIGHT_RELAY_PATH", "/api/freight")
    FREIGHT_TIMEOUT = float(os.environ.get("FREIGHT_TIMEOUT", "30"))
    FREIGHT_DEFAULT_MODE = os.environ.get("FREIGHT_DEFAULT_MODE", "air")
    FREIGHT_DEFAULT_LOADTYPE = os.environ.get("FREIGHT_DEFAULT_LOADTYPE", "boxes")

    # Backend taryfowy (liczy cło – tutaj tylko konsumujemy wynik)
    TARIFF_API_BASE_URL = os.environ.get("TARIFF_API_BASE_URL", "http://localhost:8080")
    TARIFF_API_TOKEN = os.environ.get("TARIFF_API_TOKEN", "")
    TARIFF_TIMEOUT = float(os.environ.get("TARIFF_TIMEOUT", "60"))

    # Porównanie krajów
    DEFAULT_INSURANCE_RATE = float(os.environ.get("DEFAULT_INSURANCE_RATE", "0.5"))  # w %
    COMPARISON_MAX_WORKERS = int(os.environ.get("COMPARISON_MAX_WORKERS", "4"))
