"""
Configuración centralizada de la aplicación.

Este módulo maneja todas las variables de entorno y configuraciones
de la aplicación usando Pydantic Settings para validación automática.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Configuración de la aplicación usando Pydantic Settings.

    Todas las configuraciones se cargan desde variables de entorno
    con valores por defecto apropiados para desarrollo.
    """

    # === CONFIGURACIÓN BÁSICA DE LA APP ===
    APP_NAME: str = "eShopaid-Shopify Integration"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = Field(default="development", alias="ENV")
    DEBUG: bool = Field(default=True)

    # === CONFIGURACIÓN DEL SERVIDOR ===
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=3000)
    LOG_LEVEL: str = Field(default="INFO")
    ENABLE_DOCS: bool = Field(default=True)

    # === CONFIGURACIÓN DE ESHOPAID (ERP) ===
    ESHOPAID_SERVER_URL: str = Field(default="http://localhost/eShopaidService.svc")
    ESHOPAID_TOKEN_ENDPOINT: str = Field(default="/Token")
    ESHOPAID_PROCESS_DATA_ENDPOINT: str = Field(default="/ProcessData")
    ESHOPAID_USERNAME: str = Field(default="")
    ESHOPAID_PASSWORD: str = Field(default="")
    # Código de tienda/ubicación por defecto (AlternateStoreCode)
    ESHOPAID_STORE_LOCATION: str = Field(default="HO")
    ESHOPAID_SOURCE_CHANNEL: str = Field(default="Shopify")
    # El token de eShopaid vive 30 minutos
    ESHOPAID_TOKEN_LIFETIME_MINUTES: int = Field(default=30)
    # Refrescar 5 minutos antes de que expire
    ESHOPAID_TOKEN_REFRESH_BUFFER_MINUTES: int = Field(default=5)
    # Timeout total de la sesión HTTP en segundos
    ESHOPAID_REQUEST_TIMEOUT: int = Field(default=30)

    # === CONFIGURACIÓN DE SHOPIFY ===
    SHOPIFY_WEBHOOK_SECRET: Optional[str] = Field(default=None)

    # === CONFIGURACIÓN DE SINCRONIZACIÓN ===
    ENABLE_WEBHOOKS: bool = Field(default=True)
    # <= 0 desactiva la sincronización periódica de inventario
    INVENTORY_SYNC_INTERVAL_MINUTES: int = Field(default=15)

    # === CONFIGURACIÓN DE LOGGING ===
    LOG_FILE_PATH: Optional[str] = Field(default="logs/app.log")
    LOG_MAX_SIZE_MB: int = Field(default=10)
    LOG_BACKUP_COUNT: int = Field(default=5)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "populate_by_name": True,
        "extra": "allow",  # Permitir valores extra para flexibilidad futura
    }

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Valida que el nivel de log sea válido."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL debe ser uno de: {valid_levels}")
        return v.upper()

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v):
        """Valida que el entorno sea válido."""
        valid_envs = ["development", "staging", "production", "testing"]
        if v.lower() not in valid_envs:
            raise ValueError(f"ENVIRONMENT debe ser uno de: {valid_envs}")
        return v.lower()

    @field_validator("PORT")
    @classmethod
    def validate_port(cls, v):
        """Valida que el puerto esté en rango válido."""
        if not 1 <= v <= 65535:
            raise ValueError("PORT debe estar entre 1 y 65535")
        return v

    @field_validator("ESHOPAID_SERVER_URL")
    @classmethod
    def validate_server_url(cls, v):
        """Normaliza la URL base de eShopaid (sin slash final)."""
        if not v.startswith(("http://", "https://")):
            v = f"http://{v}"
        return v.rstrip("/")

    @field_validator("ESHOPAID_TOKEN_ENDPOINT", "ESHOPAID_PROCESS_DATA_ENDPOINT")
    @classmethod
    def validate_endpoint_path(cls, v):
        """Asegura que los paths de endpoint empiecen con '/'."""
        return v if v.startswith("/") else f"/{v}"

    @model_validator(mode="after")
    def validate_token_window(self):
        """El buffer de refresco debe ser menor que la vida del token."""
        if self.ESHOPAID_TOKEN_LIFETIME_MINUTES <= 0:
            raise ValueError("ESHOPAID_TOKEN_LIFETIME_MINUTES debe ser mayor que 0")
        if not 0 <= self.ESHOPAID_TOKEN_REFRESH_BUFFER_MINUTES < self.ESHOPAID_TOKEN_LIFETIME_MINUTES:
            raise ValueError(
                "ESHOPAID_TOKEN_REFRESH_BUFFER_MINUTES debe estar entre 0 y ESHOPAID_TOKEN_LIFETIME_MINUTES"
            )
        return self

    @property
    def is_production(self) -> bool:
        """Verifica si está en entorno de producción."""
        return self.ENVIRONMENT == "production"

    @property
    def is_development(self) -> bool:
        """Verifica si está en entorno de desarrollo."""
        return self.ENVIRONMENT == "development"

    @property
    def eshopaid_token_url(self) -> str:
        """URL completa del endpoint de emisión de tokens."""
        return f"{self.ESHOPAID_SERVER_URL}{self.ESHOPAID_TOKEN_ENDPOINT}"

    @property
    def eshopaid_process_data_url(self) -> str:
        """URL completa del endpoint de procesamiento de datos."""
        return f"{self.ESHOPAID_SERVER_URL}{self.ESHOPAID_PROCESS_DATA_ENDPOINT}"

    @property
    def inventory_sync_enabled(self) -> bool:
        """Indica si la sincronización periódica de inventario está activa."""
        return self.INVENTORY_SYNC_INTERVAL_MINUTES > 0


@lru_cache()
def get_settings() -> Settings:
    """
    Obtiene instancia singleton de configuración.

    Usa LRU cache para evitar recrear la configuración
    múltiples veces durante la ejecución.

    Returns:
        Settings: Instancia de configuración
    """
    return Settings()


def reload_settings() -> Settings:
    """
    Recarga la configuración (útil para testing).

    Returns:
        Settings: Nueva instancia de configuración
    """
    get_settings.cache_clear()
    return get_settings()


def validate_required_settings() -> bool:
    """
    Valida que todas las configuraciones requeridas estén presentes.

    Returns:
        bool: True si todas las configuraciones están presentes

    Raises:
        ValueError: Si alguna configuración requerida falta
    """
    settings = get_settings()

    required_fields = [
        "ESHOPAID_SERVER_URL",
        "ESHOPAID_USERNAME",
        "ESHOPAID_PASSWORD",
        "ESHOPAID_STORE_LOCATION",
    ]

    missing_fields = []
    for field in required_fields:
        value = getattr(settings, field, None)
        if not value or (isinstance(value, str) and not value.strip()):
            missing_fields.append(field)

    if missing_fields:
        raise ValueError(f"Configuraciones requeridas faltantes: {missing_fields}")

    return True


def get_environment_info() -> dict:
    """
    Obtiene información del entorno actual.

    Returns:
        dict: Información del entorno
    """
    settings = get_settings()

    return {
        "app_name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "debug": settings.DEBUG,
        "eshopaid_server": settings.ESHOPAID_SERVER_URL,
        "store_location": settings.ESHOPAID_STORE_LOCATION,
        "features": {
            "webhooks": settings.ENABLE_WEBHOOKS,
            "inventory_sync": settings.inventory_sync_enabled,
            "inventory_sync_interval_minutes": settings.INVENTORY_SYNC_INTERVAL_MINUTES,
            "webhook_signature_check": bool(settings.SHOPIFY_WEBHOOK_SECRET),
            "docs": settings.ENABLE_DOCS,
        },
    }
