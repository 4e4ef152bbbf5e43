"""
Configuración de la app cargada desde variables de entorno (.env)

Todo lo que varía entre desarrollo/producción va aquí
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db_name: str = "focusboard"  # Nombre de la base de datos

    # App
    app_env: str = "development"  # o "production"
    debug: bool = False
    log_level: str = "INFO"

    # CORS - de dónde pueden venir los requests
    cors_origins: str = "http://localhost:3000"  # URLs separadas por coma

    # ==================== Leaderboards ====================
    # Cantidad máxima de entradas que devuelve cada leaderboard
    leaderboard_cap: int = 10

    # Radio regional en metros (15 millas)
    regional_radius_meters: float = 24140.0

    # Candidatos que se leen del directorio para el all-time global
    # (se piden más de los necesarios por si algunos hicieron opt-out)
    all_time_candidate_limit: int = 100

    # Zona horaria en la que empieza la semana (lunes 00:00)
    week_timezone: str = "UTC"

    # Sesiones sin wasSuccessful: se consideran exitosas si
    # actualDuration >= threshold * duration
    success_ratio_threshold: float = 0.9

    # Etiqueta cuando no hay ubicación de referencia
    region_unknown_label: str = "Your Area"

    class Config:
        env_file = ".env"  # Lee desde el archivo .env
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignora campos extras del .env que no estén en el modelo


@lru_cache()
def get_settings() -> Settings:
    """Retorna la instancia de configuración (cacheada para no releerla)"""
    return Settings()
