# previdencia/config.py
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    # --- Identificação do Ambiente ---
    APP_NAME: str = "Simulador Previdenciário - Motor de RMI"

    # --- Logs ---
    LOG_LEVEL: str = "INFO"
    # Se informado, grava também em arquivo (rotação de 10 MB, 30 dias)
    LOG_DIR: Optional[str] = None

    # --- Motor de cálculo ---
    # 1 = avaliação sequencial; >1 usa um pool de threads por cenário x regra
    MAX_WORKERS: int = 1
    # Diferença relativa entre RMI com e sem descarte que pede revisão manual
    LIMIAR_DIVERGENCIA_DESCARTE: float = 0.20
    # Lacunas entre períodos acima deste número de meses geram alerta
    LIMIAR_LACUNA_MESES: int = 2
    # Resultados guardados pela API; acima disso sai o usado há mais tempo
    CACHE_MAX_ENTRADAS: int = 128

    # --- Exportação ---
    OUTPUT_DIR: str = "data"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings():
    return Settings()


# Instância global
settings = get_settings()
