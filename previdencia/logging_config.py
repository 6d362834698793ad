# previdencia/logging_config.py

import sys
from pathlib import Path

from loguru import logger

from .config import settings

# Remove o handler padrão para evitar duplicação de logs no console.
logger.remove()

# Handler de console com formato limpo e colorido.
logger.add(
    sys.stderr,
    level=settings.LOG_LEVEL,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    colorize=True,
)

# Handler de arquivo só quando LOG_DIR estiver configurado.
# rotation="10 MB": novo arquivo quando o atual atingir 10 MB.
# retention="30 days": arquivos mais antigos que 30 dias são apagados.
if settings.LOG_DIR:
    logger.add(
        str(Path(settings.LOG_DIR) / "simulador_{time}.log"),
        rotation="10 MB",
        retention="30 days",
        level="DEBUG",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
    )

# Exporta o logger configurado para ser usado em outros módulos.
log = logger
