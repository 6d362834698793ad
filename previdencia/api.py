# previdencia/api.py

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from previdencia import __version__
from previdencia.config import settings
from previdencia.logging_config import log
from previdencia.simulador.router import router as simulacao_router

app = FastAPI(title=settings.APP_NAME, version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(simulacao_router)


@app.get("/")
def health_check():
    return {"status": "online", "app": settings.APP_NAME, "version": __version__}


log.info(f"{settings.APP_NAME} v{__version__} pronto.")
