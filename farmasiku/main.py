# farmasiku/main.py
import logging

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from farmasiku import __version__
from farmasiku.config import get_settings
from farmasiku.persistence import PersistenceError, PersistenceService, init_db
from farmasiku.api.routes import router as api_router, get_persistence


settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="farmasiKu Symptom Checker API", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=True,
)


@app.on_event("startup")
def on_startup() -> None:
    init_db()


@app.get("/")
def root():
    return {"message": "farmasiKu Symptom Checker API is running"}


@app.get("/health")
def health(persistence: PersistenceService = Depends(get_persistence)):
    try:
        persistence.ping()
    except PersistenceError as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    return {"status": "ok", "database": "connected"}


app.include_router(api_router, prefix="/api")
