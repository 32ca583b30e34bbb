# smartmeal/app/main.py
from __future__ import annotations
import logging
import sys
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from smartmeal import __version__
from smartmeal.app.config import settings
from smartmeal.app.error_handlers import register_error_handlers
from smartmeal.app.routers.profiles import router as profiles_router
from smartmeal.app.routers.recipes import router as recipes_router

# Plain stdout logging (works for dev and containers)
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

app = FastAPI(title="SmartMeal API", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(recipes_router)
app.include_router(profiles_router)


@app.get("/health")
def health():
    return {"ok": True}
