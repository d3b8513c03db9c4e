"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tendril import __version__
from tendril.config import settings

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.tendril_log_level.upper(), logging.DEBUG),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)

BEHAVIOR_CATEGORIES = ["structural", "filling", "copies", "reactive", "shading", "spatial"]


def create_app() -> FastAPI:
    app = FastAPI(
        title="Tendril",
        description="Reactive stroke engine that grows and transforms line art around existing strokes",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Import all behavior modules to trigger registration
    register_behaviors()

    from tendril.api.router import api_router

    app.include_router(api_router)

    return app


def register_behaviors() -> None:
    """Import all behavior modules so @behavior decorators fire. Safe to call twice."""
    import importlib
    import pkgutil

    for category in BEHAVIOR_CATEGORIES:
        package_name = f"tendril.behaviors.{category}"
        package = importlib.import_module(package_name)
        for _, module_name, _ in pkgutil.iter_modules(package.__path__):
            importlib.import_module(f"{package_name}.{module_name}")


app = create_app()
