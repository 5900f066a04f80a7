# shirur_express/__init__.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .errors import register_error_handlers
from .routes import routers

__version__ = "1.0.0"

def create_app() -> FastAPI:
    app = FastAPI(
        title="Shirur Express API",
        description="Local services marketplace: bookings, storefronts and payments",
        version=__version__
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    # Include all routers
    for router in routers:
        app.include_router(router)

    @app.get("/")
    def health_check():
        return {"status": "healthy", "version": app.version}

    return app
