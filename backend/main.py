import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from app.api import router as api_router
from app.core.config import settings


def create_app() -> FastAPI:
    logging.basicConfig(level=settings.log_level)
    logger = logging.getLogger("sheet-insights")
    logger.info("Starting %s (%s)", settings.app_name, settings.env)

    app = FastAPI(title=settings.app_name)
    app.include_router(api_router)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Something went wrong!"},
        )

    return app


app = create_app()
