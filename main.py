import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from sns_api.api.posts import router as posts_router
from sns_api.core.config import CORS_ORIGINS, DATABASE_URL, HOST, LOG_LEVEL, PORT
from sns_api.core.db import Database
from sns_api.core.logging_config import setup_logging
from sns_api.services.post_service import ServiceError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Один клиент БД на всё приложение: открываем при старте, закрываем при остановке
    db = Database(app.state.database_url)
    db.create_all()
    app.state.db = db
    logger.info(f"🚀 База данных подключена: {db.engine.url.render_as_string(hide_password=True)}")

    yield

    db.dispose()
    logger.info("База данных отключена")


def create_app(database_url: Optional[str] = None) -> FastAPI:
    setup_logging(LOG_LEVEL)

    app = FastAPI(title="SNS API", lifespan=lifespan)
    app.state.database_url = database_url or DATABASE_URL

    # Добавляем CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials="*" not in CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Все ошибки отдаём в одном формате: {"error": "..."}
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.info(f"Некорректный запрос {request.method} {request.url.path}: {exc.errors()}")
        return JSONResponse({"error": "Invalid request body"}, status_code=400)

    @app.exception_handler(ServiceError)
    async def service_exception_handler(request: Request, exc: ServiceError):
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(f"❌ Необработанная ошибка {request.method} {request.url.path}", exc_info=exc)
        return JSONResponse({"error": "Internal server error"}, status_code=500)

    # Подключаем API-маршруты
    app.include_router(posts_router, prefix="/api/posts", tags=["Posts"])

    @app.get("/")
    def root():
        return {"message": "SNS API Server is running!"}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=HOST, port=PORT)
