import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.core import config
from backend.database import Database, ensure_education_schema
from backend.routes import auth_routes, education_routes

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)
logger = logging.getLogger(__name__)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={'error': exc.detail},
        headers=getattr(exc, 'headers', None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        location = [str(part) for part in errors[0].get('loc', ())]
        if location and location[0] in {'body', 'query', 'path', 'header'}:
            location = location[1:]
        field = '.'.join(location)
        message = f"Invalid {field}: {errors[0].get('msg')}" if field else errors[0].get('msg')
    else:
        message = 'Invalid request'
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={'error': message})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception('Unhandled error on %s %s', request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={'error': 'Internal server error'},
    )


def create_app(database: Database | None = None) -> FastAPI:
    database = database or Database()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        config.validate_runtime_config()
        if config.CREATE_SCHEMA_ON_STARTUP:
            try:
                ensure_education_schema(database)
            except SQLAlchemyError:
                logger.exception('Database initialization failed. Check DATABASE_URL and SQL credentials.')
        yield
        database.dispose()

    app = FastAPI(title='Education Tracker API', lifespan=lifespan)
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials='*' not in config.CORS_ORIGINS,
        allow_methods=['GET', 'POST', 'DELETE', 'OPTIONS'],
        allow_headers=['Content-Type', 'Authorization'],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.get('/')
    def root():
        return {'status': 'Education Tracker API Running'}

    app.include_router(auth_routes.router, prefix=config.API_PREFIX)
    app.include_router(education_routes.router, prefix=config.API_PREFIX)

    return app


app = create_app()


if __name__ == '__main__':
    import uvicorn

    uvicorn.run('backend.main:app', host='0.0.0.0', port=7071)
