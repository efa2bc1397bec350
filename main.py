from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.check_in.routes import router as check_in_router
from app.core import models  # noqa: F401
from app.core.config import CORS_HEADERS, Environment, settings
from app.core.database import create_db
from app.core.logger import logger

REQUIRED_BODY_FIELDS = ('qr_payload', 'event_id')


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings.validate()
    if settings.ENVIRONMENT != Environment.TEST:
        create_db()
    yield


app = FastAPI(lifespan=lifespan)

# Include routers
app.include_router(check_in_router, prefix='/verify-qr', tags=['Check In'])

app.add_middleware(
    CORSMiddleware,
    allow_origins=['*'],
    allow_methods=['POST', 'OPTIONS'],
    allow_headers=['Content-Type', 'Authorization'],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    headers = {**(exc.headers or {}), **CORS_HEADERS}
    return JSONResponse(
        status_code=exc.status_code, content={'error': exc.detail}, headers=headers
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    error = 'Invalid request body'
    for err in exc.errors():
        field = err['loc'][-1] if err.get('loc') else None
        if field in REQUIRED_BODY_FIELDS:
            error = f'{field} required'
            break
    logger.error('Invalid request to %s: %s', request.url.path, error)
    return JSONResponse(status_code=400, content={'error': error}, headers=CORS_HEADERS)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        'Unhandled error on %s: %s', request.url.path, str(exc), exc_info=exc
    )
    return JSONResponse(
        status_code=500,
        content={'error': 'Internal server error'},
        headers=CORS_HEADERS,
    )


@app.get('/', include_in_schema=False)
def ping():
    return Response(status_code=200)
