import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

from clinic_backend.core import config
from clinic_backend.core.errors import ClinicError
from clinic_backend.routes import (
    appointment_routes,
    auth_routes,
    doctor_routes,
    locked_slot_routes,
    patient_routes,
    waiting_list_routes,
)

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)
logger = logging.getLogger(__name__)

app = FastAPI(title='Clinic Scheduling API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)


@app.on_event('startup')
def initialize_backends() -> None:
    config.validate_runtime_config()
    if config.DOCUMENT_STORE_BACKEND != 'sql':
        return

    from clinic_backend.database import ensure_document_schema

    try:
        ensure_document_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL.')


@app.exception_handler(ClinicError)
async def clinic_error_handler(request: Request, exc: ClinicError):
    if exc.status_code >= 500:
        logger.error('%s %s failed: %s', request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={'error': exc.message})


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={'error': exc.detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = []
    for error in exc.errors():
        field = '.'.join(str(part) for part in error.get('loc', ()) if part != 'body')
        message = error.get('msg', 'Invalid value')
        messages.append(f'{field}: {message}' if field else message)
    logger.warning('Validation error on %s %s: %s', request.method, request.url.path, messages)
    return JSONResponse(status_code=400, content={'error': '; '.join(messages)})


@app.get('/')
def root():
    return {'status': 'Clinic Scheduling API Running'}


app.include_router(auth_routes.router, prefix='/auth')
app.include_router(appointment_routes.router, prefix='/appointments')
app.include_router(locked_slot_routes.router, prefix='/locked-slots')
app.include_router(waiting_list_routes.router, prefix='/waiting-list')
app.include_router(patient_routes.router, prefix='/patients')
app.include_router(doctor_routes.router, prefix='/doctors')
