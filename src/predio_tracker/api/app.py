import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from predio_tracker.api.routes.predios import router as predios_router
from predio_tracker.api.routes.reports import router as reports_router
from predio_tracker.config import get_settings
from predio_tracker.db.init import init_db
from predio_tracker.errors import AuthError, StorageError, ValidationError


logger = logging.getLogger("predios.api")


def health():
    return {"ok": True}


app = FastAPI(title="predio_tracker")

if get_settings().cors:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(predios_router)
app.include_router(reports_router)


@app.get("/health")
def health_route():
    return health()


@app.exception_handler(ValidationError)
async def _validation_error(request: Request, exc: ValidationError):
    return JSONResponse({"error": str(exc)}, status_code=400)


@app.exception_handler(RequestValidationError)
async def _invalid_body(request: Request, exc: RequestValidationError):
    return JSONResponse({"error": "invalid_body"}, status_code=400)


@app.exception_handler(AuthError)
async def _unauthorized(request: Request, exc: AuthError):
    return JSONResponse({"error": "unauthorized"}, status_code=401)


@app.exception_handler(StorageError)
async def _storage_error(request: Request, exc: StorageError):
    logger.error("%s %s failed in %s", request.method, request.url.path, exc.operation)
    return JSONResponse({"error": "db_error"}, status_code=500)


@app.on_event("startup")
def _ensure_tables():
    settings = get_settings()
    logging.getLogger("predios.startup").warning(
        "startup env: PREDIOS_DB=%s auth=%s",
        settings.db_path,
        "on" if settings.auth_enabled else "off",
    )
    init_db(settings.db_path)
