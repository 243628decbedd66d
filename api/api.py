from fastapi import FastAPI
import uvicorn
from fastapi.middleware.cors import CORSMiddleware
from api.routes.auth_routes import auth_routes
from api.routes.catalog_routes import catalog_routes
from api.routes.progress_routes import progress_routes
from api.routes.profile_routes import profile_routes
from api.config import create_db, settings
from api.utils.logger import configure_logging, set_request_id, clear_request_id
from fastapi import Request
from starlette.responses import Response, JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_503_SERVICE_UNAVAILABLE,
)
from fastapi.exceptions import RequestValidationError
from fastapi import HTTPException
from progress_engine.errors import (
    NotFound,
    ProgressEngineError,
    UpstreamUnavailable,
    ValidationError,
    WriteConflict,
)

app = FastAPI(title="Campus Progress")
logger = configure_logging()
create_db()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_ENGINE_ERROR_STATUS = {
    NotFound: HTTP_404_NOT_FOUND,
    WriteConflict: HTTP_409_CONFLICT,
    ValidationError: HTTP_400_BAD_REQUEST,
    UpstreamUnavailable: HTTP_503_SERVICE_UNAVAILABLE,
}


@app.middleware("http")
async def request_logger(request: Request, call_next):
    rid = set_request_id(request.headers.get("x-request-id"))
    try:
        logger.info("request start method=%s path=%s client=%s", request.method, request.url.path, request.client)
        response: Response = await call_next(request)
        logger.info("request end status=%s method=%s path=%s", response.status_code, request.method, request.url.path)
        response.headers["x-request-id"] = rid
        return response
    except Exception:
        logger.exception("request error method=%s path=%s", request.method, request.url.path)
        raise
    finally:
        clear_request_id()


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    # Log server-side errors with stack traces; client errors as warnings.
    if exc.status_code >= 500:
        logger.exception("http error status=%s method=%s path=%s detail=\n%s", exc.status_code, request.method, request.url.path, exc.detail)
    else:
        logger.warning("http error status=%s method=%s path=%s detail=\n%s", exc.status_code, request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("validation error method=%s path=%s errors=\n%s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=422, content={"detail": exc.errors()})


@app.exception_handler(ProgressEngineError)
async def progress_engine_exception_handler(request: Request, exc: ProgressEngineError) -> JSONResponse:
    status_code = next(
        (code for cls, code in _ENGINE_ERROR_STATUS.items() if isinstance(exc, cls)),
        HTTP_500_INTERNAL_SERVER_ERROR,
    )
    ctx = exc.context()
    logger.warning(
        "engine error type=%s status=%s path=%s user=%s subject=%s event=%s detail=%s",
        type(exc).__name__, status_code, request.url.path,
        ctx["user_id"], ctx["subject_id"], ctx["event_kind"], exc.message,
    )
    body = {"detail": exc.message, "error": type(exc).__name__}
    if isinstance(exc, UpstreamUnavailable):
        body["retry"] = True
    return JSONResponse(status_code=status_code, content=body)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Never leak internal exception details to clients.
    logger.exception("unhandled error method=%s path=%s", request.method, request.url.path)
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal Server Error"},
    )


@app.get("/")
def read_root():
    return {"message": "Campus Progress is Healthy"}

app.include_router(auth_routes, prefix="/auth")
app.include_router(catalog_routes, prefix="/portal")
app.include_router(progress_routes, prefix="/portal")
app.include_router(profile_routes, prefix="/portal")

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
