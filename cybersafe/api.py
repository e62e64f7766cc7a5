from fastapi import FastAPI, HTTPException, Request
import uvicorn
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import Response, JSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from cybersafe.config import create_db
from cybersafe.routes.auth_routes import auth_routes
from cybersafe.routes.module_routes import module_routes
from cybersafe.routes.progress_routes import progress_routes
from cybersafe.utils.errors import CyberSafeError
from cybersafe.utils.logger import bind_request_id, clear_request_id, configure_logging

app = FastAPI(title="CyberSafe")
logger = configure_logging()
create_db()
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_logger(request: Request, call_next):
    rid = bind_request_id(request.headers.get("x-request-id"))
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


@app.exception_handler(CyberSafeError)
async def domain_exception_handler(request: Request, exc: CyberSafeError) -> JSONResponse:
    # Conflicts and validation failures are the caller's to retry or fix; storage failures are ours.
    if exc.status_code >= 500:
        logger.error("%s method=%s path=%s detail=%s", type(exc).__name__, request.method, request.url.path, exc.detail)
    else:
        logger.warning("%s method=%s path=%s detail=%s", type(exc).__name__, request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("http error status=%s method=%s path=%s detail=%s", exc.status_code, request.method, request.url.path, exc.detail)
    else:
        logger.warning("http error status=%s method=%s path=%s detail=%s", exc.status_code, request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("validation error method=%s path=%s errors=%s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=422, content={"detail": jsonable_errors(exc)})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Never leak internal exception details to clients.
    logger.exception("unhandled error method=%s path=%s", request.method, request.url.path)
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal Server Error"},
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    # Pydantic error contexts can hold exception objects that JSONResponse cannot serialize.
    return [{k: v for k, v in err.items() if k in ("type", "loc", "msg")} for err in exc.errors()]


@app.get("/")
def read_root():
    return {"message": "CyberSafe is Healthy"}


app.include_router(auth_routes, prefix="/api")
app.include_router(module_routes, prefix="/api")
app.include_router(progress_routes, prefix="/api")


if __name__ == "__main__":
    uvicorn.run("cybersafe.api:app", host="0.0.0.0", port=5000)
