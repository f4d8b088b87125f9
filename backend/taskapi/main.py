import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from taskapi.core.config import settings
from taskapi.core.database import init_models
from taskapi.core.errors import FieldError, StorageError, TaskApiError, ValidationError
from taskapi.core.logging import setup_logging
from taskapi.routers import tasks

logger = logging.getLogger(__name__)

app = FastAPI(title="Task API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(tasks.router, prefix=settings.API_PREFIX)


def _field_name(loc) -> str:
    # ("body", "dueDate") -> "dueDate"; ("path", "task_id") -> "task_id"
    parts = [str(p) for p in loc if p not in ("body", "path", "query")]
    return ".".join(parts) or "body"


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [FieldError(_field_name(e.get("loc", ())), e.get("msg", "Invalid value")) for e in exc.errors()]
    return JSONResponse(status_code=400, content=ValidationError(errors).to_dict())


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error("%s %s: %s", request.method, request.url.path, exc.message, exc_info=exc.cause)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(TaskApiError)
async def task_api_error_handler(request: Request, exc: TaskApiError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.on_event("startup")
async def startup():
    setup_logging(settings.LOG_LEVEL)
    await init_models()
    logger.info("Task API ready at %s/tasks", settings.API_PREFIX)


@app.get("/")
async def root():
    return {"message": "Task API is running"}


def run():
    import uvicorn
    setup_logging(settings.LOG_LEVEL)
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)


if __name__ == "__main__":
    run()
