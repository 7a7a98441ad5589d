from fastapi import FastAPI, Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from models.schemas import ErrorResponse


def error_response(status_code: int, message: str) -> JSONResponse:
    """JSON error body of the users API: {"message": "..."}."""
    return JSONResponse(status_code=status_code, content=ErrorResponse(message=message).model_dump())


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        # malformed body, query parameter or field constraint violation -> 400
        messages = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()) if p not in ('body', 'query'))}: {err.get('msg')}"
            for err in exc.errors()
        )
        return error_response(400, messages or "Invalid request")

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        return error_response(500, "Internal server error")
