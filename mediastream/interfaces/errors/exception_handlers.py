import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from mediastream.application.errors.exceptions import AppException, InvalidRangeError
from mediastream.interfaces.schemas import Response

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """处理项目中所有的异常并进行统一处理，涵盖：自定义业务状态异常、HTTP异常、通用异常"""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        """自定义应用异常处理器，捕获AppException并返回标准化响应"""

        if exc.status_code >= 500:
            logger.error(f"App exception: {exc.msg}", exc_info=exc)
        else:
            logger.warning(f"App exception: {exc.msg}")

        headers: dict[str, str] = {}
        if isinstance(exc, InvalidRangeError) and exc.total_size is not None:
            headers["Content-Range"] = f"bytes */{exc.total_size}"

        return JSONResponse(
            status_code=exc.status_code,
            content=Response(code=exc.code, msg=exc.msg, data=exc.data or {}).model_dump(),
            headers=headers or None,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """请求参数校验异常处理器，状态码422"""

        logger.warning(f"Validation exception: {exc.errors()}")

        return JSONResponse(
            status_code=422,
            content=Response(
                code=422,
                msg="请求参数校验失败",
                data={"errors": [str(error.get("msg", "")) for error in exc.errors()]},
            ).model_dump(),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        """HTTP异常处理器，捕获HTTPException并返回标准化响应"""

        logger.error(f"HTTP exception: {exc.detail}")

        return JSONResponse(
            status_code=exc.status_code,
            content=Response(code=exc.status_code, msg=str(exc.detail), data={}).model_dump(),
        )

    @app.exception_handler(Exception)
    async def exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """通用异常处理器，捕获所有未处理的异常并返回标准化响应, 状态码500"""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)

        return JSONResponse(
            status_code=500,
            content=Response(code=500, msg="Internal Server Error", data={}).model_dump(),
        )
