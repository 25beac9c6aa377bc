import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from .custom import InputFileError

logger = logging.getLogger(__name__)


async def input_file_error_handler(_request: Request, exc: InputFileError) -> JSONResponse:
    logger.error("Input file missing: %s", exc.path)
    return JSONResponse(
        status_code=400,
        content={"detail": f"Input file not found: {exc.path}"},
    )
