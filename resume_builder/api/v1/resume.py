import json
import logging

from fastapi import APIRouter, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from resume_builder.core.rate_limit import rate_limit
from resume_builder.schemas.resume import ResumeRequest, ResumeResponse
from resume_builder.services.resume_service import ResumeGenerationError, generate_resume

router = APIRouter()
logger = logging.getLogger(__name__)

_UNEXPECTED_ERROR = "An unexpected error occurred. Please try again."


def _error_response(message: str, status_code: int) -> JSONResponse:
    body = ResumeResponse(success=False, error=message)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def _invalid_input_response(details: list) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "error": "Invalid input data",
            "details": jsonable_encoder(details),
        },
    )


# Body is parsed after the rate limit check.
@router.post(
    "/generate-resume",
    response_model=ResumeResponse,
    summary="Generate Resume",
    description="Generate an ATS-optimized Harvard-style resume and score it against the job description.",
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": ResumeRequest.model_json_schema()}},
        }
    },
)
@rate_limit()
async def generate_resume_route(request: Request):
    try:
        raw = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _invalid_input_response([{"type": "json_invalid", "msg": "Request body is not valid JSON"}])

    try:
        payload = ResumeRequest.model_validate(raw)
    except ValidationError as exc:
        return _invalid_input_response(exc.errors(include_url=False, include_context=False))

    try:
        data = await generate_resume(payload)
    except ResumeGenerationError as exc:
        logger.warning("generate_resume_failed code=%s: %s", exc.code, exc)
        return _error_response(str(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    except Exception:  # pragma: no cover - guard rail
        logger.exception("generate_resume_unexpected_error")
        return _error_response(_UNEXPECTED_ERROR, status.HTTP_500_INTERNAL_SERVER_ERROR)

    body = ResumeResponse(success=True, data=data)
    return JSONResponse(
        content=body.model_dump(mode="json", exclude_none=True),
        headers={"Cache-Control": "no-store, max-age=0"},
    )
