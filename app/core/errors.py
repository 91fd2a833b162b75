import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.models.company_profile import count_filled_fields

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base error carrying an HTTP status and a machine-readable code."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"success": False, "error": self.message, "code": self.code}
        if self.details:
            payload["details"] = self.details
        return payload


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"


class ValidationFailedError(AppError):
    status_code = 400
    code = "VALIDATION_FAILED"


class AIServiceError(AppError):
    status_code = 502
    code = "AI_SERVICE_ERROR"


class ICPGenerationError(AIServiceError):
    """Raised by the ICP pipeline.

    Codes: ICP_GENERATION_FAILED, INVALID_INPUT_DATA, LLM_UNAVAILABLE, PARSING_FAILED.
    """

    code = "ICP_GENERATION_FAILED"

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=code, details=details)
        if self.code == "INVALID_INPUT_DATA":
            self.status_code = 400


class CampaignGenerationError(AIServiceError):
    code = "CAMPAIGN_GENERATION_FAILED"


class LegacyFormatError(ValidationFailedError):
    code = "UNKNOWN_STORAGE_SHAPE"


@dataclass
class ValidationIssue:
    code: str
    message: str


@dataclass
class ValidationResult:
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def first_error(self) -> Optional[ValidationIssue]:
        return self.errors[0] if self.errors else None


class InputValidator:
    @staticmethod
    def validate_company_name(name: Optional[str]) -> ValidationResult:
        result = ValidationResult()
        stripped = (name or "").strip()

        if not stripped:
            result.errors.append(ValidationIssue("EMPTY_COMPANY_NAME", "Company name cannot be empty"))
            return result
        if len(stripped) < 2:
            result.errors.append(
                ValidationIssue("COMPANY_NAME_TOO_SHORT", "Company name must be at least 2 characters long")
            )
        if stripped.isdigit():
            result.errors.append(
                ValidationIssue("INVALID_COMPANY_NAME_FORMAT", "Company name cannot be only numbers")
            )
        if len(name or "") > 100:
            result.warnings.append("Company name is unusually long")
        return result

    @staticmethod
    def validate_icp_generation_input(company_data: Dict[str, Any], min_filled: int) -> ValidationResult:
        result = ValidationResult()
        filled = count_filled_fields(company_data)
        if filled < min_filled:
            result.errors.append(
                ValidationIssue(
                    "INSUFFICIENT_COMPANY_DATA",
                    f"Please fill at least {min_filled} company fields to generate ICPs ({filled} filled)",
                )
            )
        if not str(company_data.get("name") or "").strip():
            result.warnings.append("Company name is missing; profiles will use a generic name")
        return result


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.warning(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error", "code": "INTERNAL_ERROR"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
