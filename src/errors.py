from pydantic import BaseModel


class ProblemDetails(BaseModel):
    status: int
    code: str
    message: str
    request_id: str
    details: dict | None = None


def problem(*, status: int, code: str, message: str, request_id: str, details: dict | None = None) -> ProblemDetails:
    return ProblemDetails(status=status, code=code, message=message, request_id=request_id, details=details)
