"""Error envelope shared by every failing endpoint."""

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponseSchema(BaseModel):
    """Body returned with every 4xx/5xx response."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "error": "WEBHOOK_SIGNATURE_INVALID",
                    "message": "Webhook signature verification failed",
                    "request_id": "7f0c1f9e-2a7e-4c1b-9d55-0c3a3f7f4c21",
                },
                {
                    "error": "PLAN_NOT_FOUND",
                    "message": "Plan not found: 550e8400-e29b-41d4-a716-446655440000",
                    "request_id": None,
                },
            ]
        }
    )

    error: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Safe, human-readable explanation")
    request_id: str | None = Field(
        None,
        description="Echo of X-Request-ID, for correlating with server logs",
    )
