# ============================================================================
# FILE: app/schemas/response.py
# ============================================================================
from pydantic import BaseModel, ConfigDict, Field
from typing import Any

class ApiResponse(BaseModel):
    """Envelope for every successful API response"""
    model_config = ConfigDict(populate_by_name=True)

    status_code: int = Field(200, alias="statusCode")
    data: Any = None
    message: str = "Success"
    success: bool = True

def api_response(data: Any = None, message: str = "Success", status_code: int = 200) -> dict:
    """Build the serialized envelope (status < 400 means success)"""
    return ApiResponse(
        status_code=status_code,
        data=data,
        message=message,
        success=status_code < 400,
    ).model_dump(by_alias=True, mode="json")
