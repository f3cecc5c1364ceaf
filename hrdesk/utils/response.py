from typing import Any, Dict, List, Optional

from bson import ObjectId
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def format_response(
    success: bool = True,
    msg: Optional[str] = None,
    statuscode: int = 200,
    data: Optional[Any] = None,
    errors: Optional[List[str]] = None,
    **extra: Any,
) -> JSONResponse:
    """
    Format API response in a consistent structure.

    Args:
        success (bool): Whether the operation was successful
        msg (Optional[str]): Message describing the operation result
        statuscode (int): HTTP status code, also used as the response status
        data (Optional[Any]): Additional data to include in response
        errors (Optional[List[str]]): Validation messages, if any
        **extra: Further top-level keys (e.g. ``error`` detail in development)

    Returns:
        JSONResponse: Envelope ``{success, message?, data?, errors?}``
    """
    response: Dict[str, Any] = {"success": success}

    if msg is not None:
        response["message"] = msg
    if data is not None:
        response["data"] = convert_objectid_to_str(data)
    if errors is not None:
        response["errors"] = errors
    response.update(extra)

    return JSONResponse(status_code=statuscode, content=jsonable_encoder(response))


def convert_objectid_to_str(data):
    if isinstance(data, dict):
        return {k: convert_objectid_to_str(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [convert_objectid_to_str(i) for i in data]
    elif isinstance(data, ObjectId):
        return str(data)
    else:
        return data
