"""Response helpers shared by the batch endpoints."""

from fastapi.responses import JSONResponse

MULTI_STATUS = 207


def batch_response(
    succeeded: int,
    errors: list[str],
    count_key: str,
    success_message: str,
    partial_message: str,
    failure_message: str = "",
) -> JSONResponse:
    """200 when every item succeeded, 207 on partial success.

    With a ``failure_message``, a batch where nothing succeeded is a 400;
    without one it is still reported as 207.
    """
    if not errors:
        return JSONResponse(status_code=200, content={"message": success_message, count_key: succeeded})

    body = {
        "message": partial_message,
        count_key: succeeded,
        "errors_count": len(errors),
        "error_details": errors,
    }
    if succeeded == 0 and failure_message:
        body["message"] = failure_message
        return JSONResponse(status_code=400, content=body)
    return JSONResponse(status_code=MULTI_STATUS, content=body)
