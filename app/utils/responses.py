from typing import Any, Dict, List, Optional


def ok(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    """Return a success envelope; ``data`` and ``message`` are only included when given."""
    body: Dict[str, Any] = {"status": "success"}
    if data is not None:
        body["data"] = data
    if message:
        body["message"] = message
    return body


def err(message: str, code: Optional[str] = None, errors: Optional[List[Dict[str, str]]] = None) -> Dict[str, Any]:
    """Return an error envelope."""
    body: Dict[str, Any] = {"status": "error", "message": message}
    if code:
        body["code"] = code
    if errors:
        body["errors"] = errors
    return body
