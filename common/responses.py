from typing import Any, Dict, Optional


def error_response(message: str, kind: Optional[str] = None, details: Optional[Any] = None) -> Dict[str, Any]:
    """
    Error envelope shared by every handler: {"message", "kind", "details"?}.
    """
    payload: Dict[str, Any] = {"message": message}
    if kind is not None:
        payload["kind"] = kind
    if details is not None:
        payload["details"] = details
    return payload
