from typing import Type, Any, Optional
from pydantic import BaseModel

def validate_envelope(body: Any, schema: Optional[Type[BaseModel]] = None) -> Any:
    """Checks the success envelope and, when given, validates ``data`` against ``schema``."""
    assert isinstance(body, dict), body
    assert body["success"] is True, body
    assert isinstance(body["message"], str) and body["message"]
    data = body.get("data")
    if schema is None:
        return data
    if isinstance(data, list):
        for item in data:
            schema.model_validate(item)
    else:
        schema.model_validate(data)
    return data
