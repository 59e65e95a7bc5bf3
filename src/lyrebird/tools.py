import inspect
import json
from typing import Any, Callable

from pydantic import BaseModel, Field


_JSON_TYPES = {
    str: "string",
    int: "integer",
    float: "number",
    bool: "boolean",
    dict: "object",
    list: "array",
    tuple: "array",
    set: "array",
}


def _json_type(annotation: Any) -> str:
    origin = getattr(annotation, "__origin__", None) or annotation
    return _JSON_TYPES.get(origin, "string")


def _build_input_schema(func: Callable) -> dict[str, Any]:
    """JSON schema for *func*'s parameters.

    Parameters without a default are required; unannotated ones are
    described as strings.
    """
    signature = inspect.signature(func)
    properties = {}
    required = []
    for name, param in signature.parameters.items():
        properties[name] = {"type": _json_type(param.annotation)}
        if param.default is inspect.Parameter.empty:
            required.append(name)
    return {
        "type": "object",
        "properties": properties,
        "required": required,
    }


class Tool(BaseModel):
    """A Python function exposed to the model as a tool.

    ``model_dump()`` returns the tool definition sent in the request
    body: ``{"name", "description", "input_schema"}``.
    """

    # Define as fields but exclude from serialization
    tool_func: Callable = Field(exclude=True)
    name: str = Field(exclude=True)
    model_config = {"arbitrary_types_allowed": True}

    def __init__(self, tool_func: Callable):
        super().__init__(
            tool_func=tool_func,
            name=tool_func.__name__,
        )

    def model_dump(self, **kwargs):
        """Override to return the tool definition instead of internal attributes"""
        return self.get_schema()

    def model_dump_json(self, **kwargs):
        """Override JSON serialization"""
        return json.dumps(self.get_schema())

    def get_schema(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": inspect.getdoc(self.tool_func) or "",
            "input_schema": _build_input_schema(self.tool_func),
        }

    def __call__(self, **kwargs):
        """Run the tool with the ``input`` of a ``tool_use`` block."""
        return self.tool_func(**kwargs)


def tool(func: Callable) -> Tool:
    """Decorator turning a function into a :class:`Tool`."""
    return Tool(func)
