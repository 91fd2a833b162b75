import json


def sse_event(event_type: str, **kwargs) -> str:
    """Format a Server-Sent Event data line.

    Usage:
        yield sse_event("status", status="selecting_templates", agent="TemplateSelector")
        yield sse_event("chunk", content="Hello")
        yield sse_event("done", profiles=[...])
        yield sse_event("error", error="Something went wrong", code="PARSING_FAILED")

    Values json cannot encode natively (datetimes) are written with str().
    """
    payload = {"type": event_type, **kwargs}
    return f"data: {json.dumps(payload, default=str)}\n\n"
