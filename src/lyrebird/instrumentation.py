"""Request tracing through OpenTelemetry, off by default.

With tracing off every helper here is a no-op and ``opentelemetry-api``
is never imported.  :func:`instrument` turns it on for the whole
process; from then on each :class:`~lyrebird.client.Client` request
runs inside one client span.
"""

import importlib.util
import logging
from contextlib import asynccontextmanager

logger = logging.getLogger(__name__)

_tracer = None


def instrument(*, tracer_name: str = "lyrebird") -> None:
    """Start tracing Messages API requests.

    Spans go to whatever TracerProvider is registered when this runs,
    so set the provider up first::

        trace.set_tracer_provider(TracerProvider())
        lyrebird.instrument()

    Without a provider the spans are created and dropped.

    Raises:
        ImportError: If ``opentelemetry-api`` is missing (install the
            ``otel`` extra).
    """
    global _tracer
    if importlib.util.find_spec("opentelemetry.trace") is None:
        raise ImportError(
            "Tracing needs opentelemetry-api: pip install lyrebird[otel]"
        )
    from opentelemetry import trace
    _tracer = trace.get_tracer(tracer_name)
    if isinstance(_tracer, trace.NoOpTracer):
        logger.info(
            "No TracerProvider configured, request spans will be dropped"
        )
    else:
        logger.info("Tracing Messages API requests as %r", tracer_name)


def uninstrument() -> None:
    """Stop tracing; requests already in flight keep their spans."""
    global _tracer
    _tracer = None


@asynccontextmanager
async def completion_span(system: str, model: str, stream: bool = False):
    """Wrap one Messages API request in a ``chat`` span."""
    if _tracer is None:
        yield None
        return
    from opentelemetry.trace import SpanKind

    with _tracer.start_as_current_span(
        f"chat {model}",
        kind=SpanKind.CLIENT,
        attributes={
            "gen_ai.operation.name": "chat",
            "gen_ai.provider.name": system,
            "gen_ai.request.model": model,
            "lyrebird.request.stream": stream,
        },
    ) as span:
        yield span


def record_usage(
    span, usage, response_model: str | None = None
):
    """Set token-usage and response-model attributes on a span."""
    if span is None or usage is None:
        return
    if getattr(usage, "input_tokens", None) is not None:
        span.set_attribute(
            "gen_ai.usage.input_tokens",
            usage.input_tokens,
        )
    if getattr(usage, "output_tokens", None) is not None:
        span.set_attribute(
            "gen_ai.usage.output_tokens",
            usage.output_tokens,
        )
    if response_model:
        span.set_attribute(
            "gen_ai.response.model", response_model
        )


def record_error(span, exception: BaseException) -> None:
    """Mark *span* failed with the exception that ended the request.

    ``error.type`` is the exception's class name, e.g. ``Unauthorized``.
    """
    if span is None:
        return
    from opentelemetry.trace import StatusCode

    span.record_exception(exception)
    span.set_attribute("error.type", type(exception).__qualname__)
    span.set_status(StatusCode.ERROR, str(exception))
