"""
Talk to the OpenAI chat completions endpoint.

The flow is build_payload -> send_request -> decode_response -> first_content;
``complete`` runs all four for a single prompt.
"""
import time
import logging

import requests
from langfuse.decorators import langfuse_context, observe
from pydantic import ValidationError

from jeeves.errors import (
    APIError,
    BodyReadError,
    DecodeError,
    EmptyResponseError,
    RequestBuildError,
    SerializationError,
    TransportError,
)
from jeeves.models import APIErrorBody, ChatCompletion, ChatRequest

logger = logging.getLogger(__name__)

# How much of a non-JSON error body ends up in the diagnostic
MAX_ERROR_TEXT = 500


def build_payload(model, prompt):
    """Return the JSON request body for ``prompt`` as UTF-8 bytes."""
    try:
        return ChatRequest.for_prompt(model, prompt).model_dump_json().encode("utf-8")
    except (ValueError, TypeError) as e:
        raise SerializationError(f"Error marshalling json request body: {e}") from e


def build_headers(api_key):
    return {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {api_key}",
        "X-OpenAI-Use-Case": "government",
        "X-OpenAI-Data-Usage-Opt-Out": "true",
    }


def check_headers(headers):
    """http.client sends header values as latin-1; fail here rather than mid-send."""
    for name, value in headers.items():
        if isinstance(value, str):
            value.encode("latin-1")


def send_request(settings, payload, session=None):
    """
    POST ``payload`` to the configured endpoint.

    Returns a ``(status_code, body)`` tuple. The body is read completely and the
    connection released before returning, whatever happens while reading it.
    """
    owns_session = session is None
    if owns_session:
        session = requests.Session()

    try:
        try:
            request = requests.Request(
                "POST",
                settings.api_url,
                headers=build_headers(settings.api_key),
                data=payload,
            )
            prepared = session.prepare_request(request)
            check_headers(prepared.headers)
        except (requests.RequestException, ValueError) as e:
            raise RequestBuildError(f"Error creating request: {e}") from e

        # Streams the body; proxy and CA bundle settings come from the environment
        send_kwargs = session.merge_environment_settings(
            prepared.url, {}, True, None, None
        )

        logger.debug(f"Calling {settings.api_url} with model: {settings.model}")
        start_time = time.time()
        try:
            response = session.send(prepared, timeout=settings.timeout, **send_kwargs)
        except requests.RequestException as e:
            raise TransportError(f"Error sending request to OpenAI API: {e}") from e

        with response:
            try:
                body = response.content
            except requests.RequestException as e:
                raise BodyReadError(f"Error reading response body: {e}") from e

        duration_ms = round((time.time() - start_time) * 1000)
        logger.debug(
            f"Response received: HTTP {response.status_code}, {len(body)} bytes in {duration_ms}ms"
        )
        return response.status_code, body
    finally:
        if owns_session:
            session.close()


def _error_message(body):
    try:
        return APIErrorBody.model_validate_json(body).error.message
    except ValidationError:
        text = body.decode("utf-8", errors="replace").strip()
        return text[:MAX_ERROR_TEXT] or "empty response body"


def decode_response(status_code, body):
    """Parse a response body into a ChatCompletion."""
    if status_code != 200:
        raise APIError(status_code, _error_message(body))

    try:
        return ChatCompletion.model_validate_json(body)
    except ValidationError as e:
        raise DecodeError(f"Error unmarshalling response body: {e}") from e


def first_content(completion):
    """Text of the first choice, or its refusal when there is no content."""
    if not completion.choices:
        raise EmptyResponseError(
            "Error: OpenAI API returned an empty response (no choices)"
        )

    message = completion.choices[0].message
    if message.content is None and message.refusal:
        logger.debug("Model refused the request")
        return message.refusal
    return message.content or ""


@observe(name="chat_completion", as_type="generation", capture_input=False)
def complete(settings, prompt, session=None):
    """Send ``prompt`` to the model and return the reply text."""
    payload = build_payload(settings.model, prompt)
    status_code, body = send_request(settings, payload, session=session)
    completion = decode_response(status_code, body)

    usage = completion.usage
    logger.debug(
        f"Token usage - prompt: {usage.prompt_tokens}, "
        f"completion: {usage.completion_tokens}, total: {usage.total_tokens}"
    )
    langfuse_context.update_current_observation(
        model=completion.model or settings.model,
        usage={
            "prompt_tokens": usage.prompt_tokens,
            "completion_tokens": usage.completion_tokens,
            "total_tokens": usage.total_tokens,
        },
    )
    return first_content(completion)
