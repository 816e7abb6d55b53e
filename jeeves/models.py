"""
Pydantic models for the chat completions request and response bodies.
"""
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator


class Message(BaseModel):
    role: str
    content: str


class ChatRequest(BaseModel):
    model: str
    store: Literal[True] = True
    messages: List[Message]

    @classmethod
    def for_prompt(cls, model: str, prompt: str) -> "ChatRequest":
        return cls(model=model, messages=[Message(role="user", content=prompt)])


# Response side. Every field has a default so that partial bodies still decode;
# only choices[0].message is actually used.

class ResponseModel(BaseModel):
    """Base for response bodies: an explicit null decodes to the field default."""

    @field_validator("*", mode="before")
    @classmethod
    def _null_to_default(cls, value, info):
        if value is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return value


class ChoiceMessage(ResponseModel):
    role: str = ""
    content: Optional[str] = None
    refusal: Optional[str] = None


class Choice(ResponseModel):
    index: int = 0
    message: ChoiceMessage = Field(default_factory=ChoiceMessage)
    logprobs: Optional[Any] = None
    finish_reason: Optional[str] = None


class PromptTokensDetails(ResponseModel):
    cached_tokens: int = 0
    audio_tokens: int = 0


class CompletionTokensDetails(ResponseModel):
    reasoning_tokens: int = 0
    audio_tokens: int = 0
    accepted_prediction_tokens: int = 0
    rejected_prediction_tokens: int = 0


class Usage(ResponseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    prompt_tokens_details: PromptTokensDetails = Field(default_factory=PromptTokensDetails)
    completion_tokens_details: CompletionTokensDetails = Field(
        default_factory=CompletionTokensDetails
    )


class ChatCompletion(ResponseModel):
    """A decoded response from the chat completions endpoint."""
    id: str = ""
    object: str = ""
    created: int = 0
    model: str = ""
    choices: List[Choice] = Field(default_factory=list)
    usage: Usage = Field(default_factory=Usage)
    service_tier: Optional[str] = None
    system_fingerprint: Optional[str] = None


class ErrorDetail(ResponseModel):
    message: str = ""
    type: Optional[str] = None
    param: Optional[str] = None
    code: Optional[Any] = None


class APIErrorBody(BaseModel):
    """Body returned by the API alongside a non-200 status."""
    error: ErrorDetail
