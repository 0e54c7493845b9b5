from enum import Enum
from typing import Dict, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class AuthMethod(str, Enum):
    ENVIRONMENT = "environment"
    CLI_SESSION = "cli-session"
    SAVED_CONFIG = "saved-config"
    INTERACTIVE_PROMPT = "interactive-prompt"


class AuthResult(BaseModel):
    method: AuthMethod
    key: Optional[str] = None

    @model_validator(mode="after")
    def key_matches_method(self) -> "AuthResult":
        if self.method is AuthMethod.CLI_SESSION:
            if self.key is not None:
                raise ValueError("A Claude CLI session supplies its own credentials")
        elif not self.key:
            raise ValueError(f"Auth method {self.method.value} requires a key")
        return self


class ExecutionOptions(BaseModel):
    throw_on_error: bool = True
    shell: bool = True
    stdio: Literal["pipe", "inherit"] = "pipe"
    timeout: Optional[float] = None
    input: Optional[str] = None
    env: Optional[Dict[str, str]] = None


class SavedCredentials(BaseModel):
    """On-disk credential record, ``{"anthropicApiKey": "..."}``."""

    model_config = ConfigDict(populate_by_name=True)

    api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("anthropicApiKey", "apiKey", "api_key"),
        serialization_alias="anthropicApiKey",
    )


class PRContent(BaseModel):
    title: str
    body: str

    @classmethod
    def from_text(cls, text: str) -> "PRContent":
        """Split Claude output into a title line and the description below it."""

        title, _, body = text.strip().partition("\n")
        return cls(title=title.strip(), body=body.strip())


class Result:
    def __init__(self, value=None, error_message=None):
        self.value = value
        self.error_message = error_message

    @staticmethod
    def ok(value=None):
        return Result(value=value)

    @staticmethod
    def err(msg):
        return Result(error_message=msg)

    def is_ok(self):
        return self.error_message is None

    def is_err(self):
        return not self.is_ok()
