"""Typed runtime settings with dotenv support and startup validation."""

from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_TRUE_VALUES = frozenset({"true"})
_FALSE_VALUES = frozenset({"false", ""})


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class AppSettings(BaseSettings):
    """Runtime settings for one workflow dispatch invocation.

    Action inputs are read from the runner's `INPUT_<NAME>` variables and the
    invoking context from `GITHUB_*` variables. Remaining environment variable
    names map directly to field names in uppercase.
    Example: `dispatch_completion_max_attempts` reads from `DISPATCH_COMPLETION_MAX_ATTEMPTS`.

    Attributes:
        token: GitHub token used for API calls.
        workflow: Workflow name or numeric id to dispatch.
        ref: Git ref to dispatch against, defaults to `github_ref`.
        repo: Repository in `owner/repo` form, defaults to `github_repository`.
        inputs: JSON-encoded workflow inputs.
        wait: Whether to wait for the run to complete (`true`/`false` only).
        github_ref: Ref of the invoking workflow run.
        github_repository: Repository of the invoking workflow run.
        github_api_url: REST API root URL.
        github_output: Step output file path provided by the runner.
        github_request_timeout_seconds: HTTP request timeout.
        dispatch_correlation_interval_seconds: Delay between run appearance polls.
        dispatch_correlation_max_attempts: Run appearance attempt budget.
        dispatch_completion_interval_seconds: Delay between run completion polls.
        dispatch_completion_max_attempts: Run completion attempt budget, 0 for unbounded.
        dispatch_exhaustion_mode: Behavior of both polls when the budget is spent.
        dispatch_clock_skew_seconds: Tolerance applied to the correlation window start.
        log_level: Logging level name.
        log_json: Whether logs are rendered as JSON.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    token: str = Field(min_length=1, validation_alias=AliasChoices("INPUT_TOKEN", "GITHUB_TOKEN"))
    workflow: str = Field(default="", validation_alias="INPUT_WORKFLOW")
    ref: str = Field(default="", validation_alias="INPUT_REF")
    repo: str = Field(default="", validation_alias="INPUT_REPO")
    inputs: str = Field(default="", validation_alias="INPUT_INPUTS")
    wait: bool = Field(default=False, validation_alias="INPUT_WAIT")
    github_ref: str = Field(default="")
    github_repository: str = Field(default="")
    github_api_url: str = Field(default="https://api.github.com", min_length=1)
    github_output: str = Field(default="")
    github_request_timeout_seconds: float = Field(default=30.0, gt=0)
    dispatch_correlation_interval_seconds: float = Field(default=3.0, ge=0)
    dispatch_correlation_max_attempts: int = Field(default=10, ge=1)
    dispatch_completion_interval_seconds: float = Field(default=5.0, ge=0)
    dispatch_completion_max_attempts: int = Field(default=100, ge=0)
    dispatch_exhaustion_mode: Literal["raise", "return_last"] = Field(default="raise")
    dispatch_clock_skew_seconds: float = Field(default=10.0, ge=0)
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False)

    @field_validator("token", "github_api_url")
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value

    @field_validator("workflow", "ref", "repo", "inputs", "github_ref", "github_repository", "github_output")
    @classmethod
    def _strip_optional_string(cls, value: str) -> str:
        return value.strip()

    @field_validator("repo", "github_repository")
    @classmethod
    def _validate_owner_scope(cls, value: str) -> str:
        return _config_validate_owner_scope(value)

    @field_validator("wait", mode="before")
    @classmethod
    def _validate_wait_flag(cls, value: object) -> bool:
        return _config_validate_wait_flag(value)

    def settings_resolve_revision(self) -> str:
        """Return the dispatch ref, falling back to the invoking context ref.

        Raises:
            SettingsLoadError: Raised when neither `ref` nor `GITHUB_REF` is set.
        """

        revision = self.ref or self.github_ref
        if not revision:
            raise SettingsLoadError("No ref supplied. Set the `ref` input or GITHUB_REF.")
        return revision

    def settings_resolve_owner_scope(self) -> str:
        """Return the `owner/repo` scope, falling back to the invoking context repository.

        Raises:
            SettingsLoadError: Raised when neither `repo` nor `GITHUB_REPOSITORY` is set.
        """

        owner_scope = self.repo or self.github_repository
        if not owner_scope:
            raise SettingsLoadError("No repository supplied. Set the `repo` input or GITHUB_REPOSITORY.")
        return owner_scope


class SettingsOverrides(BaseModel):
    """Explicit command-line values applied on top of environment settings.

    Attributes:
        workflow: Workflow name or numeric id.
        ref: Git ref to dispatch against.
        repo: Repository in `owner/repo` form.
        inputs: JSON-encoded workflow inputs.
        wait: Whether to wait for the run to complete.
    """

    workflow: str | None = None
    ref: str | None = None
    repo: str | None = None
    inputs: str | None = None
    wait: bool | None = None

    @field_validator("workflow", "ref", "repo", "inputs")
    @classmethod
    def _strip_optional_string(cls, value: str | None) -> str | None:
        return value.strip() if value is not None else None

    @field_validator("repo")
    @classmethod
    def _validate_owner_scope(cls, value: str | None) -> str | None:
        return _config_validate_owner_scope(value) if value is not None else None

    @field_validator("wait", mode="before")
    @classmethod
    def _validate_wait_flag(cls, value: object) -> bool | None:
        return _config_validate_wait_flag(value) if value is not None else None


def _config_is_owner_scope(value: str) -> bool:
    owner, separator, repository = value.partition("/")
    return bool(separator and owner and repository and "/" not in repository)


def _config_validate_owner_scope(value: str) -> str:
    if value and not _config_is_owner_scope(value):
        raise ValueError("repository must use the `owner/repo` form")
    return value


def _config_validate_wait_flag(value: object) -> bool:
    if isinstance(value, bool):
        return value
    normalized_value = str(value).strip().lower()
    if normalized_value in _TRUE_VALUES:
        return True
    if normalized_value in _FALSE_VALUES:
        return False
    raise ValueError("wait must be `true` or `false`")


def config_load_settings(**overrides: object) -> AppSettings:
    """Load and validate runtime settings from environment and dotenv, then apply explicit overrides.

    Args:
        **overrides: `SettingsOverrides` field values taking precedence over the environment.
            None values are ignored.

    Returns:
        AppSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when required settings are missing or invalid.
    """

    try:
        settings = AppSettings()
        explicit_values = SettingsOverrides(**overrides).model_dump(exclude_none=True)
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update action inputs or environment variables. Details: {error}"
        ) from error

    if explicit_values:
        settings = settings.model_copy(update=explicit_values)
    if not settings.workflow:
        raise SettingsLoadError("No workflow supplied. Set the `workflow` input or pass --workflow.")
    return settings
