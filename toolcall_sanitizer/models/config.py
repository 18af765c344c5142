"""Sanitizer configuration model."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_TEMPLATE_KEY = "default"

DEFAULT_SUMMARY_TEMPLATES: dict[str, str] = {
    "execute_cql_search": 'Searched Confluence for "{cql}" and found {count} result(s)',
    "get_page_content": "Retrieved content from page: {url|page_id}",
    "web_search": "Performed web search for: {query}",
    DEFAULT_TEMPLATE_KEY: "Successfully executed {function_name} with {args}",
}

# Used when a function template references a field the response cannot supply
DEFAULT_FALLBACK_TEMPLATES: dict[str, str] = {
    "execute_cql_search": 'Successfully executed Confluence search for "{cql}"',
}


class SanitizerConfig(BaseModel):
    """Immutable settings read by every pipeline stage.

    Accepts both snake_case field names and their camelCase aliases
    (``deduplicationWindow``, ``summaryTemplates``, ...).
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True, extra="ignore")

    deduplication_enabled: bool = True
    deduplication_window: int = 3
    preserve_failed_calls: bool = False
    strict_validation: bool = True
    argument_matching: Literal["lenient", "strict"] = "lenient"

    summary_templates: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_SUMMARY_TEMPLATES))
    fallback_templates: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_FALLBACK_TEMPLATES))
    initiated_template: str = "Initiated {function_name} with {args}"
    failure_template: str = "Failed to execute {function_name}: {content}"

    # Carried for collaborators (request handlers, CLI); the pipeline ignores them
    max_context_length: int = 4000
    debug_mode: bool = False

    @field_validator("summary_templates")
    @classmethod
    def validate_summary_templates(cls, v: dict[str, str]) -> dict[str, str]:
        """Require a fallback template."""
        if DEFAULT_TEMPLATE_KEY not in v:
            raise ValueError(f"summary_templates must define a '{DEFAULT_TEMPLATE_KEY}' entry")
        return v

    def get_summary_template(self, function_name: str) -> str:
        """Return the template for a function, or the default one."""
        return self.summary_templates.get(function_name, self.summary_templates[DEFAULT_TEMPLATE_KEY])

    def with_updates(self, **changes: Any) -> "SanitizerConfig":
        """Return a validated copy with the given fields replaced."""
        return SanitizerConfig.model_validate({**self.model_dump(), **changes})


default_config = SanitizerConfig()
