"""Shared behaviour of the single-turn AI chat nodes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from ...core.config import settings
from ...core.exceptions import CredentialMissingError, NodeValidationError
from ...engine import llm_provider
from ...engine.expression_engine import expression_engine
from ..base import BaseNode, NodeProperty

if TYPE_CHECKING:
    from ...engine.context import ExecutionContext
    from ...engine.types import NodeExecutionRequest

DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant."


def prompt_properties(default_model: str, variable_required: bool) -> list[NodeProperty]:
    return [
        NodeProperty(
            display_name="Variable name",
            name="variablesName",
            type="string",
            default="",
            required=variable_required,
            description="Reference the result in later nodes by this name",
        ),
        NodeProperty(
            display_name="User prompt",
            name="userPrompt",
            type="string",
            default="",
            required=True,
            description="Supports {{variables}} from earlier nodes",
        ),
        NodeProperty(
            display_name="System prompt",
            name="systemPrompt",
            type="string",
            default=DEFAULT_SYSTEM_PROMPT,
        ),
        NodeProperty(
            display_name="Model",
            name="model",
            type="string",
            default=default_model,
        ),
    ]


class AIChatNode(BaseNode):
    """
    Base class for provider chat nodes.

    Subclasses set the provider, the credential env var, the default model
    and the key the generated text is stored under.
    """

    provider: ClassVar[llm_provider.Provider]
    credential_env: ClassVar[str]
    default_model: ClassVar[str]
    output_key: ClassVar[str] = "text"
    # None means the node config must name the output variable
    default_variable: ClassVar[str | None] = None

    async def run(self, request: NodeExecutionRequest) -> ExecutionContext:
        data = request.data
        context = request.context
        variable_name = self._variable_name(data)

        system_template = self.get_parameter(data, "systemPrompt")
        system_prompt = (
            expression_engine.render(system_template, context)
            if system_template
            else DEFAULT_SYSTEM_PROMPT
        )
        user_prompt = expression_engine.render(data["userPrompt"], context)

        api_key = settings.provider_key(self.credential_env)
        if not api_key:
            raise CredentialMissingError(
                f"{self.label}: {self.credential_env} environment variable is required"
            )

        text = await llm_provider.generate_text(
            provider=self.provider,
            model=self.get_parameter(data, "model", self.default_model),
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            api_key=api_key,
        )

        return context.with_output(variable_name, {self.output_key: text})

    def _variable_name(self, data: dict[str, Any]) -> str:
        name = self.get_parameter(data, "variablesName", self.default_variable)
        if not name:
            raise NodeValidationError(f"{self.label}: Variable name is required")
        return name
