"""
Agent provider data models.

A provider descriptor is a tagged launch recipe for an external command-line
agent. Argument construction is never stored as behaviour: it is re-derived
from the (rule, args, args_template) triple every time it is needed, which
keeps custom providers serializable.

Argument rules:
    - append: fixed leading arguments, then the prompt as one argument
      (used by the built-in providers)
    - template: an args template string. If it contains ``{prompt}`` the
      prompt is substituted and the result is split on single spaces;
      otherwise the args are ``[template, prompt]``.

Known defect (kept for compatibility with existing custom-agents.json
files): a multi-word prompt substituted into a ``{prompt}`` template is
split into several process arguments.

Example:
    >>> descriptor = ProviderDescriptor.custom("chat", "chat", "--msg {prompt}")
    >>> descriptor.build_args("hello")
    ['--msg', 'hello']
"""

from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

PROMPT_TOKEN = "{prompt}"


class ArgumentRule(str, Enum):
    """How a provider turns a prompt into process arguments."""

    APPEND = "append"
    TEMPLATE = "template"


class ResponseRule(str, Enum):
    """How a provider's standard output becomes the response text."""

    TRIM = "trim"


def build_template_args(template: str, prompt: str) -> list[str]:
    """
    Build process arguments from an args template.

    Args:
        template: Args template, optionally containing ``{prompt}``
        prompt: Prompt text

    Returns:
        Argument list (see module docstring for the rule)

    Example:
        >>> build_template_args("chat --msg {prompt}", "hello")
        ['chat', '--msg', 'hello']
        >>> build_template_args("chat", "hello")
        ['chat', 'hello']
    """
    if PROMPT_TOKEN in template:
        return template.replace(PROMPT_TOKEN, prompt, 1).split(" ")
    return [template, prompt]


class ProviderDescriptor(BaseModel):
    """
    Launch recipe for one command-line agent.

    Attributes:
        name: Registry key (e.g. 'claude')
        label: Human-readable label (e.g. 'Claude CLI')
        command: Executable to spawn
        rule: Argument construction rule
        args: Fixed leading arguments for the append rule
        args_template: Template for the template rule
        response_rule: Response extraction rule
    """

    model_config = ConfigDict(frozen=True)

    name: str
    label: str
    command: str
    rule: ArgumentRule = ArgumentRule.TEMPLATE
    args: tuple[str, ...] = ()
    args_template: str = PROMPT_TOKEN
    response_rule: ResponseRule = ResponseRule.TRIM

    @classmethod
    def builtin(
        cls, name: str, label: str, command: str, *args: str
    ) -> "ProviderDescriptor":
        """Create a fixed recipe that appends the prompt after ``args``."""
        return cls(
            name=name,
            label=label,
            command=command,
            rule=ArgumentRule.APPEND,
            args=tuple(args),
        )

    @classmethod
    def custom(
        cls,
        name: str,
        command: str,
        args_template: str = PROMPT_TOKEN,
        label: str | None = None,
    ) -> "ProviderDescriptor":
        """Create a user-defined recipe driven by an args template."""
        return cls(
            name=name,
            label=label or f"Custom {name}",
            command=command,
            rule=ArgumentRule.TEMPLATE,
            args_template=args_template,
        )

    def build_args(self, prompt: str) -> list[str]:
        """Build the argument list (without the command) for a prompt."""
        if self.rule == ArgumentRule.APPEND:
            return [*self.args, prompt]
        return build_template_args(self.args_template, prompt)

    def build_command(self, prompt: str) -> list[str]:
        """Build the full argv for a prompt."""
        return [self.command, *self.build_args(prompt)]

    def parse_response(self, output: str) -> str:
        """Extract the response text from raw standard output."""
        # TRIM is the only rule
        return output.strip()


class CustomAgentEntry(BaseModel):
    """
    Serialized form of a custom provider in custom-agents.json.

    Files written by earlier versions use ``name`` for the label; it is accepted
    as an alias when loading.
    """

    model_config = ConfigDict(populate_by_name=True)

    label: str = Field(validation_alias=AliasChoices("label", "name"))
    command: str
    args_template: str = Field(
        default=PROMPT_TOKEN,
        validation_alias=AliasChoices("argsTemplate", "args_template"),
        serialization_alias="argsTemplate",
    )

    @classmethod
    def from_descriptor(cls, descriptor: ProviderDescriptor) -> "CustomAgentEntry":
        return cls(
            label=descriptor.label,
            command=descriptor.command,
            args_template=descriptor.args_template,
        )

    def to_descriptor(self, name: str) -> ProviderDescriptor:
        """Re-derive the provider descriptor from its persisted template."""
        return ProviderDescriptor.custom(
            name, self.command, self.args_template, label=self.label
        )


class RegisteredAgent(BaseModel):
    """One row of the registry listing."""

    name: str
    descriptor: ProviderDescriptor
    is_custom: bool = False
