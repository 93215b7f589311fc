"""
Agent providers: registry, launch recipes and process invocation.
"""

from .exceptions import (
    AgentError,
    AgentProcessError,
    AgentSpawnError,
    AgentTimeoutError,
    BuiltInProviderError,
)
from .invoker import (
    DEFAULT_TIMEOUT,
    AgentInvoker,
    command_available,
    detect_available,
    probe_available,
)
from .models import (
    ArgumentRule,
    CustomAgentEntry,
    ProviderDescriptor,
    RegisteredAgent,
    ResponseRule,
    build_template_args,
)
from .registry import BUILTIN_PROVIDERS, AgentRegistry, CustomAgentStore

__all__ = [
    # Exceptions
    "AgentError",
    "AgentProcessError",
    "AgentSpawnError",
    "AgentTimeoutError",
    "BuiltInProviderError",
    # Invocation
    "DEFAULT_TIMEOUT",
    "AgentInvoker",
    "command_available",
    "detect_available",
    "probe_available",
    # Models
    "ArgumentRule",
    "CustomAgentEntry",
    "ProviderDescriptor",
    "RegisteredAgent",
    "ResponseRule",
    "build_template_args",
    # Registry
    "BUILTIN_PROVIDERS",
    "AgentRegistry",
    "CustomAgentStore",
]
