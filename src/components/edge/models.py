"""
Edge component models.

Plain request/response values that platform adapters translate to and
from their own types.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from src.components.classifier import ClassifierConfig
from src.components.render import RenderConfig
from src.rules.models import Rules

SOURCE_SPA_SHELL = "spa_shell"
SOURCE_NO_DATA = "fallback_no_data"


@dataclass(frozen=True)
class EdgeRequest:
    """An inbound HTTP request; header names are matched case-insensitively."""

    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    method: str = "GET"

    def header(self, name: str) -> str | None:
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None


@dataclass(frozen=True)
class EdgeResponse:
    """
    The edge's answer.

    passthrough marks responses a middleware adapter may replace with the
    wrapped application's own response (plain SPA traffic).
    """

    status: int
    headers: dict[str, str]
    body: str
    passthrough: bool = False


@dataclass(frozen=True)
class EdgeConfig:
    """Everything the handler reads from rules."""

    classifier: ClassifierConfig
    render: RenderConfig
    resolved_max_age: int = 300
    fallback_max_age: int = 120
    shell_max_age: int = 60

    @classmethod
    def from_rules(cls, rules: Rules) -> EdgeConfig:
        return cls(
            classifier=ClassifierConfig.from_rules(rules),
            render=RenderConfig.from_rules(rules),
            resolved_max_age=rules.cache.resolved_max_age,
            fallback_max_age=rules.cache.fallback_max_age,
            shell_max_age=rules.cache.shell_max_age,
        )
