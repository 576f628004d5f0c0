import os
from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import ValidationError

from src.rules.models import Rules

SYSTEM_DOMAINS_ENV = "SEO_SYSTEM_DOMAINS"


def load_rules(path: Path, env: Mapping[str, str] | None = None) -> Rules:
    """
    Load and validate the rules file.
    Raises FileNotFoundError if file missing.
    Raises ValueError if the YAML or the schema is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Rules file not found at: {path}")

    with open(path) as f:
        content = f.read()

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in rules file: {e}") from e

    try:
        rules = Rules.model_validate(data)
    except ValidationError as e:
        # Re-raise with a clear message for the caller/logs
        raise ValueError(f"Rules validation failed:\n{e}") from e

    return apply_env_overrides(rules, os.environ if env is None else env)


def apply_env_overrides(rules: Rules, env: Mapping[str, str]) -> Rules:
    """
    Append deployment-specific system domains from the environment.

    Preview deployments get their own hostnames, which are not known when
    rules.yaml is written.
    """
    raw = env.get(SYSTEM_DOMAINS_ENV, "")
    extra = [d.strip().lower() for d in raw.split(",") if d.strip()]
    if not extra:
        return rules

    merged = list(rules.domains.system)
    for domain in extra:
        if domain not in merged:
            merged.append(domain)

    domains = rules.domains.model_copy(update={"system": merged})
    return rules.model_copy(update={"domains": domains})
