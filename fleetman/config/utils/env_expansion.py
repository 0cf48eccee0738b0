"""Environment variable expansion for configuration values."""
import os
import re
from typing import Any, Mapping, Optional

_VAR_PATTERN = re.compile(r"\$(\w+|\{[^}]*\})")


def _expand_from(value: str, environ: Mapping[str, str]) -> str:
    def replace(match: "re.Match[str]") -> str:
        name = match.group(1)
        if name.startswith("{"):
            name = name[1:-1]
        return environ.get(name, match.group(0))

    return _VAR_PATTERN.sub(replace, value)


def expand_env_vars(value: Any, environ: Optional[Mapping[str, str]] = None) -> Any:
    """
    Recursively expand ``$VAR`` and ``${VAR}`` references in string values.

    Dicts and lists are walked; other values are returned unchanged.
    References to unset variables are left as-is. Variables are read from
    ``environ`` when given, otherwise from the process environment.
    """
    if isinstance(value, str):
        if environ is None:
            return os.path.expandvars(value)
        return _expand_from(value, environ)
    if isinstance(value, dict):
        return {key: expand_env_vars(item, environ) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_env_vars(item, environ) for item in value]
    return value
