"""Actionable error catalog for escli."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "config_not_found": {
        "what": "Config file not found: {path}",
        "next": "Create it with `elasticsearch_url` and `aws_region` keys or pass `--config`.",
    },
    "config_unreadable": {
        "what": "Invalid config file '{path}': {reason}",
        "next": "Fix the YAML syntax or file permissions and retry.",
    },
    "config_shape": {
        "what": "Config file '{path}' {reason}.",
        "next": "Use the keys `profile`, `elasticsearch_url` and `aws_region`.",
    },
    "config_version": {
        "what": "Config file '{path}' declares unsupported version {version}.",
        "next": "Upgrade escli or rewrite the file with `version: 2`.",
    },
    "connection_failed": {
        "what": "Could not connect to {url}: {reason}",
        "next": "Check `elasticsearch_url` in your config and that the cluster is reachable.",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
