"""YAML frontmatter for vault notes."""

import logging
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DELIMITER = "---"


def build_frontmatter(fields: dict[str, Any]) -> str:
    """
    Render a frontmatter block.

    Keys keep insertion order and lists of scalars use flow style, so
    {"created": date(2026, 1, 28), "tags": ["daily"]} renders as:

        ---
        created: 2026-01-28
        tags: [daily]
        ---
    """
    body = yaml.safe_dump(
        fields,
        sort_keys=False,
        default_flow_style=None,
        allow_unicode=True,
    )
    return f"{DELIMITER}\n{body}{DELIMITER}\n"


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """
    Split note content into frontmatter and body.

    Returns:
        (fields, body). Content without a closed frontmatter block, or with
        YAML that is not a mapping, comes back as ({}, content).
    """
    lines = content.splitlines(keepends=True)
    if not lines or lines[0].rstrip() != DELIMITER:
        return {}, content

    for index, line in enumerate(lines[1:], start=1):
        if line.rstrip() == DELIMITER:
            raw = "".join(lines[1:index])
            body = "".join(lines[index + 1 :])
            break
    else:
        return {}, content

    try:
        fields = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        logger.debug(f"Invalid frontmatter: {e}")
        return {}, content

    if fields is None:
        return {}, body
    if not isinstance(fields, dict):
        return {}, content
    return fields, body


def strip_frontmatter(content: str) -> str:
    """Note body without its frontmatter block."""
    _, body = parse_frontmatter(content)
    return body.lstrip("\n")
