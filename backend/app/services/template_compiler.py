"""
Template compilation service.

Substitutes values into {{name}} placeholder tokens. Compilation is a single
literal scan for tokens; key names are never interpolated into a regular
expression, so keys containing regex metacharacters (e.g. "a.b" or "x+y")
only ever match their own literal token.

Tokens without a matching key are left in place.

Public API:
  parse_template_data(raw: str | None) -> dict
  compile_template(template: str | None, data: dict) -> str | None
"""

import json
import logging
import re
from typing import Any, Optional

from app.errors import InvalidTemplateData

logger = logging.getLogger(__name__)

# Any {{...}} that does not itself contain braces
_TOKEN_RE = re.compile(r"\{\{([^{}]*)\}\}")


def stringify_value(value: Any) -> str:
    """
    Render a template data value as text.

    true/false → "true"/"false", null → "", whole floats drop the ".0",
    lists and objects are rendered as compact JSON.
    """
    if value is True:
        return "true"
    if value is False:
        return "false"
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def parse_template_data(raw: Optional[str]) -> dict[str, Any]:
    """
    Parse the TemplateData JSON string of a SendEmail request.

    Missing or empty data is an empty substitution set. Anything that is not
    a JSON object (arrays, scalars, null, invalid JSON) raises
    InvalidTemplateData.
    """
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except ValueError as e:
        logger.warning(f"TemplateData is not valid JSON: {e}")
        raise InvalidTemplateData() from e
    if not isinstance(data, dict):
        raise InvalidTemplateData()
    return data


def compile_template(template: Optional[str], data: dict[str, Any]) -> Optional[str]:
    """
    Replace every {{key}} token in `template` with the stringified data value.

    None stays None (an absent template field stays absent).
    """
    if template is None:
        return None

    def _substitute(match: re.Match) -> str:
        key = match.group(1)
        if key in data:
            return stringify_value(data[key])
        return match.group(0)

    return _TOKEN_RE.sub(_substitute, template)
