"""Text template renderer for manifest bodies.

Templates reference values as ``${Key}``.  Replacement is **text-level**
so YAML key ordering and comments survive byte-for-byte, and output is
deterministic for identical inputs.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from typing import Dict, FrozenSet, List, Optional

# ── constants ────────────────────────────────────────────────────────

_TOKEN_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


class TemplateError(ValueError):
    """Template data does not satisfy the template."""


# ── template data ────────────────────────────────────────────────────


@dataclass(frozen=True)
class TectonicTemplateData:
    """Values available to the tectonic manifest templates."""

    KubeAddonOperatorImage: str
    PullSecret: str

    def substitutions(self) -> Dict[str, str]:
        return asdict(self)


# ── public API ───────────────────────────────────────────────────────


def template_keys(template_text: str) -> FrozenSet[str]:
    """Return every ``${Key}`` referenced by *template_text*."""
    return frozenset(_TOKEN_RE.findall(template_text))


def render_template(
    template_text: str,
    substitutions: Dict[str, str],
    *,
    required_keys: Optional[FrozenSet[str]] = None,
) -> str:
    """Replace all ``${Key}`` tokens in *template_text*.

    Parameters
    ----------
    template_text:
        Raw template content.
    substitutions:
        Mapping of key → value, keys without the ``${}`` wrapper.
    required_keys:
        Keys that **must** map to a non-empty value.  Defaults to every key
        the template references.

    Raises
    ------
    TemplateError
        If a required key is missing or empty, or a token would be left
        unrendered.
    """
    if required_keys is None:
        required_keys = template_keys(template_text)

    missing: List[str] = sorted(
        k for k in required_keys if not substitutions.get(k)
    )
    if missing:
        raise TemplateError(
            f"Missing template value(s): {', '.join(missing)}"
        )

    def _replace(match: "re.Match[str]") -> str:
        key = match.group(1)
        if key not in substitutions:
            raise TemplateError(f"Template references unknown key: {key}")
        return str(substitutions[key])

    return _TOKEN_RE.sub(_replace, template_text)


def apply_template_data(template_text: str, data: TectonicTemplateData) -> bytes:
    """Render *template_text* with *data*; return UTF-8 bytes."""
    return render_template(template_text, data.substitutions()).encode("utf-8")
