# ============================================================================
# RENDER MODELS
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Core model - Render request and auxiliary outputs
# PURPOSE: Immutable inputs of a render and the secondary objects it emits
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: RenderRequest, Auxiliary
# DEPENDENCIES: pydantic, dataclasses
# ============================================================================
"""
Render Models

Two models:
- RenderRequest: everything a render needs, frozen so concurrent renders
  never share mutable state
- Auxiliary: a secondary rendered object tracked next to the base

Auxiliary naming invariant: is_outputs=True requires a non-empty name.
It is enforced when the template context is built, not on construction,
so a violating entry surfaces as a ConfigError instead of being dropped.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Optional, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from core.errors import BuildError

if TYPE_CHECKING:
    from engine.model import RenderedObject


# Characters a YAML reader rejects, or folds as line breaks, inside a
# double-quoted scalar
_YAML_UNSAFE = re.compile(
    "[^\x20-\x7e\xa0-\u2027\u202a-\ud7ff\ue000-\ufefe\uff00-\ufffd\U00010000-\U0010ffff]"
)


def _escape(match: "re.Match") -> str:
    return "\\u%04x" % ord(match.group())


def json_field_source(field_name: str, data: Any) -> str:
    """
    Template source declaring one field as JSON data: `<field>: <json>`.

    Text is written unescaped so characters outside the Basic Multilingual
    Plane reach the template intact. Only characters YAML cannot carry in
    a quoted scalar are escaped.

    Raises:
        TypeError, ValueError: If data is not JSON-serializable
    """
    text = json.dumps(data, ensure_ascii=False)
    return f"{field_name}: {_YAML_UNSAFE.sub(_escape, text)}"


class RenderRequest(BaseModel):
    """
    Immutable render input.

    A definition renderer turns this into base/auxiliary objects.
    """
    model_config = ConfigDict(frozen=True)

    template: str = Field(..., description="Definition template text")
    params: Optional[Any] = Field(
        default=None,
        description="User parameters, injected as the `parameter` field"
    )
    base_context: str = Field(
        default="",
        description="Serialized execution context (`context: {...}`)"
    )

    def parameter_file(self) -> Optional[str]:
        """
        Synthesized `parameter: <json>` source, or None without params.

        Raises:
            BuildError: If params are not JSON-serializable
        """
        if self.params is None:
            return None
        try:
            return json_field_source("parameter", self.params)
        except (TypeError, ValueError) as e:
            raise BuildError(f"marshal parameters: {e}") from e


@dataclass
class Auxiliary:
    """
    Secondary rendered object.

    Attributes:
        ins: Rendered object
        type: Producer identity (trait name or AUXILIARY_WORKLOAD)
        name: outputs field name ("" for a trait's singular output)
        is_outputs: True when produced by an `outputs` entry
    """
    ins: "RenderedObject"
    type: str
    name: str = ""
    is_outputs: bool = False


__all__ = ["RenderRequest", "Auxiliary", "json_field_source"]
