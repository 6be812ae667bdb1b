"""
TemplateSpec: selects one of the script, template or expression engines.
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

SCRIPT = "script"
TEMPLATE = "template"
EXPRESSION = "expression"

# Fixed precedence when more than one body is populated.
ENGINE_ORDER: tuple[str, ...] = (SCRIPT, TEMPLATE, EXPRESSION)


class TemplateSpec(BaseModel):
    """
    At most one body is expected to be non-empty. When several are set the
    first in ENGINE_ORDER wins; when none are set the render is a no-op.

    Accepts the config keys ``javascript`` and ``expr`` as aliases.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    script: str = Field("", validation_alias=AliasChoices("script", "javascript"))
    template: str = ""
    expression: str = Field("", validation_alias=AliasChoices("expression", "expr"))

    def populated_engines(self) -> list[str]:
        return [name for name in ENGINE_ORDER if getattr(self, name)]

    def selected_engine(self) -> str | None:
        populated = self.populated_engines()
        return populated[0] if populated else None

    def body(self, engine: str) -> str:
        return getattr(self, engine)
