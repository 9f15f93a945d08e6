from pydantic import BaseModel, ConfigDict, Field

from .numeric import INT64, NumericBounds


class BindingOptions(BaseModel):
    """Configuration of an :class:`~argbind.core.binder.ArgumentBinder`."""

    camel_case_keys: bool = Field(
        default=False,
        description=(
            "Look up composite field values by the camelCase form of the "
            "attribute name (author_id -> authorId) unless an alias is set."
        ),
    )
    ignore_unknown_keys: bool = Field(
        default=True,
        description=(
            "Ignore keys in a nested argument map that match no declared "
            "field. When False such keys are reported as a type mismatch."
        ),
    )
    default_int_bounds: NumericBounds | None = Field(
        default=INT64,
        description=(
            "Range enforced on plain int targets. Annotated bounds on a "
            "target take precedence. None disables the check."
        ),
    )

    model_config = ConfigDict(extra="forbid", frozen=True)
