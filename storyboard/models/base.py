"""Pydantic base for storyboard entities and project documents."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict


def to_camel(name: str) -> str:
    """``order_index`` → ``orderIndex``."""
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


class CamelModel(BaseModel):
    """Entity base: snake_case attributes, camelCase keys in stored documents.

    Stored project documents use the editor's keys (``shotCode``,
    ``scriptText``, ``overlayData``); either spelling is accepted on input,
    so ``update_shot(shot_id, scriptText=...)`` and
    ``update_shot(shot_id, script_text=...)`` are equivalent.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @classmethod
    def field_name_for(cls, key: str) -> str | None:
        """Resolve a snake_case name or camelCase key to the field name.

        Returns ``None`` for keys the model does not define; partial
        updates skip those.
        """
        if key in cls.model_fields:
            return key
        for name, info in cls.model_fields.items():
            if info.alias == key:
                return name
        return None
