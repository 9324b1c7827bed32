"""Input document schemas for the three record sets.

The JSON documents use camelCase keys (``artistIds``, ``songIds``);
models accept either the alias or the field name. A ``null`` on any
declared optional key means "use the default" (weight 1, empty lists,
no credits), so producers may write the key out explicitly.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _null_means_default(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        declared = set(cls.model_fields)
        declared.update(f.alias for f in cls.model_fields.values() if f.alias)
        return {k: v for k, v in data.items() if v is not None or k not in declared}


# --- Base relations: {nodes: [...], edges: [...]} ---


class PerformerRecord(_Record):
    """One base-relations node. Unknown keys are kept as attributes."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    name: str

    @model_validator(mode="before")
    @classmethod
    def _fill_identity(cls, data: Any) -> Any:
        # Either key may stand in for the other; a record with neither is invalid.
        if isinstance(data, dict):
            node_id = data.get("id") or data.get("name")
            if node_id:
                data = {**data, "id": node_id, "name": data.get("name") or node_id}
        return data

    @property
    def attributes(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


class RelationRecord(_Record):
    source: str
    target: str
    weight: float = 1.0
    relation: str | None = None


class BaseRelationsDoc(_Record):
    nodes: list[PerformerRecord]
    edges: list[RelationRecord] = Field(default_factory=list)


# --- Work credits: {songs: [...]} ---


class CreditsRecord(_Record):
    writers: list[str] = Field(default_factory=list)
    producers: list[str] = Field(default_factory=list)
    performers: list[str] = Field(default_factory=list)


class WorkRecord(_Record):
    id: str
    title: str | None = None
    artist_ids: list[str] = Field(default_factory=list, alias="artistIds")
    year: int | None = None
    credits: CreditsRecord = Field(default_factory=CreditsRecord)


class WorkCreditsDoc(_Record):
    songs: list[WorkRecord]


# --- Collections: {albums: [...]} ---


class CollectionRecord(_Record):
    id: str
    title: str | None = None
    artist_ids: list[str] = Field(default_factory=list, alias="artistIds")
    year: int | None = None
    song_ids: list[str] = Field(default_factory=list, alias="songIds")


class CollectionsDoc(_Record):
    albums: list[CollectionRecord]
