"""AliasStore: shell aliases persisted in aliases.json.

Names are unique. The check runs inside the same locked mutate as the write,
so two overlapping requests cannot both claim a name.
"""
import logging
from typing import Any

from core.errors import AliasNameTakenError
from models import Alias, new_id
from services.json_store import JsonDocument

logger = logging.getLogger("lph.alias_store")

DOCUMENT_KEY = "aliases"


def default_document() -> dict:
    return {DOCUMENT_KEY: []}


def _check_name_free(records: list[dict], name: str, exclude_id: str | None = None) -> None:
    for rec in records:
        if rec.get("name") == name and rec.get("id") != exclude_id:
            raise AliasNameTakenError(name)


class AliasStore:

    def __init__(self, document: JsonDocument):
        self.document = document

    async def list(self) -> list[Alias]:
        """All aliases, newest id first (ids embed their creation time)."""
        doc = await self.document.read()
        aliases = [
            Alias.model_validate(rec)
            for rec in self.document.records(doc, DOCUMENT_KEY)
        ]
        aliases.sort(key=lambda a: a.id, reverse=True)
        return aliases

    async def get_by_id(self, alias_id: str) -> Alias | None:
        doc = await self.document.read()
        for rec in self.document.records(doc, DOCUMENT_KEY):
            if rec.get("id") == alias_id:
                return Alias.model_validate(rec)
        return None

    async def create(self, name: str, command: str, description: str = "") -> Alias:
        alias = Alias(
            id=new_id("alias"),
            name=name,
            command=command,
            description=description,
        )

        def apply(doc: dict) -> Alias:
            records = self.document.records(doc, DOCUMENT_KEY)
            _check_name_free(records, name)
            records.append(alias.to_json())
            return alias

        created = await self.document.mutate(apply)
        logger.info("Alias created: %s (%s)", created.name, created.id)
        return created

    async def update(self, alias_id: str, **fields: Any) -> Alias | None:
        """Merge the given fields; fields passed as None are left unchanged.

        Raises AliasNameTakenError if the new name belongs to another alias,
        whether or not ``alias_id`` exists.
        """
        changes = {k: v for k, v in fields.items() if v is not None}

        def apply(doc: dict) -> Alias | None:
            records = self.document.records(doc, DOCUMENT_KEY)
            if "name" in changes:
                _check_name_free(records, changes["name"], exclude_id=alias_id)
            for index, rec in enumerate(records):
                if rec.get("id") == alias_id:
                    merged = Alias.model_validate(
                        {**Alias.model_validate(rec).model_dump(), **changes}
                    )
                    records[index] = merged.to_json()
                    return merged
            return None

        updated = await self.document.mutate(apply)
        if updated is not None:
            logger.info("Alias updated: %s", alias_id)
        return updated

    async def delete(self, alias_id: str) -> bool:

        def apply(doc: dict) -> bool:
            records = self.document.records(doc, DOCUMENT_KEY)
            kept = [rec for rec in records if rec.get("id") != alias_id]
            if len(kept) == len(records):
                return False
            doc[DOCUMENT_KEY] = kept
            return True

        deleted = await self.document.mutate(apply)
        if deleted:
            logger.info("Alias deleted: %s", alias_id)
        return deleted
