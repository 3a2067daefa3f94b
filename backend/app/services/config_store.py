"""AIConfigStore: AI provider configs persisted in ai_configs.json.

Single-active invariant: whenever a create or update sets isActive=true,
every other active record is switched off in the same document write.
"""
import logging
from datetime import datetime
from typing import Any

from models import AIConfig, id_timestamp, new_id, now_iso
from services.json_store import JsonDocument

logger = logging.getLogger("lph.config_store")

DOCUMENT_KEY = "configs"


def default_document() -> dict:
    return {DOCUMENT_KEY: []}


def _order_key(record: AIConfig) -> float:
    """Epoch ms used for newest-first ordering."""
    if record.created_at:
        try:
            stamp = datetime.fromisoformat(record.created_at.replace("Z", "+00:00"))
            return stamp.timestamp() * 1000
        except ValueError:
            pass
    return float(id_timestamp(record.id))


def _deactivate_others(records: list[dict], keep_id: str | None, now: str) -> None:
    for rec in records:
        if rec.get("isActive") and rec.get("id") != keep_id:
            rec["isActive"] = False
            rec["updatedAt"] = now


class AIConfigStore:

    def __init__(self, document: JsonDocument):
        self.document = document

    async def list(self) -> list[AIConfig]:
        doc = await self.document.read()
        configs = [
            AIConfig.model_validate(rec)
            for rec in self.document.records(doc, DOCUMENT_KEY)
        ]
        configs.sort(key=_order_key, reverse=True)
        return configs

    async def get_by_id(self, config_id: str) -> AIConfig | None:
        doc = await self.document.read()
        for rec in self.document.records(doc, DOCUMENT_KEY):
            if rec.get("id") == config_id:
                return AIConfig.model_validate(rec)
        return None

    async def get_active(self) -> AIConfig | None:
        doc = await self.document.read()
        for rec in self.document.records(doc, DOCUMENT_KEY):
            config = AIConfig.model_validate(rec)
            if config.is_active and config.enabled:
                return config
        return None

    async def create(self, **fields: Any) -> AIConfig:
        """Insert a new record. ``fields`` use snake_case attribute names."""
        now = now_iso()
        config = AIConfig(
            **fields,
            id=new_id("ai-config"),
            created_at=now,
            updated_at=now,
        )

        def apply(doc: dict) -> AIConfig:
            records = self.document.records(doc, DOCUMENT_KEY)
            if config.is_active:
                _deactivate_others(records, None, now)
            records.append(config.to_json())
            return config

        created = await self.document.mutate(apply)
        logger.info(
            "AI config created: %s (%s), active=%s",
            created.id, created.provider.value, created.is_active,
        )
        return created

    async def update(self, config_id: str, **fields: Any) -> AIConfig | None:
        """Merge ``fields`` into an existing record; unset fields are kept."""
        updated = await self.document.mutate(
            lambda doc: self._apply_update(doc, config_id, fields)
        )
        if updated is not None:
            logger.info("AI config updated: %s (fields=%s)", config_id, sorted(fields))
        return updated

    async def delete(self, config_id: str) -> bool:

        def apply(doc: dict) -> bool:
            records = self.document.records(doc, DOCUMENT_KEY)
            kept = [rec for rec in records if rec.get("id") != config_id]
            if len(kept) == len(records):
                return False
            doc[DOCUMENT_KEY] = kept
            return True

        deleted = await self.document.mutate(apply)
        if deleted:
            logger.info("AI config deleted: %s", config_id)
        return deleted

    async def set_active(self, config_id: str) -> AIConfig | None:
        """Make ``config_id`` the sole active record. Disabled configs are refused."""
        activated = await self.document.mutate(
            lambda doc: self._apply_update(
                doc, config_id, {"is_active": True}, require_enabled=True,
            )
        )
        if activated is not None:
            logger.info("AI active provider set to: %s (%s)", activated.name, activated.provider.value)
        return activated

    # ------------------------------------------------------------------
    def _apply_update(
        self,
        doc: dict,
        config_id: str,
        fields: dict,
        *,
        require_enabled: bool = False,
    ) -> AIConfig | None:
        records = self.document.records(doc, DOCUMENT_KEY)
        for index, rec in enumerate(records):
            if rec.get("id") != config_id:
                continue
            current = AIConfig.model_validate(rec)
            if require_enabled and not current.enabled:
                return None
            now = now_iso()
            if fields.get("is_active"):
                _deactivate_others(records, config_id, now)
            merged = AIConfig.model_validate(
                {**current.model_dump(), **fields, "updated_at": now}
            )
            records[index] = merged.to_json()
            return merged
        return None
