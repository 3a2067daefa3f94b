import json
import random

import pytest

from core.errors import StoreCorruptedError
from models import AIProvider


def _active_count(path):
    data = json.loads(path.read_text())
    return sum(1 for rec in data["configs"] if rec.get("isActive"))


async def _create(store, name="cfg", **fields):
    fields.setdefault("provider", "openai")
    fields.setdefault("api_key", "sk-test-1234567")
    return await store.create(name=name, **fields)


async def test_create_assigns_id_and_timestamps(configs):
    config = await _create(configs, base_url=None, config={"appName": "x"})

    assert config.id.startswith("ai-config-")
    assert config.provider is AIProvider.OPENAI
    assert config.created_at == config.updated_at
    assert config.created_at.endswith("Z")
    assert config.enabled is True
    assert config.is_active is False

    stored = json.loads(configs.document.path.read_text())["configs"][0]
    assert stored["apiKey"] == "sk-test-1234567"
    assert stored["config"] == {"appName": "x"}
    assert "baseUrl" not in stored


async def test_creating_active_config_deactivates_others(configs, tmp_path):
    first = await _create(configs, "one", is_active=True)
    second = await _create(configs, "two", is_active=True)

    assert (await configs.get_by_id(first.id)).is_active is False
    assert (await configs.get_active()).id == second.id
    assert _active_count(tmp_path / "ai_configs.json") == 1


async def test_update_merges_and_keeps_unset_fields(configs):
    config = await _create(configs, model="gpt-4o")
    updated = await configs.update(config.id, name="renamed")

    assert updated.name == "renamed"
    assert updated.model == "gpt-4o"
    assert updated.api_key == "sk-test-1234567"
    assert updated.created_at == config.created_at


async def test_update_missing_returns_none(configs):
    assert await configs.update("nope", name="x") is None


async def test_delete(configs):
    config = await _create(configs)
    assert await configs.delete(config.id) is True
    assert await configs.delete(config.id) is False
    assert await configs.list() == []


async def test_set_active_refuses_disabled(configs):
    config = await _create(configs, enabled=False)
    assert await configs.set_active(config.id) is None
    assert await configs.set_active("missing") is None
    assert (await configs.get_by_id(config.id)).is_active is False


async def test_get_active_ignores_disabled(configs):
    config = await _create(configs, is_active=True)
    await configs.update(config.id, enabled=False)
    assert await configs.get_active() is None


async def test_list_is_newest_first(configs):
    path = configs.document.path
    path.write_text(json.dumps({"configs": [
        {"id": "ai-config-1000-aaa", "provider": "openai", "name": "old",
         "apiKey": "k", "createdAt": "2024-01-01T00:00:00.000Z"},
        {"id": "ai-config-3000-ccc", "provider": "gemini", "name": "no-stamp",
         "apiKey": "k"},
        {"id": "ai-config-2000-bbb", "provider": "anthropic", "name": "new",
         "apiKey": "k", "createdAt": "2025-01-01T00:00:00.000Z"},
    ]}))
    configs.document.invalidate()

    names = [c.name for c in await configs.list()]
    assert names == ["new", "old", "no-stamp"]


async def test_random_operation_sequences_keep_one_active(configs, tmp_path):
    rng = random.Random(1234)
    ids = []
    for _ in range(60):
        op = rng.choice(["create", "update", "activate", "delete"])
        if op == "create" or not ids:
            config = await _create(
                configs, f"c{len(ids)}",
                is_active=rng.random() < 0.5,
                enabled=rng.random() < 0.8,
            )
            ids.append(config.id)
        elif op == "update":
            await configs.update(rng.choice(ids), is_active=rng.random() < 0.5)
        elif op == "activate":
            await configs.set_active(rng.choice(ids))
        else:
            target = rng.choice(ids)
            await configs.delete(target)
            ids.remove(target)

        assert _active_count(tmp_path / "ai_configs.json") <= 1


async def test_corrupt_document_raises(configs):
    configs.document.path.write_text("garbage")
    with pytest.raises(StoreCorruptedError):
        await configs.list()
    assert configs.document.path.read_text() == "garbage"
