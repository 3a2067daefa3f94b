import asyncio
import json

import pytest

from core.errors import AliasNameTakenError


async def test_create_and_get(aliases):
    alias = await aliases.create("gs", "git status")

    assert alias.id.startswith("alias-")
    assert alias.description == ""
    assert await aliases.get_by_id(alias.id) == alias
    assert await aliases.get_by_id("missing") is None


async def test_list_newest_first(aliases):
    aliases.document.path.write_text(json.dumps({"aliases": [
        {"id": "alias-1000-aaa", "name": "a", "command": "ls"},
        {"id": "alias-3000-ccc", "name": "c", "command": "ls -la"},
        {"id": "alias-2000-bbb", "name": "b", "command": "ls -l"},
    ]}))
    aliases.document.invalidate()

    assert [a.name for a in await aliases.list()] == ["c", "b", "a"]


async def test_update_ignores_none(aliases):
    alias = await aliases.create("gs", "git status", "status")
    updated = await aliases.update(alias.id, name=None, command="git status -sb")

    assert updated.name == "gs"
    assert updated.command == "git status -sb"
    assert updated.description == "status"
    assert await aliases.update("missing", name="x") is None


async def test_delete(aliases):
    alias = await aliases.create("gs", "git status")
    assert await aliases.delete(alias.id) is True
    assert await aliases.delete(alias.id) is False
    assert json.loads(aliases.document.path.read_text()) == {"aliases": []}


async def test_duplicate_name_is_rejected(aliases):
    first = await aliases.create("gs", "git status")
    other = await aliases.create("gd", "git diff")

    with pytest.raises(AliasNameTakenError):
        await aliases.create("gs", "git stash")
    with pytest.raises(AliasNameTakenError):
        await aliases.update(other.id, name="gs")
    with pytest.raises(AliasNameTakenError):
        await aliases.update("missing", name="gs")

    assert (await aliases.update(first.id, name="gs")).name == "gs"
    assert sorted(a.name for a in await aliases.list()) == ["gd", "gs"]


async def test_overlapping_creates_keep_names_unique(aliases):
    results = await asyncio.gather(
        *(aliases.create("gs", f"git status {i}") for i in range(5)),
        return_exceptions=True,
    )

    created = [r for r in results if not isinstance(r, Exception)]
    assert len(created) == 1
    assert all(isinstance(r, AliasNameTakenError) for r in results if r not in created)
    stored = json.loads(aliases.document.path.read_text())["aliases"]
    assert [a["name"] for a in stored] == ["gs"]
