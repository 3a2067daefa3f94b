from fastapi import APIRouter, Depends, HTTPException

from api.deps import get_alias_store
from models import Alias, AliasCreate, AliasUpdate
from services.alias_store import AliasStore

router = APIRouter(prefix="/api/aliases", tags=["aliases"])


@router.get("", response_model=list[Alias])
async def list_aliases(store: AliasStore = Depends(get_alias_store)):
    return await store.list()


@router.get("/{alias_id}", response_model=Alias)
async def get_alias(alias_id: str, store: AliasStore = Depends(get_alias_store)):
    alias = await store.get_by_id(alias_id)
    if not alias:
        raise HTTPException(404, "Alias not found")
    return alias


@router.post("", response_model=Alias, status_code=201)
async def create_alias(data: AliasCreate, store: AliasStore = Depends(get_alias_store)):
    if not data.name or not data.command:
        raise HTTPException(400, "Name and command are required")
    return await store.create(data.name, data.command, data.description or "")


@router.put("/{alias_id}", response_model=Alias)
async def update_alias(
    alias_id: str,
    data: AliasUpdate,
    store: AliasStore = Depends(get_alias_store),
):
    # empty name/command leave the stored value as is; a taken name is a 409
    alias = await store.update(
        alias_id,
        name=data.name or None,
        command=data.command or None,
        description=data.description,
    )
    if not alias:
        raise HTTPException(404, "Alias not found")
    return alias


@router.delete("/{alias_id}")
async def delete_alias(alias_id: str, store: AliasStore = Depends(get_alias_store)):
    if not await store.delete(alias_id):
        raise HTTPException(404, "Alias not found")
    return {"message": "Alias deleted successfully"}
