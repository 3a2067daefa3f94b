"""Installed package inventory.

Nothing is cached: each request runs the package-manager queries again, so
ids are only meaningful within the list they came from.
"""
import asyncio

from fastapi import APIRouter, HTTPException

from models import Package
from services import packages as inventory

router = APIRouter(prefix="/api/packages", tags=["packages"])


@router.get("", response_model=list[Package], response_model_exclude_none=True)
async def list_packages(search: str | None = None, manager: str | None = None):
    found = await asyncio.to_thread(inventory.collect_packages)
    if search:
        found = inventory.search_packages(found, search)
    if manager:
        found = inventory.filter_by_manager(found, manager)
    return found


@router.get(
    "/search/{query}", response_model=list[Package], response_model_exclude_none=True,
)
async def search_packages(query: str):
    found = await asyncio.to_thread(inventory.collect_packages)
    return inventory.search_packages(found, query)


@router.get("/{package_id}", response_model=Package, response_model_exclude_none=True)
async def get_package(package_id: str):
    found = await asyncio.to_thread(inventory.collect_packages)
    for package in found:
        if package.id == package_id:
            return package
    raise HTTPException(404, "Package not found")
