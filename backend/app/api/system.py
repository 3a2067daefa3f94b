"""Host information. Every call shells out, so the work runs in a thread."""
import asyncio

from fastapi import APIRouter

from models import PackageManagerStatus, SystemInfo, SystemStats
from services import system

router = APIRouter(prefix="/api/system", tags=["system"])


@router.get("/info", response_model=SystemInfo)
async def system_info():
    return await asyncio.to_thread(system.get_system_info)


@router.get("/stats", response_model=SystemStats)
async def system_stats():
    return await asyncio.to_thread(system.get_system_stats)


@router.get("/package-managers", response_model=list[PackageManagerStatus])
async def package_managers():
    return await asyncio.to_thread(system.get_package_manager_status)
