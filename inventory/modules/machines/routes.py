from fastapi import APIRouter, Depends, HTTPException, status
from inventory.database.supabase_client import get_supabase
from inventory.modules.machines.schemas import MachineCreate, MachineUpdate, MachineResponse
from inventory.modules.machines.service import MachineService
from inventory.core.dependencies import require_permission
from inventory.core.session import SessionContext
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/machines", tags=["machines"])


def get_machine_service(supabase: Client = Depends(get_supabase)) -> MachineService:
    return MachineService(supabase)


@router.get("", response_model=List[MachineResponse])
async def list_machines(
    status: Optional[str] = None,
    session: SessionContext = Depends(require_permission("machines.view")),
    service: MachineService = Depends(get_machine_service)
):
    """List machines, optionally filtered by status"""
    return service.list_machines(status=status)


@router.post("", response_model=MachineResponse, status_code=201)
async def create_machine(
    machine_data: MachineCreate,
    session: SessionContext = Depends(require_permission("machines.create")),
    service: MachineService = Depends(get_machine_service)
):
    """Create a new machine"""
    return service.create_machine(machine_data)


@router.get("/{machine_id}", response_model=MachineResponse)
async def get_machine(
    machine_id: str,
    session: SessionContext = Depends(require_permission("machines.view")),
    service: MachineService = Depends(get_machine_service)
):
    """Get machine by ID"""
    return service.get_machine_by_id(machine_id)


@router.put("/{machine_id}", response_model=MachineResponse)
async def update_machine(
    machine_id: str,
    machine_data: MachineUpdate,
    session: SessionContext = Depends(require_permission("machines.update")),
    service: MachineService = Depends(get_machine_service)
):
    """Update machine"""
    return service.update_machine(machine_id, machine_data)


@router.delete("/{machine_id}", status_code=204)
async def delete_machine(
    machine_id: str,
    session: SessionContext = Depends(require_permission("machines.delete")),
    service: MachineService = Depends(get_machine_service)
):
    """Delete machine"""
    if not service.delete_machine(machine_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Machine not found")
    return None
