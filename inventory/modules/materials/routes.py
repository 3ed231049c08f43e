from fastapi import APIRouter, Depends, HTTPException, status
from inventory.database.supabase_client import get_supabase
from inventory.modules.materials.schemas import MaterialCreate, MaterialUpdate, MaterialResponse
from inventory.modules.materials.service import MaterialService
from inventory.core.dependencies import require_permission
from inventory.core.session import SessionContext
from supabase import Client
from typing import List

router = APIRouter(prefix="/materials", tags=["materials"])


def get_material_service(supabase: Client = Depends(get_supabase)) -> MaterialService:
    return MaterialService(supabase)


@router.get("", response_model=List[MaterialResponse])
async def list_materials(
    session: SessionContext = Depends(require_permission("materials.view")),
    service: MaterialService = Depends(get_material_service)
):
    """List all materials"""
    return service.list_materials()


@router.post("", response_model=MaterialResponse, status_code=201)
async def create_material(
    material_data: MaterialCreate,
    session: SessionContext = Depends(require_permission("materials.create")),
    service: MaterialService = Depends(get_material_service)
):
    """Create a new material"""
    return service.create_material(material_data)


@router.get("/{material_id}", response_model=MaterialResponse)
async def get_material(
    material_id: str,
    session: SessionContext = Depends(require_permission("materials.view")),
    service: MaterialService = Depends(get_material_service)
):
    """Get material by ID"""
    return service.get_material_by_id(material_id)


@router.put("/{material_id}", response_model=MaterialResponse)
async def update_material(
    material_id: str,
    material_data: MaterialUpdate,
    session: SessionContext = Depends(require_permission("materials.update")),
    service: MaterialService = Depends(get_material_service)
):
    """Update material"""
    return service.update_material(material_id, material_data)


@router.delete("/{material_id}", status_code=204)
async def delete_material(
    material_id: str,
    session: SessionContext = Depends(require_permission("materials.delete")),
    service: MaterialService = Depends(get_material_service)
):
    """Delete material"""
    if not service.delete_material(material_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Material not found")
    return None
