from fastapi import APIRouter, Depends
from inventory.database.supabase_client import get_supabase
from inventory.modules.transactions.schemas import (
    MaterialTransactionCreate, MaterialTransactionResponse,
    MachineTransactionCreate, MachineTransactionResponse
)
from inventory.modules.transactions.service import MaterialTransactionService, MachineTransactionService
from inventory.core.dependencies import require_permission
from inventory.core.session import SessionContext
from supabase import Client
from typing import List, Optional

router = APIRouter(tags=["transactions"])


def get_material_transaction_service(supabase: Client = Depends(get_supabase)) -> MaterialTransactionService:
    return MaterialTransactionService(supabase)


def get_machine_transaction_service(supabase: Client = Depends(get_supabase)) -> MachineTransactionService:
    return MachineTransactionService(supabase)


@router.get("/material-transactions", response_model=List[MaterialTransactionResponse])
async def list_material_transactions(
    material_id: Optional[str] = None,
    session: SessionContext = Depends(require_permission("material_transactions.view")),
    service: MaterialTransactionService = Depends(get_material_transaction_service)
):
    """List material movements, optionally for one material"""
    return service.list_material_transactions(material_id=material_id)


@router.post("/material-transactions", response_model=MaterialTransactionResponse, status_code=201)
async def create_material_transaction(
    transaction_data: MaterialTransactionCreate,
    session: SessionContext = Depends(require_permission("material_transactions.create")),
    service: MaterialTransactionService = Depends(get_material_transaction_service)
):
    """Record a material movement"""
    return service.create_material_transaction(transaction_data, created_by=session.identity.id)


@router.get("/machine-transactions", response_model=List[MachineTransactionResponse])
async def list_machine_transactions(
    machine_id: Optional[str] = None,
    session: SessionContext = Depends(require_permission("machine_transactions.view")),
    service: MachineTransactionService = Depends(get_machine_transaction_service)
):
    """List machine events, optionally for one machine"""
    return service.list_machine_transactions(machine_id=machine_id)


@router.post("/machine-transactions", response_model=MachineTransactionResponse, status_code=201)
async def create_machine_transaction(
    transaction_data: MachineTransactionCreate,
    session: SessionContext = Depends(require_permission("machine_transactions.create")),
    service: MachineTransactionService = Depends(get_machine_transaction_service)
):
    """Record a machine borrow, service or damage event"""
    return service.create_machine_transaction(transaction_data, created_by=session.identity.id)
