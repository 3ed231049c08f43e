import logging
from supabase import Client
from inventory.modules.transactions.schemas import (
    MaterialTransactionCreate, MaterialTransactionResponse,
    MachineTransactionCreate, MachineTransactionResponse
)
from inventory.modules.materials.service import MaterialService
from inventory.modules.machines.service import MachineService
from typing import List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class MaterialTransactionService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_material_transactions(self, material_id: Optional[str] = None) -> List[MaterialTransactionResponse]:
        """Material movements with the material's number, name and unit embedded, newest first"""
        try:
            query = self.supabase.table("material_transactions")\
                .select("*, materials(material_number, name, unit)")
            if material_id:
                query = query.eq("material_id", material_id)
            result = query.order("created_at", desc=True).execute()
            return [MaterialTransactionResponse(**transaction) for transaction in result.data or []]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def create_material_transaction(
        self,
        transaction_data: MaterialTransactionCreate,
        created_by: Optional[str]
    ) -> MaterialTransactionResponse:
        """Record a material movement; unit defaults to the material's unit"""
        try:
            material = MaterialService(self.supabase).get_material_by_id(transaction_data.material_id)

            payload = transaction_data.model_dump(mode="json", exclude_none=True)
            payload["unit"] = transaction_data.unit or material.unit or "Piece"
            payload["status"] = "completed"
            payload["created_by"] = created_by

            result = self.supabase.table("material_transactions").insert(payload).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create material transaction")

            logger.info(
                f"Material transaction {transaction_data.transaction_number} recorded for "
                f"material {material.material_number}"
            )
            return MaterialTransactionResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))


class MachineTransactionService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_machine_transactions(self, machine_id: Optional[str] = None) -> List[MachineTransactionResponse]:
        """Machine borrow/service/damage events with asset number and name embedded, newest first"""
        try:
            query = self.supabase.table("machine_transactions")\
                .select("*, machines(asset_number, name)")
            if machine_id:
                query = query.eq("machine_id", machine_id)
            result = query.order("created_at", desc=True).execute()
            return [MachineTransactionResponse(**transaction) for transaction in result.data or []]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def create_machine_transaction(
        self,
        transaction_data: MachineTransactionCreate,
        created_by: str
    ) -> MachineTransactionResponse:
        """Record a machine event; new events start as active"""
        try:
            MachineService(self.supabase).get_machine_by_id(transaction_data.machine_id)

            payload = transaction_data.model_dump(mode="json", exclude_none=True)
            payload["status"] = "active"
            payload["created_by"] = created_by

            result = self.supabase.table("machine_transactions").insert(payload).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create machine transaction")

            return MachineTransactionResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
