from datetime import datetime, timezone
from supabase import Client
from inventory.modules.machines.schemas import MachineCreate, MachineUpdate, MachineResponse
from typing import List, Optional
from fastapi import HTTPException


class MachineService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_machines(self, status: Optional[str] = None) -> List[MachineResponse]:
        """Full machines collection, newest first, optionally narrowed to one status"""
        try:
            query = self.supabase.table("machines").select("*")
            if status:
                query = query.eq("status", status)
            result = query.order("created_at", desc=True).execute()
            return [MachineResponse(**machine) for machine in result.data or []]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_machine_by_id(self, machine_id: str) -> MachineResponse:
        """Get machine by ID"""
        try:
            result = self.supabase.table("machines")\
                .select("*")\
                .eq("id", machine_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Machine not found")

            return MachineResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def create_machine(self, machine_data: MachineCreate) -> MachineResponse:
        """Create a new machine"""
        try:
            existing = self.supabase.table("machines")\
                .select("id")\
                .eq("asset_number", machine_data.asset_number)\
                .execute()

            if existing.data:
                raise HTTPException(status_code=400, detail="Asset number already exists")

            result = self.supabase.table("machines").insert(machine_data.model_dump(mode="json")).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create machine")

            return MachineResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_machine(self, machine_id: str, machine_data: MachineUpdate) -> MachineResponse:
        """Update machine; only fields present in the request are written"""
        try:
            update_data = machine_data.model_dump(mode="json", exclude_unset=True)
            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()

            result = self.supabase.table("machines")\
                .update(update_data)\
                .eq("id", machine_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Machine not found")

            return MachineResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_machine(self, machine_id: str) -> bool:
        """Delete machine"""
        try:
            result = self.supabase.table("machines")\
                .delete()\
                .eq("id", machine_id)\
                .execute()

            return len(result.data or []) > 0
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
