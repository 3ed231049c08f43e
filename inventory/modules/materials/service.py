from datetime import datetime, timezone
from supabase import Client
from inventory.modules.materials.schemas import MaterialCreate, MaterialUpdate, MaterialResponse
from typing import List
from fastapi import HTTPException


class MaterialService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_materials(self) -> List[MaterialResponse]:
        """Full materials collection, newest first"""
        try:
            result = self.supabase.table("materials")\
                .select("*")\
                .order("created_at", desc=True)\
                .execute()
            return [MaterialResponse(**material) for material in result.data or []]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_material_by_id(self, material_id: str) -> MaterialResponse:
        """Get material by ID"""
        try:
            result = self.supabase.table("materials")\
                .select("*")\
                .eq("id", material_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Material not found")

            return MaterialResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def create_material(self, material_data: MaterialCreate) -> MaterialResponse:
        """Create a new material"""
        try:
            existing = self.supabase.table("materials")\
                .select("id")\
                .eq("material_number", material_data.material_number)\
                .execute()

            if existing.data:
                raise HTTPException(status_code=400, detail="Material number already exists")

            result = self.supabase.table("materials").insert(material_data.model_dump(mode="json")).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create material")

            return MaterialResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_material(self, material_id: str, material_data: MaterialUpdate) -> MaterialResponse:
        """Update material; only fields present in the request are written"""
        try:
            update_data = material_data.model_dump(mode="json", exclude_unset=True)
            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()

            result = self.supabase.table("materials")\
                .update(update_data)\
                .eq("id", material_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Material not found")

            return MaterialResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def delete_material(self, material_id: str) -> bool:
        """Delete material"""
        try:
            result = self.supabase.table("materials")\
                .delete()\
                .eq("id", material_id)\
                .execute()

            return len(result.data or []) > 0
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
