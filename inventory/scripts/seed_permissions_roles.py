"""
Seed Permissions and Role Grants Script
This script populates the permissions and role_permissions tables using the config.
Run with: python -m inventory.scripts.seed_permissions_roles
"""

import sys
import logging

from inventory.config.permissions_config import PERMISSION_MATRIX
from inventory.database.supabase_client import SupabaseClient
from supabase import Client

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def seed_permissions(supabase: Client, permissions: list) -> int:
    """Upsert permissions from config by name"""
    logger.info("Seeding permissions...")

    created_count = 0
    updated_count = 0

    for perm in permissions:
        try:
            existing = supabase.table("permissions")\
                .select("id")\
                .eq("name", perm["name"])\
                .execute()

            if existing.data:
                supabase.table("permissions")\
                    .update({
                        "module": perm["module"],
                        "action": perm["action"],
                        "description": perm["description"]
                    })\
                    .eq("name", perm["name"])\
                    .execute()
                updated_count += 1
                logger.debug(f"Updated permission: {perm['name']}")
            else:
                supabase.table("permissions").insert({
                    "name": perm["name"],
                    "module": perm["module"],
                    "action": perm["action"],
                    "description": perm["description"]
                }).execute()
                created_count += 1
                logger.debug(f"Created permission: {perm['name']}")
        except Exception as e:
            logger.error(f"Error processing permission {perm['name']}: {e}")

    logger.info(f"Permissions seeded: {created_count} created, {updated_count} updated")
    return created_count + updated_count


def seed_role_grants(supabase: Client, roles: list) -> int:
    """Reconcile role_permissions for every role in the config"""
    logger.info("Seeding role grants...")
    processed = 0
    for role in roles:
        try:
            assign_permissions_to_role(supabase, role["name"], role["permissions"])
            processed += 1
        except Exception as e:
            logger.error(f"Error processing role {role['name']}: {e}")
    return processed


def assign_permissions_to_role(supabase: Client, role: str, permission_names: list):
    """Grant the configured permissions to a role and revoke grants no longer configured"""
    if permission_names:
        permission_result = supabase.table("permissions")\
            .select("id")\
            .in_("name", permission_names)\
            .execute()
        permission_ids = [p["id"] for p in permission_result.data or []]
    else:
        permission_ids = []

    if not permission_ids and permission_names:
        logger.warning(f"No permissions found for role {role}")
        return

    existing_result = supabase.table("role_permissions")\
        .select("permission_id")\
        .eq("role", role)\
        .execute()

    existing_permission_ids = {p["permission_id"] for p in existing_result.data} if existing_result.data else set()

    new_assignments = [
        {"role": role, "permission_id": pid}
        for pid in permission_ids
        if pid not in existing_permission_ids
    ]

    if new_assignments:
        supabase.table("role_permissions").insert(new_assignments).execute()
        logger.debug(f"Assigned {len(new_assignments)} permissions to role {role}")

    permissions_to_remove = existing_permission_ids - set(permission_ids)
    if permissions_to_remove:
        supabase.table("role_permissions")\
            .delete()\
            .eq("role", role)\
            .in_("permission_id", list(permissions_to_remove))\
            .execute()
        logger.debug(f"Removed {len(permissions_to_remove)} permissions from role {role}")


def main():
    """Main function to seed permissions and role grants"""
    try:
        supabase = SupabaseClient.get_service_client()

        logger.info("Starting permissions and roles seeding...")

        # Seed permissions first
        perm_count = seed_permissions(supabase, PERMISSION_MATRIX["permissions"])

        # Then role grants (which depend on permissions)
        role_count = seed_role_grants(supabase, PERMISSION_MATRIX["roles"])

        logger.info("Seeding completed successfully!")
        logger.info(f"Total: {perm_count} permissions, {role_count} roles processed")

    except Exception as e:
        logger.error(f"Error during seeding: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
