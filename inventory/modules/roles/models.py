# Supabase tables: permissions, role_permissions
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

permissions:
- id: uuid (primary key)
- name: text (not null, unique) - e.g., "materials.view", "users.manage_roles"
- module: text (not null) - e.g., "materials", "machines", "reports"
- action: text (not null) - e.g., "view", "create", "manage_roles"
- description: text (nullable)
- created_at: timestamp (default: now())

role_permissions:
- id: uuid (primary key)
- role: app_role enum ('admin' | 'user') (not null)
- permission_id: uuid (foreign key to permissions.id, not null)
- created_at: timestamp (default: now())
- unique constraint on (role, permission_id)

Roles are a closed enum, so there is no roles table.
"""
