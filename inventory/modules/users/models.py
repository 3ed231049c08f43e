# Supabase tables: profiles, user_roles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key, references auth.users.id)
- email: text (nullable)
- full_name: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

user_roles:
- id: uuid (primary key)
- user_id: uuid (references auth.users.id, not null)
- role: app_role enum ('admin' | 'user')
- assigned_by: uuid (nullable) - identity that made the assignment
- assigned_at: timestamp (default: now())

A profile row is created by a trigger on auth.users insert.
"""
