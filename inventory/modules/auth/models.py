# Supabase Auth
# This module uses Supabase's built-in authentication system.
# Only role assignments live in application tables.

"""
Supabase Auth provides:
- auth.sign_up() - Register new users
- auth.sign_in_with_password() - Authenticate users
- auth.get_user() - Get current user from JWT token
- auth.sign_out() - Logout users

Expected Supabase objects used alongside auth.users:

user_roles:
- id: uuid (primary key)
- user_id: uuid (references auth.users.id, not null)
- role: app_role enum ('admin' | 'user')
- assigned_by: uuid (nullable)
- assigned_at: timestamp (default: now())

RPC get_user_permissions(_user_id uuid) -> setof (permission_name text, module text, action text)
  Union of permissions granted to every role the user holds.
"""
