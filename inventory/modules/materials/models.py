# Supabase table: materials
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

materials:
- id: uuid (primary key)
- material_number: text (not null, unique)
- name: text (not null)
- description: text (nullable)
- category: text (nullable) - reports group NULL/empty under "Uncategorized"
- type: text (nullable)
- unit: text (not null) - e.g., "Piece", "Kg"
- stock: numeric (nullable)
- minimum_stock: numeric (nullable)
- price: numeric (nullable) - unit price
- supplier: text (nullable)
- status: text (nullable) - e.g., "active", "inactive", "discontinued"
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())
"""
