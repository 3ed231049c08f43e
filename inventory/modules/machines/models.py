# Supabase table: machines
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

machines:
- id: uuid (primary key)
- asset_number: text (not null, unique)
- name: text (not null)
- description: text (nullable)
- manufacturer: text (nullable)
- model: text (nullable)
- serial_number: text (nullable)
- location: text (nullable)
- purchase_date: date (nullable)
- purchase_price: numeric (nullable)
- status: text (nullable) - free-form; known values "operational", "maintenance", "broken", "retired"
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())
"""
