# Supabase tables: material_transactions, machine_transactions
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

material_transactions:
- id: uuid (primary key)
- transaction_number: text (not null)
- material_id: uuid (foreign key to materials.id, not null)
- transaction_type: text (not null) - "receipt" and "issue" drive stock reports
- movement_type: text (not null) - e.g., "101" GR for purchase order, "261" GI for production
- quantity: numeric (not null) - issues may be stored signed; reports use the absolute value
- unit: text (not null)
- reference_document: text (nullable)
- notes: text (nullable)
- status: text (nullable) - e.g., "completed"
- transaction_date: timestamp (default: now())
- created_by: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

machine_transactions:
- id: uuid (primary key)
- transaction_number: text (not null)
- machine_id: uuid (foreign key to machines.id, not null)
- transaction_type: text (not null) - "local_borrow", "site_borrow", "service", "damage_report"
- start_date: timestamp (not null)
- end_date: timestamp (nullable)
- borrower, borrower_department, site_location: text (nullable) - borrow events
- service_type, service_provider: text (nullable) - service events
- damage_description, damage_level: text (nullable) - damage reports
- repair_cost: numeric (nullable)
- notes: text (nullable)
- status: text (nullable) - "active" while the machine is out
- created_by: text (not null)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())
"""
