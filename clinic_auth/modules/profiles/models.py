# Supabase tables: profiles, professional_profiles
# This file documents the expected database schema
# Actual reads/writes are handled via the Supabase SDK in service.py
# Rows are created by the backend at registration; this package never inserts them

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key, references auth.users.id)
- full_name: text (not null)
- email: text (not null)
- role: text (patient | professional | admin)
- avatar_url: text (nullable)
- created_at: timestamptz (default: now())
- updated_at: timestamptz

professional_profiles:
- id: uuid (primary key)
- profile_id: uuid (unique, references profiles.id)
- display_name, registration_type, registration_number, registration_state,
  specialty, bio, phone: text
- consultation_price_cents, consultation_duration_minutes: integer (nullable)
- accepts_insurance, offers_telemedicine, verified: boolean
- rating_average: numeric, rating_count: integer
- created_at, updated_at: timestamptz

The unique constraint on profile_id guarantees at most one professional
profile per profile, which is why reads use maybe_single().
"""
