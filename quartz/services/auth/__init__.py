"""Supabase sign-in callback and request identity helpers."""
