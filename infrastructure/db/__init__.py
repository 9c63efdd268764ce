"""
Supabase adapters for the application ports.

    client = create_client(settings.supabase_url, settings.supabase_key)
    repo = SupabaseWorkoutRepository(client, rpc_name=settings.workout_reconciliation_rpc)
"""

from infrastructure.db.workout_repository import SupabaseWorkoutRepository

__all__ = ["SupabaseWorkoutRepository"]
