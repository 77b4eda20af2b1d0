from .supabase_client import SupabaseClientManager, supabase_manager
