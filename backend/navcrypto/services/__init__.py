"""Business logic over the Supabase tables.

Each module takes the service client as its first argument and returns plain
row dicts; route handlers turn them into response models.
"""
