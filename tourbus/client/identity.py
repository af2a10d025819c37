import uuid_utils

from tourbus.client.selection_cache import SelectionCache


IDENTITY_KEY = 'tourbus_user_id'


def get_or_create_identity(cache: SelectionCache) -> str:
    """Random per-device reservation identity; unrelated to any login"""
    user_id = cache.get(IDENTITY_KEY)
    if not user_id:
        user_id = str(uuid_utils.uuid7())
        cache.set(IDENTITY_KEY, user_id)
    return user_id
