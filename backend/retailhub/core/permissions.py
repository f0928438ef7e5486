"""
Role policy for the staff API.

Roles are stored on the user row and checked on every request; the client
never decides what it may see.
"""
SUPER_ADMIN = "super_admin"
STORE_MANAGER = "store_manager"
SOCIAL_COMMERCE_MANAGER = "social_commerce_manager"

ROLES = (SUPER_ADMIN, STORE_MANAGER, SOCIAL_COMMERCE_MANAGER)

# Catalogue administration: categories, fields, products, batches, stores
CATALOG_ADMINS = (SUPER_ADMIN,)
# Receiving batches, moving and selling stock
STOCK_HANDLERS = (SUPER_ADMIN, STORE_MANAGER)


def user_has_role(user, *roles: str) -> bool:
    return bool(user and user.is_active and user.role in roles)


def user_can_handle_store(user, store_id: int) -> bool:
    """Store managers bound to one outlet may only move stock in or out of it."""
    if user.role == SUPER_ADMIN:
        return True
    if user.role == STORE_MANAGER:
        return user.store_id is None or user.store_id == store_id
    return False
