from ghost_engine.ordering.siblings import anchored_slot, group_linked, order_siblings, position_of

__all__ = ["anchored_slot", "group_linked", "order_siblings", "position_of"]
