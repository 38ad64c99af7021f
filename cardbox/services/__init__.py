"""Services for CardBox application."""

from cardbox.services.item_store import ItemStore, get_item_store

__all__ = ["ItemStore", "get_item_store"]
