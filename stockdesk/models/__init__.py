from stockdesk.models.category import Category
from stockdesk.models.stock_card import StockCard
from stockdesk.models.inventory_item import InventoryItem

__all__ = ['Category', 'StockCard', 'InventoryItem']
