from mealbook.models.ledger import GroceryInDB
from mealbook.repositories.base import LedgerRepository


class GroceryRepository(LedgerRepository[GroceryInDB]):
    collection_name = "groceries"
    label = "Grocery"
    model = GroceryInDB
