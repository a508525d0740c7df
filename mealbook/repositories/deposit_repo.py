from mealbook.models.ledger import DepositInDB
from mealbook.repositories.base import LedgerRepository


class DepositRepository(LedgerRepository[DepositInDB]):
    collection_name = "deposits"
    label = "Deposit"
    model = DepositInDB
