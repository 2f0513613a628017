from typing import Final

DEFAULT_UNIT: Final[str] = "units"
STORAGE_KEY: Final[str] = "kitchenCostingData"
CURRENCY_SYMBOL: Final[str] = "R"
EMPTY_LEDGER_MESSAGE: Final[str] = "No items added yet. Start costing!"
VALIDATION_MESSAGE: Final[str] = "Please enter a valid Name, Cost, and Quantity."
