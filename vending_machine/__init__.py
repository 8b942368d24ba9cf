"""
Coin-operated vending machine service.

Layers:
- core: exceptions, interfaces, value objects
- domain: coin pools, change strategy, cash register, inventory, purchases
- application: async service and command routing
- infrastructure: settings
"""

__version__ = "1.0.0"
