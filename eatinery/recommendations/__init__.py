"""
Calorie-budget restaurant filtering.

Responsibilities:
- Validate filter criteria (calorie limit, cuisine, HPB Healthy Choice).
- Select matching restaurants from the store.
- Attach each restaurant's menu items within the calorie limit, dropping
  restaurants with none.
"""
