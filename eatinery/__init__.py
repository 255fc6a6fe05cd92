"""
Eatinery restaurant-discovery API.

Responsibilities:
- Serve restaurants, menus and walking directions over REST.
- Filter restaurants by calorie budget, cuisine and HPB Healthy Choice status.
- Estimate walking distance, time and calories burned.
"""
