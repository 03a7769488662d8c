# Routes package init
"""
RecipeShare Backend - API Routes Package
=========================================

Route Inventory:
    - recipes.py:  POST /add-recipe, GET /get-recipes,
                   POST /delete-recipe, PUT /update-recipe
    - assets.py:   GET  /assets/images/{path}   (stored images)
    - health.py:   GET  /health

Routes stay thin: extract request data, call a service, return its model.
"""
