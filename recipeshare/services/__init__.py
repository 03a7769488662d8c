# Services package init
"""
RecipeShare Backend - Services Layer
=====================================

What:  Business logic between routes (HTTP) and the database / filesystem.

Service Inventory:
    - validation:      Field and file-type rules for create/edit/delete
    - FileService:     Uploaded image storage and removal
    - RecipeStore:     Row access for the recipes table
    - RecipeService:   Orchestrates validate → file → row for each operation
"""
