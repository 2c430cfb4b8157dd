# Routes package init
"""
RecipeBox Backend: API Routes Package
=======================================

Route Inventory:
    - auth.py:     POST /signup, POST /login
    - recipes.py:  GET /recipes, GET /recipes/{id},
                   POST /recipes, PUT /recipes/{id}       (bearer token required)
    - upload.py:   POST /upload, GET /uploads/{filename}

Routes are thin: extract input, call a service, pick the status code.
Errors propagate as RecipeBoxError subclasses to the global handlers.
"""
