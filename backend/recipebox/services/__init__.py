# Services package init
"""
RecipeBox Backend: Services Layer
===================================

What:  Business logic between routes (HTTP) and the database (persistence).
How:   Services are plain classes built once per application by create_app()
       from Settings and stored on app.state; routes receive them through
       FastAPI dependencies (see recipebox.dependencies).

Service Inventory:
    - TokenService:  issues and verifies one-hour bearer tokens (PyJWT)
    - UserService:   signup and login over the credential store (bcrypt)
    - RecipeService: owner-scoped list/get/create/update of recipes
    - FileService:   stores uploaded images and resolves them for serving
"""
