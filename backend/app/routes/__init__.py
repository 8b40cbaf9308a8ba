# Routes package init
"""
Ledgerline Backend — API Routes Package
=========================================

Route Inventory:
    - health.py:        GET    /health
    - users.py:         GET    /users                    POST /users
                        PATCH  /users/{id}               DELETE /users/{id}
                        GET    /users/{id}/accounts
    - accounts.py:      GET    /accounts                 POST /accounts
                        PATCH  /accounts/{id}            DELETE /accounts/{id}
                        GET    /accounts/{id}/details
                        GET    /accounts/{id}/cashflow
                        GET    /accounts/{id}/transactions
    - transactions.py:  POST   /transactions
                        PATCH  /transactions/{id}        DELETE /transactions/{id}

Design Principle:
    Routes are THIN: parse the body, run the validator, call the service,
    return the response model. Errors propagate to the handlers in main.py.
"""
