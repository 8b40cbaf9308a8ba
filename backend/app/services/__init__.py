# Services package init
"""
Ledgerline Backend — Services Package
=======================================

What:  One stateless service per resource, holding the SQL for each operation.
How:   Every method takes the gateway explicitly and issues one statement
       (account details issues two sequential reads).

Service Inventory:
    - base.py:                CrudService (shared UPDATE / DELETE / error mapping)
    - user_service.py:        users
    - account_service.py:     accounts, cashflow, account details
    - transaction_service.py: transactions
"""
