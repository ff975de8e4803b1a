"""
Shared, cross-cutting code for the gateway.

`core/` holds the building blocks every feature uses (config, DB pool,
cache and search clients, the error taxonomy). Feature-specific SQL and
request handling live in the feature packages (`auth/`, `leases/`).
"""
