"""HTTP interface layer (routers, dependencies, error handlers)."""
