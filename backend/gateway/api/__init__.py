"""HTTP routers for the gateway API."""
