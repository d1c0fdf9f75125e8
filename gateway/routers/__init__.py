"""HTTP routers exposing the gateway to internal callers and operators."""
