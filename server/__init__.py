"""HTTP server hosting the WhatsApp gateway routes."""
