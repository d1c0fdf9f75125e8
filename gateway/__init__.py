"""Multi-tenant WhatsApp messaging gateway for barbershop notifications."""
