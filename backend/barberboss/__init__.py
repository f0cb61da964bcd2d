"""BarberBoss - barbershop management backend (report export)."""

__version__ = "1.0.0"
