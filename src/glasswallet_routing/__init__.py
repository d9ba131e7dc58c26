"""GlassWallet lead routing engine."""

__version__ = "1.0.0"
