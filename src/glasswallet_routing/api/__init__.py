"""HTTP API for lead routing and agent administration."""
