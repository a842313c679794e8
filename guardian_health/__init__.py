"""
Guardian Prover Health Check service.

Accepts signed heartbeats from guardian provers, recovers the signer and
records a health check for every known guardian that checks in.
"""
__version__ = "1.0.0"
