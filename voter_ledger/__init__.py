"""
Voter Registration Ledger

Permissioned record store keyed by (user_id, jurisdiction_id).
Identity, jurisdictions, scoring, fees and the admin set are
external collaborators reached through narrow interfaces.
"""

__version__ = "0.1.0"
