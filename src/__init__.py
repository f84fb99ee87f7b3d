"""
Backend-for-frontend service for the AIBTC DAO governance dashboard.

Serves DAO, proposal, vote, holder, wallet and agent data read from
Supabase and the Stacks/Hiro APIs, plus the block-time and votes proxy
routes the dashboard calls directly.
"""

__all__ = [
]
