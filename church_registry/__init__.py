"""Church registry: members, category counts and the finance ledger behind the dashboard."""
