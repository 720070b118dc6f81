"""Remote data access: one fetcher method per aggregate query."""
