"""
models/ - Domain Layer
======================
Plain dataclasses for stocks, watchlists and their memberships, together
with the create inputs and partial-update intents the repositories accept.
"""
