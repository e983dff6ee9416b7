"""
repositories/ - Data Access Layer
==================================
Each repository encapsulates all SQL queries for a specific domain entity.
Repositories run fixed statements through the DatabaseHandler and return
domain model objects built by the row mappers.
"""
