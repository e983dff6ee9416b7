"""
services/ - Business Layer
==========================
Validates caller input and coordinates the repositories.
"""
