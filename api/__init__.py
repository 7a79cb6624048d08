"""
HTTP layer of the Prompt Collection API.
"""
