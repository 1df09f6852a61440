"""
Infrastructure layer: Redis metadata store and signed URL issuers.
"""
