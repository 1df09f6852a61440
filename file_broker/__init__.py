"""
File Broker

Issues signed upload/download URLs for object storage and tracks the
lifecycle of each file record.
"""

__version__ = "1.0.0"
