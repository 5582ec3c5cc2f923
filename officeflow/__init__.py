"""
OfficeFlow attendance client.

Headless client for the face/location/WiFi verified attendance service:
API client, error mapping, secure session storage, the attendance capture
orchestrator and the screen controllers that sequence the user flow.
"""

__version__ = "2.4.1"
