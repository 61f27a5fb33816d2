"""
workbench_api.clients

Outbound HTTP clients used by services that call this API.
"""

# Package marker.
