"""
cf-ddns - A dynamic DNS updater for Cloudflare.

This package discovers the public IPv4 and IPv6 addresses of the host
and pushes them to existing A and AAAA records through the Cloudflare API.
"""

__version__ = "0.1.0"
__author__ = "cf-ddns Contributors"
