"""
API server package — Aptos-compatible HTTP/REST interface.

Translates Aptos v1 requests into Initia REST calls and renders the results
in Aptos format. Delegates to initia_client for data and to translation for
the mapping.
"""
