"""
Initia2Aptos bridge: an Aptos-compatible REST API served from an Initia chain.

Queries the Initia REST API (blocks, transactions, Move modules and
resources) and re-renders the results in the Aptos REST format. Modular
layout: translation (pure mapping), initia_client (upstream access),
api_server (HTTP surface), config and bridge_logging.
"""

__version__ = "0.1.0"
