# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Command-line flags override the environment.

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "NELPROXY_APP_NAME": "App display name (default: nelproxy).",
    "NELPROXY_LOG_LEVEL": "Console logging level (default: INFO).",
    "NELPROXY_LOG_FILE": "Log file; receives everything incl. the HTTP access log (--logs).",
    # Endpoint
    "NELPROXY_SERVER": "Server address; bind address for 'serve' (--server). Required.",
    "NELPROXY_PORT": "Server port (default: 8080, --port).",
    "NELPROXY_SSL": "Use TLS (true/false, --ssl/--no-ssl).",
    "NELPROXY_SSL_CERT": "Server certificate file (--ssl-cert).",
    "NELPROXY_SSL_KEY": "Server private key file (--ssl-key).",
    "NELPROXY_CA_BUNDLE": "CA bundle the worker uses to verify the server (--ca-bundle).",
    "NELPROXY_REQUEST_TIMEOUT": "HTTP timeout in seconds for worker/submit (default: 10).",
    # Worker
    "NELPROXY_INVENTORY": "Inventory this worker serves (--inventory). Required for 'worker'.",
    "NELPROXY_JSON_OUTPUT": "Emit JSON documents instead of command lines (--jformat).",
    "NELPROXY_STOP_ON_ACK_FAILURE": "Abort the pass at the first failed acknowledge.",
    "NELPROXY_PLAYBOOK_BIN": "Executable name in built commands (default: ansible-playbook).",
    "NELPROXY_INVENTORY_ROOT": "Directory holding <inventory>/hosts (default: inventories).",
}
