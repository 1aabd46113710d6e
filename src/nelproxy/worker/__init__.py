"""
Worker side.

Components:
- client.py: httpx client for the dispatch API (fetch, acknowledge, submit)
- agent.py: single-pass worker that emits ansible-playbook commands
"""
