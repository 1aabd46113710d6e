"""nelproxy: hand deployment jobs from CI to an Ansible worker through a shared queue."""

__version__ = "0.1.0"
