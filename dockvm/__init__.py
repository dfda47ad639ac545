"""dockvm: container runtimes inside a single local virtual machine."""

__version__ = "0.1.0"
