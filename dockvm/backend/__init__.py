"""
Backends for dockvm: host command execution, the guest VM and the container
runtimes that run inside it.
"""
