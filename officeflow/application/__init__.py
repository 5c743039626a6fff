"""Application layer: DTOs, ports, services, and use cases.

Depends only on domain and protocol definitions. Infrastructure implements
the interfaces (repositories, notification delivery).
"""
