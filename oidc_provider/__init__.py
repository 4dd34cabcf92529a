"""OpenID Connect identity token provider for CI workloads"""

__version__ = "0.1.0"
