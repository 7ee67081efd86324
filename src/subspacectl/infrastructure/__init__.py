"""Infrastructure layer — registry files, filesystem, templates, installer.

This layer depends on stdlib and third-party libs (json5, ruamel.yaml, Jinja2).
The service layer bridges between domain models and infrastructure.
"""
