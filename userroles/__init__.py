"""User/role directory service: users, roles and their many-to-many assignments over HTTP."""

__version__ = "0.1.0"
