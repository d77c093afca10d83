"""JWT Keychain - password and JWT authentication service.

Registers users with Argon2-hashed passwords, logs them in with signed
JWT access tokens and authenticates requests carrying those tokens.
"""

__version__ = "0.1.0"

from keychain.infrastructure.api.app import app

__all__ = ["app", "__version__"]
