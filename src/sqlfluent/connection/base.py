"""Base connector class with shared server profile and authentication logic."""

import os
from pathlib import Path
from typing import Optional, Any, Dict
from pydantic import SecretStr
import keyring
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.backends import default_backend

from sqlfluent.config import load_server

# Profile keys consumed by sqlfluent itself, never forwarded to the driver
_LOCAL_KEYS = frozenset({
    "password_env",
    "use_keyring",
    "keyring_service",
    "keyring_username",
    "private_key_passphrase_env",
})


class BaseConnector:
    """Base class for connectors with TOML server profile support and authentication handling"""

    def __init__(self, server: str, **kwargs: Any) -> None:
        """Initialize the connector with a server profile and optional parameter overrides"""
        self.password: Optional[SecretStr] = None
        self.private_key: Optional[Any] = None

        self._cfg: Dict[str, Any] = load_server(server)
        self._cfg.update(kwargs)
        self._server = server
        self._process_auth()

    @property
    def server(self) -> str:
        """Name of the server profile this connector was built from"""
        return self._server

    def _process_auth(self) -> None:
        """Resolve keypair or password credentials from the profile"""
        auth = self._cfg.get("authenticator", "").upper()

        if auth == "SNOWFLAKE_JWT":
            self._process_keypair_auth()
        else:
            self.password = self._get_password()

    def _get_password(self) -> Optional[SecretStr]:
        """Look up the password inline, then in the environment, then in the keyring"""
        if "password" in self._cfg:
            return SecretStr(str(self._cfg.pop("password")))

        password_env_var = self._cfg.get("password_env")
        if password_env_var:
            env_pass = os.environ.get(password_env_var)
            if env_pass:
                return SecretStr(env_pass)

        if self._cfg.get("use_keyring", False):
            keyring_service = self._cfg.get("keyring_service", f"sqlfluent.{self._server}")
            keyring_username = self._cfg.get("keyring_username", self._cfg.get("user"))
            if not keyring_username:
                raise ValueError(
                    "Keyring usage requires 'user' in server profile or 'keyring_username' override."
                )
            keyring_pass = keyring.get_password(keyring_service, keyring_username)
            if keyring_pass:
                return SecretStr(keyring_pass)

        return None

    def _process_keypair_auth(self) -> None:
        """Load and deserialize the private key with optional passphrase"""
        key_path, passphrase = self._get_key_details()

        try:
            with open(key_path, "rb") as key_file:
                p_key_bytes = key_file.read()

            self.private_key = serialization.load_pem_private_key(
                p_key_bytes,
                password=passphrase.get_secret_value().encode() if passphrase else None,
                backend=default_backend()
            )
        except Exception as e:
            raise IOError(f"Failed to read or decrypt private key from {key_path}: {e}") from e

    def _get_key_details(self) -> tuple[Path, Optional[SecretStr]]:
        """Validate the key path and fetch its passphrase from the environment"""
        private_key_file = self._cfg.get("private_key_file")
        if not private_key_file:
            raise ValueError(
                "Keypair authentication requires 'private_key_file' in server profile"
            )

        key_path = Path(private_key_file).expanduser()

        if not key_path.is_absolute():
            raise ValueError(
                f"Private key path must be absolute or use ~ for home directory. Got: {private_key_file}"
            )

        if not key_path.exists():
            raise FileNotFoundError(f"Private key file not found: {key_path}")

        passphrase: Optional[SecretStr] = None
        passphrase_env_var = self._cfg.get("private_key_passphrase_env")
        if passphrase_env_var:
            env_pass = os.environ.get(passphrase_env_var)
            if env_pass:
                passphrase = SecretStr(env_pass)

        return key_path, passphrase

    def connect_params(self) -> Dict[str, Any]:
        """Driver keyword arguments with secrets revealed and local keys removed"""
        params = {k: v for k, v in self._cfg.items() if k not in _LOCAL_KEYS}
        params.pop("private_key_file", None)
        if self.private_key is not None:
            params["private_key"] = self.private_key
        elif self.password is not None:
            params["password"] = self.password.get_secret_value()
        return params
