"""Service configuration, built once at startup from the environment."""
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, DirectoryPath, Field, IPvAnyAddress, field_validator

from calculator_history.common.logger import logger

DEFAULT_STATIC_DIR: Path = Path(__file__).resolve().parent.parent / "web"

# Environment variable -> FirebaseCredentials field
FIREBASE_ENV: Dict[str, str] = {
    "FIREBASE_TYPE": "type",
    "FIREBASE_PROJECT_ID": "project_id",
    "FIREBASE_PRIVATE_KEY_ID": "private_key_id",
    "FIREBASE_PRIVATE_KEY": "private_key",
    "FIREBASE_CLIENT_EMAIL": "client_email",
    "FIREBASE_CLIENT_ID": "client_id",
}


class FirebaseCredentials(BaseModel):
    """Service account of the push notification gateway."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(default="service_account", description="Credential type")
    project_id: str = Field(..., min_length=1, description="Firebase project id")
    private_key_id: Optional[str] = Field(default=None, description="Id of the private key")
    private_key: str = Field(..., min_length=1, description="PEM encoded private key")
    client_email: str = Field(..., min_length=1, description="Service account e-mail")
    client_id: Optional[str] = Field(default=None, description="Service account client id")
    token_uri: str = Field(default="https://oauth2.googleapis.com/token", description="OAuth token endpoint")

    @field_validator("private_key")
    def unescape_newlines(cls, v: str) -> str:
        """Turn escaped ``\\n`` sequences (as found in env files) into real newlines."""
        return v.replace("\\n", "\n")

    def as_certificate(self) -> Dict[str, Any]:
        """
        Return the service account as the dict expected by ``firebase_admin.credentials.Certificate``.

        :return: Service account info
        :rtype: Dict[str, Any]
        """
        return self.model_dump(exclude_none=True)


class AppConfig(BaseModel):
    """
    Process-wide configuration of the service.

    Constructed once by the entrypoint and passed explicitly to the application factory.
    """

    # Configuration must not change while the service is running
    model_config = ConfigDict(frozen=True)

    database_url: str = Field(default="sqlite:///calculator_history.db", description="SQLAlchemy database URL")
    proceed_success: bool = Field(default=False, description="Value reported by /checkProceed")
    host: IPvAnyAddress = Field(default="127.0.0.1", description="Listening address")
    port: int = Field(default=3000, ge=1, le=65535, description="Listening TCP port")
    notification_workers: int = Field(default=4, ge=1, description="Threads used to send push notifications")
    firebase: Optional[FirebaseCredentials] = Field(default=None, description="Push gateway credentials")
    static_dir: DirectoryPath = Field(default=DEFAULT_STATIC_DIR, description="Directory of the landing page")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """
        Build the configuration from environment variables.

        Firebase credentials are only configured when at least one ``FIREBASE_*`` variable is set.

        :param Mapping environ: Environment to read, defaults to ``os.environ``

        :return: Validated configuration
        :rtype: AppConfig
        :raises pydantic.ValidationError: If a value is invalid or the Firebase credentials are incomplete
        """
        env: Mapping[str, str] = os.environ if environ is None else environ
        values: Dict[str, Any] = {"proceed_success": env.get("PROCEED_SUCCESS") == "1"}

        for var, field in (
            ("DATABASE_URL", "database_url"),
            ("HOST", "host"),
            ("PORT", "port"),
            ("NOTIFICATION_WORKERS", "notification_workers"),
            ("STATIC_DIR", "static_dir"),
        ):
            if env.get(var):
                values[field] = env[var]

        firebase: Dict[str, str] = {
            field: env[var] for var, field in FIREBASE_ENV.items() if env.get(var)
        }
        if firebase:
            values["firebase"] = firebase

        return cls(**values)


def load_env_file(env_file: Optional[Path] = None) -> bool:
    """
    Load variables from a ``.env`` file into the process environment.

    Existing environment variables take precedence over the file.

    :param Path env_file: File to load, defaults to ``.env`` in the working directory

    :return: True if a file was loaded
    :rtype: bool
    """
    path = env_file if env_file is not None else Path.cwd() / ".env"
    if not path.is_file():
        logger.debug(f"No env file found at {path}")
        return False
    load_dotenv(path)
    logger.info(f"⚙️ Loaded environment from {path}")
    return True
