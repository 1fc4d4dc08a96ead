"""
Application Configuration
Add constants, secrets, env variables here
"""

from functools import lru_cache
import os
import json
from pathlib import Path
from pydantic import computed_field, PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from dotenv import load_dotenv

# Load .env file into os.environ so os.getenv() works correctly
# This must happen before Settings class is instantiated
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


def get_secret(secret_name: str, region_name: str) -> dict:
    """
    Retrieve secrets from AWS Secrets Manager

    Args:
        secret_name: Name of the secret in Secrets Manager
        region_name: AWS region where secret is stored

    Returns:
        dict: Parsed secret value

    Raises:
        ClientError: If secret cannot be retrieved
    """
    session = boto3.session.Session()
    client = session.client(
        service_name='secretsmanager',
        region_name=region_name
    )
    try:
        get_secret_value_response = client.get_secret_value(
            SecretId=secret_name
        )
    except ClientError:
        raise
    secret = get_secret_value_response['SecretString']
    return json.loads(
        secret.replace('\n', '')
    )


class Settings(BaseSettings):
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Directory layout below <projectDir>
    POLISHED_BAM_SUBDIR: str = os.getenv("POLISHED_BAM_SUBDIR", "Data/PolishedBams")
    COMPLETE_VCF_SUBDIR: str = os.getenv("COMPLETE_VCF_SUBDIR", "VCF/Complete")

    # Cache for AWS Secrets Manager to avoid multiple API calls
    # Note: Must use PrivateAttr for Pydantic v2 private attributes
    _secret_cache: dict | None = PrivateAttr(default=None)

    def _get_config_value(
        self,
        env_var_name: str,
        secret_key_name: str | None = None,
        default: str | None = None
    ) -> str | None:
        """
        Get configuration value from environment variable or AWS Secrets Manager (with caching).

        Args:
            env_var_name: Environment variable name to check first
            secret_key_name: Key name in AWS Secrets (defaults to env_var_name if not provided)
            default: Default value to return if not found in env or secrets

        Returns:
            Configuration value, or default value if not found
        """
        env_value = os.getenv(env_var_name)
        if env_value:
            return env_value

        if secret_key_name is None:
            secret_key_name = env_var_name

        env_secret = os.getenv('ENV_SECRETS')
        if env_secret:
            try:
                if self._secret_cache is None:
                    self._secret_cache = get_secret(
                        env_secret, os.getenv("AWS_REGION", 'us-east-1')
                    )

                secret_value = self._secret_cache.get(secret_key_name)
                if secret_value is not None:
                    return secret_value
            except (BotoCoreError, ClientError):
                pass

        return default

    @computed_field
    @property
    def MOSAIC_API_URL(self) -> str:
        """Mosaic REST API base URL from env or secrets"""
        return self._get_config_value(
            "MOSAIC_API_URL", default="https://mosaic.chpc.utah.edu/api/v1"
        )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get settings instance, cached for performance
    """
    return Settings()
