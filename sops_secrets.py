"""
API key resolution through SOPS.
Runs `sops -d <file>` and reads the api_key field from the decrypted JSON.
The decrypted payload only ever lives in memory.
"""

import json
import logging
import subprocess
from typing import Any, Callable, List

from lyric_errors import SecretResolutionError

logger = logging.getLogger(__name__)


class SopsSecretResolver:
    """Decrypts a SOPS-encrypted JSON secrets file and pulls out the API key."""

    def __init__(self, runner: Callable[..., Any] = subprocess.run, sops_binary: str = "sops"):
        """
        Initialize the resolver.

        Args:
            runner: Callable with subprocess.run's signature, swapped out in tests
            sops_binary: Name or path of the sops executable
        """
        self.runner = runner
        self.sops_binary = sops_binary

    def build_command(self, secrets_file_path: str) -> List[str]:
        return [self.sops_binary, "-d", secrets_file_path]

    def decrypt(self, secrets_file_path: str) -> str:
        """Run sops and return whatever it printed to stdout."""
        logger.info("Checkpoint: Starting SOPS decryption for file: %s", secrets_file_path)

        command = self.build_command(secrets_file_path)
        logger.info("Executing command: %s", " ".join(command))

        try:
            result = self.runner(command, capture_output=True, text=True, encoding="utf-8", check=False)
        except OSError as e:
            raise SecretResolutionError(f"Failed to run SOPS decryption command: {e}")
        except UnicodeDecodeError as e:
            raise SecretResolutionError(f"SOPS output is not valid UTF-8: {e}")

        logger.info("Checkpoint: Reading decrypted content...")

        if result.returncode != 0:
            if result.stderr:
                logger.error("sops stderr: %s", result.stderr.strip())
            raise SecretResolutionError(
                f"SOPS decryption command failed with return code: {result.returncode}"
            )

        decrypted_content = result.stdout or ""
        if not decrypted_content:
            logger.error("Decrypted content is empty. Ensure the file is valid and SOPS is configured properly.")
            raise SecretResolutionError("Failed to decrypt secrets file. Ensure SOPS is configured properly.")

        logger.info(
            "Checkpoint: Successfully decrypted content: Length: %d characters.", len(decrypted_content)
        )
        return decrypted_content

    def get_api_key(self, secrets_file_path: str) -> str:
        """Decrypt the secrets file and return its api_key field."""
        decrypted_content = self.decrypt(secrets_file_path)

        logger.info("Checkpoint: Parsing JSON...")
        try:
            secrets = json.loads(decrypted_content)
        except json.JSONDecodeError as e:
            raise SecretResolutionError(f"Error parsing decrypted JSON: {e}")

        api_key = secrets.get('api_key') if isinstance(secrets, dict) else None
        if not isinstance(api_key, str) or not api_key:
            raise SecretResolutionError(f"No api_key found in decrypted secrets file: {secrets_file_path}")

        return api_key
