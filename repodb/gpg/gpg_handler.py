"""
GPG Handler - detached signatures for packages and repository databases

Signing is delegated to the external gpg binary. The signer is strict:
any failure raises SigningError so a database is never published with a
missing or stale signature.

Optional environment variables:
- GNUPGHOME: keyring directory (overridden by the gnupg_home argument)
- GPG_PASSPHRASE: passphrase for the signing key
"""

import os
import subprocess
import logging
from pathlib import Path
from typing import Optional

from repodb.common.errors import SigningError

logger = logging.getLogger(__name__)


class GPGSigner:
    """Produces <file>.sig detached signatures with a given secret key"""

    def __init__(self, key_id: str, gnupg_home: Optional[str] = None,
                 passphrase: Optional[str] = None, gpg_binary: str = "gpg"):
        if not key_id or not key_id.strip():
            raise SigningError("GPG signing requested without a key id.")
        self.key_id = key_id.strip()
        self.gnupg_home = gnupg_home
        self.passphrase = passphrase if passphrase is not None else os.environ.get("GPG_PASSPHRASE", "")
        self.gpg_binary = gpg_binary

    def sign_file(self, file_path, sig_path=None) -> Path:
        """
        Create a detached signature for file_path.

        Args:
            file_path: File to sign
            sig_path: Signature destination, defaults to <file_path>.sig

        Returns:
            Path of the written signature

        Raises:
            SigningError: if gpg cannot run, exits non-zero or leaves no signature
        """
        file_path = Path(file_path)
        sig_path = Path(sig_path) if sig_path is not None else Path(str(file_path) + ".sig")

        if not file_path.exists():
            raise SigningError(f"Cannot sign missing file: {file_path}")

        cmd = [
            self.gpg_binary,
            "--batch",
            "--yes",
            "--local-user",
            self.key_id,
            "--output",
            str(sig_path),
        ]
        if self.passphrase:
            cmd.extend(["--pinentry-mode", "loopback", "--passphrase", self.passphrase])
        cmd.extend(["--detach-sign", str(file_path)])

        try:
            proc = subprocess.run(
                cmd,
                env=self._gpg_env(),
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            raise SigningError(f"Unable to run {self.gpg_binary}: {e}") from e

        if proc.returncode != 0:
            raise SigningError(
                f"GPG signing failed for {file_path.name}: {(proc.stderr or '')[:300]}"
            )

        try:
            if sig_path.stat().st_size == 0:
                raise SigningError(f"GPG reported success but signature is empty: {sig_path.name}")
        except FileNotFoundError as e:
            raise SigningError(f"GPG reported success but signature is missing: {sig_path.name}") from e

        logger.info("Signed: %s -> %s", file_path.name, sig_path.name)
        return sig_path

    def _gpg_env(self) -> dict:
        env = os.environ.copy()
        if self.gnupg_home:
            env["GNUPGHOME"] = self.gnupg_home
        return env


def make_signer(key_id: Optional[str], gnupg_home: Optional[str] = None) -> Optional[GPGSigner]:
    """Return a GPGSigner for key_id, or None when no key is configured"""
    if not key_id:
        return None
    return GPGSigner(key_id, gnupg_home=gnupg_home)
