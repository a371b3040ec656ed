"""
Cryptographic utilities for in-memory secret protection.

At-rest protection : AES-256-GCM under a key that lives only in this process
Random secrets     : ``secrets`` CSPRNG

Protection is size preserving: the ciphertext replaces the plaintext inside
the same ``bytearray`` and the nonce plus GCM tag are returned separately as
a *seal*.  Python cannot pin or lock memory, so wiping is best-effort.
"""

import hmac
import secrets

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

# ── Constants ────────────────────────────────────────────────────────────────

NONCE_SIZE = 12         # 96-bit nonce (GCM recommendation)
TAG_SIZE = 16           # GCM authentication tag
KEY_SIZE = 32           # 256-bit AES key
SEAL_SIZE = NONCE_SIZE + TAG_SIZE
DEFAULT_SECRET_SIZE = 20  # 160-bit, RFC 4226 recommendation

# Never leaves the process, so protected buffers are only legible here.
_PROCESS_KEY = AESGCM.generate_key(bit_length=KEY_SIZE * 8)


# ── Protect / unprotect ───────────────────────────────────────────────────────

def protect(buffer: bytearray) -> bytes:
    """
    Encrypt *buffer* in place with the process key.

    Layout of the returned seal::

        [ nonce (12 bytes) | tag (16 bytes) ]

    Args:
        buffer: Plaintext to protect; overwritten with ciphertext.

    Returns:
        Seal required by :func:`unprotect`.
    """
    nonce = secrets.token_bytes(NONCE_SIZE)
    blob = AESGCM(_PROCESS_KEY).encrypt(nonce, bytes(buffer), None)
    buffer[:] = blob[:-TAG_SIZE]
    return nonce + blob[-TAG_SIZE:]


def unprotect(buffer: bytearray, seal: bytes) -> None:
    """
    Decrypt a buffer protected by :func:`protect`, in place.

    Args:
        buffer: Ciphertext; overwritten with plaintext.
        seal:   Seal returned by the matching :func:`protect` call.

    Raises:
        ValueError: If the seal has the wrong size.
        cryptography.exceptions.InvalidTag: If the buffer or seal was
            tampered with.
    """
    if len(seal) != SEAL_SIZE:
        raise ValueError(f"Seal must be {SEAL_SIZE} bytes, got {len(seal)}")
    nonce = seal[:NONCE_SIZE]
    tag = seal[NONCE_SIZE:]
    buffer[:] = AESGCM(_PROCESS_KEY).decrypt(nonce, bytes(buffer) + tag, None)


def wipe(buffer: bytearray) -> None:
    """Overwrite a mutable buffer with zeros (best-effort)."""
    for i in range(len(buffer)):
        buffer[i] = 0


# ── Helpers ───────────────────────────────────────────────────────────────────

def random_secret(size: int = DEFAULT_SECRET_SIZE) -> bytearray:
    """Return *size* cryptographically random bytes."""
    return bytearray(secrets.token_bytes(size))


def constant_time_compare(a: str, b: str) -> bool:
    """Return True if *a* == *b* in constant time (timing-safe)."""
    return hmac.compare_digest(a.encode(), b.encode())
