"""
Generate random document identifiers
"""

import secrets
import string

DOCUMENT_ID_ALPHABET = string.ascii_letters + string.digits


def document_id(length: int = 20) -> str:
    """
    A random identifier in the same shape as the ones Firestore assigns.
    """
    return "".join(secrets.choice(DOCUMENT_ID_ALPHABET) for _ in range(length))
