"""Serialization of the PARAM.PFD protection file of a PS3 save."""

from __future__ import annotations

import hashlib
import hmac
import struct
from pathlib import Path
from typing import Union

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

SYSCON_MANAGER_KEY = bytes([
    0xD4, 0x13, 0xB8, 0x96, 0x63, 0xE1, 0xFE, 0x9F,
    0x75, 0x14, 0x3D, 0x3B, 0xB4, 0x56, 0x52, 0x74,
])
KEYGEN_KEY = bytes([
    0x6B, 0x1A, 0xCE, 0xA2, 0x46, 0xB7, 0x45, 0xFD, 0x8F, 0x93,
    0x76, 0x3B, 0x92, 0x05, 0x94, 0xCD, 0x53, 0x48, 0x3B, 0x82,
])
SAVEGAME_PARAM_SFO_KEY = bytes([
    0x0C, 0x08, 0x00, 0x0E, 0x09, 0x05, 0x04, 0x04, 0x0D, 0x01,
    0x0F, 0x00, 0x04, 0x06, 0x02, 0x02, 0x09, 0x06, 0x0D, 0x03,
])

# Normally 57 index slots and 114 entries; one of each is enough here.
_INDEX_SIZE = 1
_ENTRY_SIZE = 1


def _hmac_sha1(key: bytes, data: bytes) -> bytes:
    return hmac.new(key, data, hashlib.sha1).digest()


def build_pfd(version: int, sfo: bytes) -> bytes:
    """Build a PARAM.PFD protecting the given PARAM.SFO contents."""
    # Normally random; zeros work just as well.
    header_iv = bytes(16)
    key_orig = bytes(20)
    pf_key = _hmac_sha1(KEYGEN_KEY, key_orig) if version == 4 else key_orig

    sfo_filename = b"PARAM.SFO".ljust(65, b"\0")
    entries = b"".join((
        struct.pack(">Q", _INDEX_SIZE),
        sfo_filename,
        bytes(7),  # padding
        bytes(64),  # file encryption key
        _hmac_sha1(SAVEGAME_PARAM_SFO_KEY, sfo),
        bytes(20),  # console id hash
        bytes(20),  # disc key hash
        bytes(20),  # account id hash
        bytes(40),  # reserved
        struct.pack(">Q", len(sfo)),
    ))

    index = struct.pack(">4Q", _INDEX_SIZE, _ENTRY_SIZE, _ENTRY_SIZE, 0)

    # The entry signature skips the next-entry index and the name padding.
    entry_sig_table = _hmac_sha1(pf_key, sfo_filename + entries[80:])
    index_sig = _hmac_sha1(pf_key, index)
    table_sig = _hmac_sha1(pf_key, entry_sig_table)

    header = table_sig + index_sig + key_orig + bytes(4)
    encryptor = Cipher(algorithms.AES(SYSCON_MANAGER_KEY), modes.CBC(header_iv)).encryptor()
    encrypted_header = encryptor.update(header) + encryptor.finalize()

    return b"".join((
        b"\0\0\0\0PFDB",
        struct.pack(">Q", version),
        header_iv,
        encrypted_header,
        index,
        entries,
        entry_sig_table,
    ))


def make_pfd(version: int, sfo: bytes, directory: Union[str, Path]) -> bytes:
    """Write PARAM.PFD into ``directory`` and return its contents."""
    pfd = build_pfd(version, sfo)
    (Path(directory) / "PARAM.PFD").write_bytes(pfd)
    return pfd