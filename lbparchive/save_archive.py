"""Serialization of the encrypted FAR4 save archive of a level backup."""

from __future__ import annotations

import hashlib
import hmac
import struct
from collections.abc import Mapping
from pathlib import Path
from typing import Union

from . import xxtea
from .versions import ResrcRevision

TEA_KEY = (0x1B70CBD, 0x149607D6, 0x7F94DD5, 0x10DB8CA0)
HASHINATE_KEY = bytes([
    0x2A, 0xFD, 0xA3, 0xCA, 0x86, 0x02, 0x19, 0xB3,
    0xE6, 0x8A, 0xFF, 0xCC, 0x82, 0xC7, 0x6B, 0x8A,
    0xFE, 0x0A, 0xD8, 0x13, 0x5F, 0x60, 0x47, 0x5B,
    0xDF, 0x5D, 0x37, 0xBC, 0x57, 0x1C, 0xB5, 0xE7,
    0x96, 0x75, 0xD5, 0x28, 0xA2, 0xFA, 0x90, 0xED,
    0xDF, 0xA3, 0x45, 0xB4, 0x1F, 0xF9, 0x1F, 0x25,
    0xE7, 0x42, 0x45, 0x3B, 0x2B, 0xB5, 0x3E, 0x16,
    0xC9, 0x58, 0x19, 0x7B, 0xE7, 0x18, 0xC0, 0x80,
])
CHUNK_SIZE = 0x240000
SLOT_LIST_TYPE = 29


def _save_key(revision: ResrcRevision, slt_hash: bytes) -> bytes:
    return b"".join((
        struct.pack(">IHHI", revision.head, revision.branch_id, revision.branch_revision, 1),
        bytes(4 * 10),  # deprecated1
        struct.pack(">II", 0, SLOT_LIST_TYPE),  # copied, root type
        bytes(4 * 3),  # deprecated2
        slt_hash,
        bytes(4 * 10),  # deprecated3
    ))


def build_savearchive(
    revision: ResrcRevision, slt_hash: bytes, resources: Mapping[bytes, bytes]
) -> list[bytes]:
    """Build the archive and return its encrypted chunks, in file order."""
    if len(slt_hash) != 20:
        raise ValueError("slot list hash must be 20 bytes")

    archive = bytearray()
    fat = []
    # Entries must be sorted by hash.
    for sha1, resource in sorted(resources.items()):
        if len(sha1) != 20:
            raise ValueError("resource hashes must be 20 bytes")
        fat.append(sha1 + struct.pack(">II", len(archive), len(resource)))
        archive += resource

    archive += bytes(-len(archive) % 4)
    archive += _save_key(revision, slt_hash)
    archive += b"".join(fat)

    hashinate_offset = len(archive)
    archive += bytes(20)
    archive += struct.pack(">I", len(fat))
    archive += b"FAR4"
    digest = hmac.new(HASHINATE_KEY, bytes(archive), hashlib.sha1).digest()
    archive[hashinate_offset:hashinate_offset + 20] = digest

    chunk_size = CHUNK_SIZE
    last_index = len(archive) // chunk_size
    chunks = []
    for index, start in enumerate(range(0, len(archive), chunk_size)):
        chunk = bytes(archive[start:start + chunk_size])
        # The trailing magic of the final chunk stays in the clear.
        end = len(chunk) - 4 if index == last_index else len(chunk)
        encrypted = xxtea.encrypt(TEA_KEY, chunk[:end]) if end else b""
        chunks.append(encrypted + chunk[end:])
    return chunks


def make_savearchive(
    revision: ResrcRevision,
    slt_hash: bytes,
    resources: Mapping[bytes, bytes],
    bkp_dir: Union[str, Path],
) -> list[Path]:
    """Write the archive chunks into files named 0, 1, ... in ``bkp_dir``."""
    directory = Path(bkp_dir)
    paths = []
    for index, chunk in enumerate(build_savearchive(revision, slt_hash, resources)):
        path = directory / str(index)
        path.write_bytes(chunk)
        paths.append(path)
    return paths