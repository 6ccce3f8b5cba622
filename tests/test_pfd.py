import hashlib
import hmac
import struct

import pytest
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from lbparchive.pfd import (
    KEYGEN_KEY,
    SAVEGAME_PARAM_SFO_KEY,
    SYSCON_MANAGER_KEY,
    build_pfd,
    make_pfd,
)

SFO = b"\0PSF" + b"sample sfo contents" * 10


def sha1_hmac(key, data):
    return hmac.new(key, data, hashlib.sha1).digest()


def decrypt_header(pfd):
    iv = pfd[16:32]
    decryptor = Cipher(algorithms.AES(SYSCON_MANAGER_KEY), modes.CBC(iv)).decryptor()
    return decryptor.update(pfd[32:96]) + decryptor.finalize()


@pytest.mark.parametrize("version", [3, 4])
def test_magic_and_version(version):
    pfd = build_pfd(version, SFO)
    assert pfd[:8] == b"\0\0\0\0PFDB"
    assert struct.unpack(">Q", pfd[8:16])[0] == version
    assert pfd[16:32] == bytes(16)


def test_index_and_entry_layout():
    pfd = build_pfd(3, SFO)
    assert pfd[96:128] == struct.pack(">4Q", 1, 1, 1, 0)
    entries = pfd[128:-20]
    assert struct.unpack(">Q", entries[:8])[0] == 1
    assert entries[8:17] == b"PARAM.SFO"
    assert entries[144:164] == sha1_hmac(SAVEGAME_PARAM_SFO_KEY, SFO)
    assert struct.unpack(">Q", entries[-8:])[0] == len(SFO)


@pytest.mark.parametrize("version", [3, 4])
def test_header_signatures(version):
    pfd = build_pfd(version, SFO)
    header = decrypt_header(pfd)
    pf_key = sha1_hmac(KEYGEN_KEY, bytes(20)) if version == 4 else bytes(20)
    index = pfd[96:128]
    entry_sig = pfd[-20:]
    assert header[40:64] == bytes(24)
    assert header[20:40] == sha1_hmac(pf_key, index)
    assert header[:20] == sha1_hmac(pf_key, entry_sig)


def test_versions_sign_differently():
    assert build_pfd(3, SFO)[-20:] != build_pfd(4, SFO)[-20:]
    assert build_pfd(3, SFO)[96:-20] == build_pfd(4, SFO)[96:-20]


def test_sfo_change_changes_signature():
    assert build_pfd(3, SFO)[-20:] != build_pfd(3, SFO + b"x")[-20:]


def test_make_pfd_writes_file(tmp_path):
    data = make_pfd(4, SFO, tmp_path)
    assert (tmp_path / "PARAM.PFD").read_bytes() == data
    assert data == build_pfd(4, SFO)