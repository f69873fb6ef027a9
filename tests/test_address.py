#!/usr/bin/env python3

# Copyright (C) The bip47 developers
#
# This file is part of bip47. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip47 including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"Tests for the `bip47.address` module."

import json
from os import path

import pytest

from bip47.address import ADDRESS_TYPES, address_from_pub_key, p2pkh, p2sh, p2wpkh
from bip47.exceptions import BIP47ValueError, UnknownAddressType

filename = path.join(path.dirname(__file__), "_data", "bip47_vectors.json")
with open(filename, "r", encoding="ascii") as file_:
    ADDRESSES = json.load(file_)["addresses"]


def test_addresses() -> None:
    for pub_key, (addr_p2pkh, addr_p2sh, addr_p2wpkh) in ADDRESSES.items():
        pub_key_bytes = bytes.fromhex(pub_key)
        assert p2pkh(pub_key_bytes) == addr_p2pkh
        assert p2sh(pub_key_bytes) == addr_p2sh
        assert p2wpkh(pub_key_bytes) == addr_p2wpkh

        # hex-string public key
        assert p2pkh(pub_key) == addr_p2pkh

        for address_type, address in zip(ADDRESS_TYPES, (addr_p2pkh, addr_p2sh, addr_p2wpkh)):
            assert address_from_pub_key(pub_key_bytes, address_type) == address


def test_default_address_type() -> None:
    pub_key = bytes.fromhex(list(ADDRESSES)[0])
    assert address_from_pub_key(pub_key) == p2pkh(pub_key)


def test_networks() -> None:
    pub_key = bytes.fromhex(list(ADDRESSES)[0])

    assert p2pkh(pub_key, "testnet")[0] in "mn"
    assert p2sh(pub_key, "testnet").startswith("2")
    assert p2wpkh(pub_key, "testnet").startswith("tb1q")
    assert p2wpkh(pub_key, "regtest").startswith("bcrt1q")


def test_unknown_address_type() -> None:
    pub_key = bytes.fromhex(list(ADDRESSES)[0])

    for address_type in ("p2tr", "P2PKH", "", None):
        with pytest.raises(UnknownAddressType, match="unknown address type: "):
            address_from_pub_key(pub_key, address_type)  # type: ignore

    # UnknownAddressType is also a plain ValueError
    with pytest.raises(BIP47ValueError):
        address_from_pub_key(pub_key, "p2wsh")
    with pytest.raises(ValueError):
        address_from_pub_key(pub_key, "p2wsh")
