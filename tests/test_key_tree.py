#!/usr/bin/env python3

# Copyright (C) The bip47 developers
#
# This file is part of bip47. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip47 including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"Tests for the `bip47.key_tree` module."

import json
import logging
from os import path

import pytest
from btclib.ecc.curve import mult
from btclib.ecc.sec_point import bytes_from_point

from bip47.exceptions import (
    BIP47ValueError,
    InvalidLength,
    InvalidPublicKey,
    MissingPrivateKey,
)
from bip47.key_tree import (
    DerivedChild,
    KeyTree,
    bip47_der_path,
    check_network,
    coin_type,
)

filename = path.join(path.dirname(__file__), "_data", "bip47_vectors.json")
with open(filename, "r", encoding="ascii") as file_:
    VECTORS = json.load(file_)

ALICE = VECTORS["alice"]
BOB = VECTORS["bob"]


def test_der_path() -> None:
    assert coin_type() == 0
    assert coin_type("mainnet") == 0
    assert coin_type("testnet") == 1
    assert coin_type("regtest") == 1

    assert bip47_der_path() == "m/47h/0h/0h"
    assert bip47_der_path(3, "testnet") == "m/47h/1h/3h"
    assert bip47_der_path(0x7FFFFFFF) == "m/47h/0h/2147483647h"

    for account in (-1, 0x80000000):
        with pytest.raises(BIP47ValueError, match="invalid account: "):
            bip47_der_path(account)


def test_check_network() -> None:
    for network in ("mainnet", "testnet", "regtest"):
        assert check_network(network) == network

    with pytest.raises(BIP47ValueError, match="unknown network: "):
        check_network("litecoin")
    with pytest.raises(BIP47ValueError, match="unknown network: "):
        bip47_der_path(0, "litecoin")


def test_notification_keys() -> None:
    for vector in (ALICE, BOB):
        key_tree = KeyTree.from_seed(vector["seed"])
        assert key_tree.is_private
        assert key_tree.network == "mainnet"
        assert key_tree.notification_prv_key.hex() == vector["notification_prv_key"]
        assert key_tree.notification_pub_key.hex() == vector["notification_pub_key"]
        assert key_tree.notification_address() == vector["notification_address"]

        child = key_tree.derive(0)
        assert child.index == 0
        assert child.is_private
        assert child.prv_key == key_tree.notification_prv_key
        assert child.pub_key == key_tree.notification_pub_key


def test_public_derivation() -> None:
    prv_tree = KeyTree.from_seed(bytes.fromhex(BOB["seed"]))
    pub_tree = KeyTree.from_pub_key(prv_tree.pub_key, prv_tree.chain_code)

    assert not pub_tree.is_private
    assert pub_tree.pub_key == prv_tree.pub_key
    assert pub_tree.chain_code == prv_tree.chain_code
    assert pub_tree.notification_address() == BOB["notification_address"]

    for index in (0, 1, 2, 0x7FFFFFFF):
        prv_child = prv_tree.derive(index)
        pub_child = pub_tree.derive(index)
        assert pub_child.index == index
        assert pub_child.pub_key == prv_child.pub_key
        assert not pub_child.is_private
        assert pub_child.prv_key is None
        assert prv_child.prv_key is not None
        q = int.from_bytes(prv_child.prv_key, "big")
        assert bytes_from_point(mult(q)) == prv_child.pub_key
        assert prv_child.point == mult(q)
        assert pub_child.point == mult(q)

    # deterministic
    assert pub_tree.derive(5) == pub_tree.derive(5)
    assert prv_tree.derive(5) == prv_tree.derive(5)


def test_missing_private_key() -> None:
    prv_tree = KeyTree.from_seed(BOB["seed"])
    pub_tree = KeyTree.from_pub_key(prv_tree.pub_key, prv_tree.chain_code)

    with pytest.raises(MissingPrivateKey, match="public-only key tree"):
        pub_tree.prv_key  # pylint: disable=pointless-statement
    with pytest.raises(MissingPrivateKey, match="no private key for child 0"):
        pub_tree.notification_prv_key  # pylint: disable=pointless-statement
    with pytest.raises(MissingPrivateKey, match="no private key for child 7"):
        pub_tree.derive(7).require_prv_key()

    assert prv_tree.derive(7).require_prv_key() == prv_tree.derive(7).prv_key
    assert len(prv_tree.prv_key) == 32


def test_invalid_index() -> None:
    key_tree = KeyTree.from_seed(ALICE["seed"])
    for index in (-1, 0x80000000, 0xFFFFFFFF):
        with pytest.raises(BIP47ValueError, match="invalid non-hardened index: "):
            key_tree.derive(index)


def test_invalid_root() -> None:
    prv_tree = KeyTree.from_seed(ALICE["seed"])

    with pytest.raises(InvalidPublicKey, match="invalid root public key: "):
        KeyTree.from_pub_key(b"\x05" + prv_tree.pub_key[1:], prv_tree.chain_code)
    with pytest.raises(InvalidPublicKey, match="invalid root public key: "):
        KeyTree.from_pub_key(prv_tree.pub_key[:32], prv_tree.chain_code)
    with pytest.raises(InvalidLength, match="invalid chain code: "):
        KeyTree.from_pub_key(prv_tree.pub_key, prv_tree.chain_code[:31])
    with pytest.raises(BIP47ValueError, match="unknown network: "):
        KeyTree.from_pub_key(prv_tree.pub_key, prv_tree.chain_code, "litecoin")


def test_invalid_seed() -> None:
    with pytest.raises(BIP47ValueError, match="invalid seed: "):
        KeyTree.from_seed(b"\x01" * 15)
    with pytest.raises(BIP47ValueError, match="invalid seed: "):
        KeyTree.from_seed(b"\x01" * 65)


def test_accounts_and_networks() -> None:
    account0 = KeyTree.from_seed(ALICE["seed"])
    account1 = KeyTree.from_seed(ALICE["seed"], 1)
    testnet = KeyTree.from_seed(ALICE["seed"], 0, "testnet")

    assert account1.pub_key != account0.pub_key
    # different coin type in the derivation path
    assert testnet.pub_key != account0.pub_key
    assert testnet.notification_address()[0] in "mn"

    regtest = KeyTree.from_seed(ALICE["seed"], 0, "regtest")
    assert regtest.pub_key == testnet.pub_key


def test_clone() -> None:
    key_tree = KeyTree.from_seed(ALICE["seed"])
    key_tree2 = key_tree.clone()

    assert key_tree2 is not key_tree
    assert key_tree2.network == key_tree.network
    assert key_tree2.prv_key == key_tree.prv_key
    assert key_tree2.derive(3) == key_tree.derive(3)


def test_derived_child() -> None:
    child = DerivedChild(4, bytes.fromhex(BOB["notification_pub_key"]))
    assert not child.is_private
    with pytest.raises(MissingPrivateKey):
        child.require_prv_key()


def test_logging(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="bip47")
    KeyTree.from_seed(ALICE["seed"], 2, "testnet")
    assert "testnet payment code root derived at m/47h/1h/2h" in caplog.text
    # private material is never logged
    assert ALICE["seed"] not in caplog.text
