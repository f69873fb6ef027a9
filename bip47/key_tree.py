#!/usr/bin/env python3

# Copyright (C) The bip47 developers
#
# This file is part of bip47. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip47 including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""BIP32 key tree of a payment code.

The public key and chain code of a payment code are the root of a
BIP32 key tree: its non-hardened children are the keys
used for notification (index 0) and for payments (any index).

When derived from a wallet seed, the root is the extended private key
at the hardened path

    m / 47' / coin_type' / account'

where coin_type is 0 for mainnet and 1 otherwise;
the private key never leaves the tree, it is not part of the
serialized payment code.

https://github.com/bitcoin/bips/blob/master/bip-0047.mediawiki
"""

import copy
import logging
from dataclasses import dataclass
from typing import Optional

from btclib.alias import Octets, Point
from btclib.bip32 import bip32
from btclib.ecc.curve import mult
from btclib.ecc.sec_point import bytes_from_point, point_from_octets
from btclib.exceptions import BTClibValueError
from btclib.network import NETWORKS
from btclib.utils import bytes_from_octets

from bip47.address import p2pkh
from bip47.exceptions import (
    BIP47ValueError,
    InvalidLength,
    InvalidPublicKey,
    MissingPrivateKey,
)

logger = logging.getLogger(__name__)

PURPOSE = 47
_HARDENED = 0x80000000
NOTIFICATION_INDEX = 0


def check_network(network: str) -> str:
    "Return the network name if it is a known one."

    if network not in NETWORKS:
        err_msg = f"unknown network: {network!r}"
        err_msg += f" not in {tuple(NETWORKS)}"
        raise BIP47ValueError(err_msg)
    return network


def coin_type(network: str = "mainnet") -> int:
    return 0 if check_network(network) == "mainnet" else 1


def bip47_der_path(account: int = 0, network: str = "mainnet") -> str:
    "Return the hardened derivation path of a payment code root."

    if not 0 <= account < _HARDENED:
        raise BIP47ValueError(f"invalid account: {account}")
    return f"m/{PURPOSE}h/{coin_type(network)}h/{account}h"


@dataclass(frozen=True)
class DerivedChild:
    "Non-hardened child of a payment code key tree."

    index: int
    pub_key: bytes
    # only for children of a private root
    prv_key: Optional[bytes] = None

    @property
    def is_private(self) -> bool:
        return self.prv_key is not None

    @property
    def point(self) -> Point:
        return point_from_octets(self.pub_key)

    def require_prv_key(self) -> bytes:
        if self.prv_key is None:
            err_msg = f"no private key for child {self.index}:"
            err_msg += " public-only key tree"
            raise MissingPrivateKey(err_msg)
        return self.prv_key


class KeyTree:
    """Key tree rooted at a BIP32 extended key.

    The root is owned by the tree: it is copied at construction
    and never handed out.
    """

    def __init__(self, root: bip32.BIP32KeyData, network: str = "mainnet") -> None:

        self.network = check_network(network)
        self._root = copy.copy(root)
        if self._root.is_private:
            q = int.from_bytes(self._root.key[1:], byteorder="big", signed=False)
            self._pub_key = bytes_from_point(mult(q))
        else:
            self._pub_key = self._root.key

    @classmethod
    def from_pub_key(
        cls, pub_key: Octets, chain_code: Octets, network: str = "mainnet"
    ) -> "KeyTree":
        "Return the public key tree rooted at (pub_key, chain_code)."

        network = check_network(network)
        try:
            chain_code = bytes_from_octets(chain_code, 32)
        except BTClibValueError as e:
            raise InvalidLength(f"invalid chain code: {e}") from e
        try:
            root = bip32.BIP32KeyData(
                version=NETWORKS[network].bip32_pub,
                depth=0,
                parent_fingerprint=b"\x00" * 4,
                index=0,
                chain_code=chain_code,
                key=pub_key,
            )
        except BTClibValueError as e:
            raise InvalidPublicKey(f"invalid root public key: {e}") from e
        return cls(root, network)

    @classmethod
    def from_seed(
        cls, seed: Octets, account: int = 0, network: str = "mainnet"
    ) -> "KeyTree":
        "Return the private key tree of the account derived from a wallet seed."

        der_path = bip47_der_path(account, network)
        try:
            rootxprv = bip32.rootxprv_from_seed(seed, NETWORKS[network].bip32_prv)
        except BTClibValueError as e:
            raise BIP47ValueError(f"invalid seed: {e}") from e
        root = bip32.BIP32KeyData.b58decode(bip32.derive(rootxprv, der_path))
        logger.debug("%s payment code root derived at %s", network, der_path)
        return cls(root, network)

    @property
    def is_private(self) -> bool:
        return self._root.is_private

    @property
    def pub_key(self) -> bytes:
        return self._pub_key

    @property
    def chain_code(self) -> bytes:
        return self._root.chain_code

    @property
    def prv_key(self) -> bytes:
        if not self.is_private:
            raise MissingPrivateKey("public-only key tree")
        return self._root.key[1:]

    def derive(self, index: int) -> DerivedChild:
        "Return the non-hardened child at the given index."

        if not 0 <= index < _HARDENED:
            raise BIP47ValueError(f"invalid non-hardened index: {index}")

        xkey = bip32.BIP32KeyData.b58decode(bip32.derive(self._root, index))
        if xkey.is_private:
            q = int.from_bytes(xkey.key[1:], byteorder="big", signed=False)
            return DerivedChild(index, bytes_from_point(mult(q)), xkey.key[1:])
        return DerivedChild(index, xkey.key)

    @property
    def notification_pub_key(self) -> bytes:
        return self.derive(NOTIFICATION_INDEX).pub_key

    @property
    def notification_prv_key(self) -> bytes:
        return self.derive(NOTIFICATION_INDEX).require_prv_key()

    def notification_address(self) -> str:
        "Return the p2pkh address of the notification key."
        return p2pkh(self.notification_pub_key, self.network)

    def clone(self) -> "KeyTree":
        return type(self)(self._root, self.network)
