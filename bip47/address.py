#!/usr/bin/env python3

# Copyright (C) The bip47 developers
#
# This file is part of bip47. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip47 including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Addresses of the keys derived from payment codes.

Payment public keys can be used as:

- p2pkh: legacy base58 address starting with '1'
- p2sh: p2wpkh nested in p2sh, base58 address starting with '3'
- p2wpkh: native SegWit v0 bech32 address starting with 'bc1q'

Notification addresses are always p2pkh.
"""

from typing import Callable, Dict

from btclib import b32, b58
from btclib.to_pub_key import Key

from bip47.exceptions import UnknownAddressType

_ADDRESS_FUNCTIONS: Dict[str, Callable[[Key, str], str]] = {
    "p2pkh": b58.p2pkh,
    "p2sh": b58.p2wpkh_p2sh,
    "p2wpkh": b32.p2wpkh,
}

ADDRESS_TYPES = tuple(_ADDRESS_FUNCTIONS)


def address_from_pub_key(
    pub_key: Key, address_type: str = "p2pkh", network: str = "mainnet"
) -> str:
    "Return the address of the given type corresponding to a public key."

    try:
        address_function = _ADDRESS_FUNCTIONS[address_type]
    except (KeyError, TypeError) as e:
        err_msg = f"unknown address type: {address_type!r}"
        err_msg += f" not in {ADDRESS_TYPES}"
        raise UnknownAddressType(err_msg) from e
    return address_function(pub_key, network)


def p2pkh(pub_key: Key, network: str = "mainnet") -> str:
    "Return the p2pkh base58 address corresponding to a public key."
    return address_from_pub_key(pub_key, "p2pkh", network)


def p2sh(pub_key: Key, network: str = "mainnet") -> str:
    "Return the p2wpkh-p2sh base58 address corresponding to a public key."
    return address_from_pub_key(pub_key, "p2sh", network)


def p2wpkh(pub_key: Key, network: str = "mainnet") -> str:
    "Return the p2wpkh bech32 address corresponding to a public key."
    return address_from_pub_key(pub_key, "p2wpkh", network)
