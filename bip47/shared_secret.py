#!/usr/bin/env python3

# Copyright (C) The bip47 developers
#
# This file is part of bip47. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip47 including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Elliptic curve Diffie-Hellman shared secret of BIP47.

Given a private key a and the public key B = b*G of the counterparty,
the secret point is S = a*B = b*A = a*b*G:
both parties can compute it without revealing their private keys.

The x-coordinate Sx of the secret point is used as is
to blind payment codes, while its hash s = SHA256(Sx)
must be a valid private key and is used to tweak payment keys.
"""

from dataclasses import dataclass

from btclib.alias import Point
from btclib.ecc.curve import mult, secp256k1
from btclib.exceptions import BTClibValueError
from btclib.hashes import sha256
from btclib.to_prv_key import PrvKey, int_from_prv_key
from btclib.to_pub_key import PubKey, point_from_pub_key

from bip47.exceptions import (
    InvalidPoint,
    InvalidPrivateKey,
    InvalidPublicKey,
    InvalidSharedSecret,
)

ec = secp256k1


@dataclass(frozen=True)
class SharedSecret:
    point: Point
    # x-coordinate of the secret point, ec.p_size bytes
    x: bytes
    # SHA256 of x, as integer in 1..n-1
    s: int

    @property
    def s_bytes(self) -> bytes:
        return self.s.to_bytes(ec.n_size, byteorder="big", signed=False)


def int_from_key(prv_key: PrvKey) -> int:
    "Return a verified-as-valid private key integer."

    try:
        return int_from_prv_key(prv_key, ec)
    except (BTClibValueError, TypeError) as e:
        raise InvalidPrivateKey(f"invalid private key: {e}") from e


def point_from_key(pub_key: PubKey) -> Point:
    "Return a verified-as-valid public key point."

    try:
        return point_from_pub_key(pub_key, ec)
    except (BTClibValueError, TypeError) as e:
        raise InvalidPublicKey(f"invalid public key: {e}") from e


def secret_point(prv_key: PrvKey, pub_key: PubKey) -> Point:
    "Return the ECDH secret point S = prv_key * pub_key."

    q = int_from_key(prv_key)
    Q = point_from_key(pub_key)
    S = mult(q, Q, ec)
    # edge case that cannot be reproduced with a prime order group
    if S[1] == 0:
        raise InvalidPoint("invalid (INF) secret point")  # pragma: no cover
    return S


def shared_secret(prv_key: PrvKey, pub_key: PubKey) -> SharedSecret:
    "Return the (S, Sx, s) shared secret of a private and a public key."

    S = secret_point(prv_key, pub_key)
    x = S[0].to_bytes(ec.p_size, byteorder="big", signed=False)
    s = int.from_bytes(sha256(x), byteorder="big", signed=False)
    if not 0 < s < ec.n:
        err_msg = f"invalid shared secret not in 1..n-1: {hex(s)}"
        raise InvalidSharedSecret(err_msg)  # pragma: no cover
    return SharedSecret(S, x, s)
