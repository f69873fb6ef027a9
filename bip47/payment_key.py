#!/usr/bin/env python3

# Copyright (C) The bip47 developers
#
# This file is part of bip47. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip47 including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""BIP47 payment keys.

Alice (sender) pays Bob (receiver) at the i-th address
of their payment channel.

Alice uses the private key a of her notification key
and the i-th child public key B of Bob's payment code:

    S = a*B, s = SHA256(Sx), P = B + s*G

Bob uses the private key b of his i-th child key
and the public key A of Alice's notification key:

    S = b*A, s = SHA256(Sx), p = b + s

As a*B = b*A, Bob computes the private key p
of the payment public key P = p*G computed by Alice.
"""

from btclib.alias import Point
from btclib.ecc.curve import mult, secp256k1
from btclib.ecc.sec_point import bytes_from_point
from btclib.exceptions import BTClibValueError
from btclib.to_prv_key import PrvKey
from btclib.to_pub_key import PubKey

from bip47.exceptions import InvalidDerivedPublicKey, InvalidPoint, InvalidPrivateKey
from bip47.key_tree import DerivedChild, KeyTree
from bip47.shared_secret import SharedSecret, int_from_key, shared_secret

ec = secp256k1


def _derived_point(child: DerivedChild) -> Point:
    try:
        return child.point
    except BTClibValueError as e:
        err_msg = f"invalid derived public key at index {child.index}: {e}"
        raise InvalidDerivedPublicKey(err_msg) from e


def _tweaked_pub_key(B: Point, secret: SharedSecret) -> bytes:
    P = ec.add(B, mult(secret.s, ec.G, ec))
    if P[1] == 0:
        raise InvalidPoint("invalid (INF) payment public key")  # pragma: no cover
    return bytes_from_point(P, ec)


def payment_pub_key(sender_prv_key: PrvKey, receiver: KeyTree, index: int) -> bytes:
    "Return the sender side payment public key B + s*G."

    a = int_from_key(sender_prv_key)
    B = _derived_point(receiver.derive(index))
    return _tweaked_pub_key(B, shared_secret(a, B))


def receiver_payment_pub_key(
    receiver: KeyTree, sender_pub_key: PubKey, index: int
) -> bytes:
    "Return the receiver side payment public key B + s*G."

    child = receiver.derive(index)
    b = child.require_prv_key()
    B = _derived_point(child)
    return _tweaked_pub_key(B, shared_secret(b, sender_pub_key))


def payment_prv_key(receiver: KeyTree, sender_pub_key: PubKey, index: int) -> bytes:
    "Return the receiver side payment private key (b + s) mod n."

    b = int_from_key(receiver.derive(index).require_prv_key())
    secret = shared_secret(b, sender_pub_key)
    p = (b + secret.s) % ec.n
    if p == 0:
        raise InvalidPrivateKey("invalid (zero) payment private key")  # pragma: no cover
    return p.to_bytes(ec.n_size, byteorder="big", signed=False)
