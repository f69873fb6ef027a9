#!/usr/bin/env python3

# Copyright (C) The bip47 developers
#
# This file is part of bip47. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip47 including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Blinding of payment codes in notification transactions.

Alice announces her payment code to Bob with a notification transaction:
an output pays Bob's notification address, while an OP_RETURN output
carries Alice's payment code blinded so that only Bob can read it.

With a the private key of the designated input (the first input
exposing a public key) and B Bob's notification public key:

- S = a*B, x = Sx
- s = HMAC-SHA512(key=outpoint, msg=x), where outpoint is the
  36 bytes serialization of the outpoint spent by the designated input
- the x-coordinate of Alice's public key is XOR-ed with s[:32],
  her chain code with s[32:]

Bob, with b his notification private key and A the public key
of the designated input, computes the same S = b*A
and reverses the XOR.

The OP_RETURN script_pub_key is 83 bytes:

- [  : 1] OP_RETURN (0x6a)
- [ 1: 2] OP_PUSHDATA1 (0x4c)
- [ 2: 3] 80 (0x50)
- [ 3:83] blinded payment code
"""

import hmac
from typing import Union

from btclib.alias import Octets
from btclib.to_prv_key import PrvKey
from btclib.to_pub_key import PubKey
from btclib.tx.out_point import OutPoint
from btclib.utils import bytes_from_octets

from bip47.exceptions import BIP47ValueError, InvalidLength, InvalidOpReturnPayload
from bip47.shared_secret import shared_secret

PAYLOAD_SIZE = 80
OP_RETURN_PREFIX = b"\x6a\x4c\x50"
SCRIPT_PUB_KEY_SIZE = len(OP_RETURN_PREFIX) + PAYLOAD_SIZE

# blinded payload ranges: pub_key x-coordinate and chain code
_X_RANGE = slice(3, 35)
_CHAIN_CODE_RANGE = slice(35, 67)

OutPointData = Union[OutPoint, Octets]


def bytes_from_out_point(out_point: OutPointData) -> bytes:
    "Return the 36 bytes serialization of an outpoint."

    try:
        if isinstance(out_point, OutPoint):
            return out_point.serialize()
        return bytes_from_octets(out_point, 36)
    except ValueError as e:
        raise BIP47ValueError(f"invalid outpoint: {e}") from e


def _mask(out_point: OutPointData, x: bytes) -> bytes:
    return hmac.new(bytes_from_out_point(out_point), x, "sha512").digest()


def _xor(a: bytes, b: bytes) -> bytes:
    return bytes(i ^ j for i, j in zip(a, b))


def _apply_mask(payload: Octets, mask: bytes) -> bytes:

    try:
        payload = bytes_from_octets(payload, PAYLOAD_SIZE)
    except ValueError as e:
        raise InvalidLength(f"invalid payment code payload: {e}") from e

    result = bytearray(payload)
    result[_X_RANGE] = _xor(payload[_X_RANGE], mask[:32])
    result[_CHAIN_CODE_RANGE] = _xor(payload[_CHAIN_CODE_RANGE], mask[32:])
    return bytes(result)


def blind(
    payload: Octets,
    notification_pub_key: PubKey,
    out_point: OutPointData,
    prv_key: PrvKey,
) -> bytes:
    """Return the blinded 80 bytes payment code.

    prv_key is the private key of the designated input,
    notification_pub_key the notification public key of the receiver.
    """

    secret = shared_secret(prv_key, notification_pub_key)
    return _apply_mask(payload, _mask(out_point, secret.x))


def unblind(
    blinded: Octets,
    designated_pub_key: PubKey,
    out_point: OutPointData,
    notification_prv_key: PrvKey,
) -> bytes:
    "Return the 80 bytes payment code from its blinded version."

    secret = shared_secret(notification_prv_key, designated_pub_key)
    return _apply_mask(blinded, _mask(out_point, secret.x))


def notification_script_pub_key(blinded: Octets) -> bytes:
    "Return the OP_RETURN script_pub_key carrying a blinded payment code."

    try:
        blinded = bytes_from_octets(blinded, PAYLOAD_SIZE)
    except ValueError as e:
        raise InvalidLength(f"invalid blinded payment code: {e}") from e
    return OP_RETURN_PREFIX + blinded


def payload_from_script_pub_key(script_pub_key: Octets) -> bytes:
    "Return the blinded payment code from an OP_RETURN script_pub_key."

    try:
        script_pub_key = bytes_from_octets(script_pub_key)
    except ValueError as e:
        raise InvalidOpReturnPayload(f"invalid OP_RETURN payload: {e}") from e

    if len(script_pub_key) != SCRIPT_PUB_KEY_SIZE:
        err_msg = f"invalid OP_RETURN payload size: {len(script_pub_key)}"
        err_msg += f" instead of {SCRIPT_PUB_KEY_SIZE}"
        raise InvalidOpReturnPayload(err_msg)
    if not script_pub_key.startswith(OP_RETURN_PREFIX):
        err_msg = f"invalid OP_RETURN payload prefix: 0x{script_pub_key[:3].hex()}"
        raise InvalidOpReturnPayload(err_msg)
    return script_pub_key[len(OP_RETURN_PREFIX) :]
