#!/usr/bin/env python3

# Copyright (C) The bip47 developers
#
# This file is part of bip47. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip47 including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""BIP47 reusable payment codes.

A payment code payload is 80 bytes:

- [  : 1] version, only version 1 is supported
- [ 1: 2] features bitfield
- [ 2:35] compressed public key
- [35:67] chain code
- [67:80] reserved, zero-filled;
  bit 0 of byte 79 signals support for SegWit payment addresses

Its text form is the base58check encoding of the 0x47 marker
followed by the payload (e.g. "PM8TJTLJbPRGxSbc8EJi42Wrr6Qb...").

PaymentCode is the public payment code anybody can pay to:
it is parsed from its text or binary form and never carries
private keys.
PrivatePaymentCode is derived from a wallet seed:
it holds the private key of the payment code root,
it is needed to notify, to pay with a payment code as sender,
and to spend the payments received.

https://github.com/bitcoin/bips/blob/master/bip-0047.mediawiki
"""

import logging
from dataclasses import dataclass, field
from typing import Union

from btclib.alias import Octets, String
from btclib.base58 import b58decode, b58encode
from btclib.to_prv_key import PrvKey
from btclib.to_pub_key import PubKey

from bip47.address import address_from_pub_key
from bip47.blinding import (
    PAYLOAD_SIZE,
    OutPointData,
    blind,
    payload_from_script_pub_key,
    unblind,
)
from bip47.exceptions import (
    BIP47ValueError,
    ChecksumMismatch,
    InvalidLength,
    InvalidVersion,
    MalformedDerivedKey,
    MissingPrivateKey,
)
from bip47.key_tree import DerivedChild, KeyTree
from bip47.payment_key import payment_prv_key, payment_pub_key, receiver_payment_pub_key

logger = logging.getLogger(__name__)

# base58 marker, not to be confused with the payload version
PAYMENT_CODE_VERSION = b"\x47"
PAYLOAD_VERSION = 1
SEGWIT_FEATURE_BYTE = 79
SEGWIT_BIT = 0


@dataclass(frozen=True)
class PaymentCode:
    payload: bytes
    network: str

    def __init__(
        self, payload: Octets, network: str = "mainnet", check_validity: bool = True
    ) -> None:

        if isinstance(payload, str):
            try:
                payload = bytes.fromhex(payload)
            except ValueError as e:
                raise BIP47ValueError(f"invalid payment code hex-string: {e}") from e
        # copy, so that no mutable buffer is shared with the caller
        object.__setattr__(self, "payload", bytes(payload))
        object.__setattr__(self, "network", network)

        if check_validity:
            self.assert_valid()

    def assert_valid(self) -> None:

        if len(self.payload) != PAYLOAD_SIZE:
            err_msg = f"invalid payment code length: {len(self.payload)} bytes"
            err_msg += f" instead of {PAYLOAD_SIZE}"
            raise InvalidLength(err_msg)
        if self.payload[0] != PAYLOAD_VERSION:
            err_msg = f"invalid payment code version: {self.payload[0]}"
            err_msg += f" instead of {PAYLOAD_VERSION}"
            raise InvalidVersion(err_msg)
        # unknown network or invalid public key
        KeyTree.from_pub_key(self.pub_key, self.chain_code, self.network)

    @property
    def _key_tree(self) -> KeyTree:
        return KeyTree.from_pub_key(self.pub_key, self.chain_code, self.network)

    @property
    def version(self) -> int:
        return self.payload[0]

    @property
    def features(self) -> int:
        return self.payload[1]

    @property
    def pub_key(self) -> bytes:
        return self.payload[2:35]

    @property
    def chain_code(self) -> bytes:
        return self.payload[35:67]

    @property
    def segwit(self) -> bool:
        return bool(self.payload[SEGWIT_FEATURE_BYTE] >> SEGWIT_BIT & 1)

    def serialize(self, check_validity: bool = True) -> bytes:
        "Return the 80 bytes payload."

        if check_validity:
            self.assert_valid()
        return self.payload

    @classmethod
    def parse(
        cls, data: Octets, network: str = "mainnet", check_validity: bool = True
    ) -> "PaymentCode":
        "Return a PaymentCode from its 80 bytes payload."
        return cls(data, network, check_validity)

    def b58encode(self, check_validity: bool = True) -> str:
        "Return the base58 text form of the payment code."
        data = PAYMENT_CODE_VERSION + self.serialize(check_validity)
        return b58encode(data).decode("ascii")

    @classmethod
    def b58decode(
        cls, b58: String, network: str = "mainnet", check_validity: bool = True
    ) -> "PaymentCode":
        "Return a PaymentCode from its base58 text form."

        if isinstance(b58, str):
            b58 = b58.strip()
        try:
            data = b58decode(b58)
        except ValueError as e:
            raise ChecksumMismatch(f"invalid base58 payment code: {e}") from e

        if data[:1] != PAYMENT_CODE_VERSION:
            err_msg = f"invalid payment code marker: 0x{data[:1].hex()}"
            err_msg += f" instead of 0x{PAYMENT_CODE_VERSION.hex()}"
            raise InvalidVersion(err_msg)
        return cls.parse(data[1:], network, check_validity)

    def __str__(self) -> str:
        return self.b58encode(check_validity=False)

    def clone(self) -> "PaymentCode":
        return type(self)(self.payload, self.network)

    def derive(self, index: int) -> DerivedChild:
        "Return the public child key at the given index."
        return self._key_tree.derive(index)

    @property
    def notification_pub_key(self) -> bytes:
        return self._key_tree.notification_pub_key

    def notification_address(self) -> str:
        "Return the p2pkh notification address."
        return self._key_tree.notification_address()

    def derive_payment_pub_key(self, sender_prv_key: PrvKey, index: int) -> bytes:
        """Return the public key of the index-th payment to this payment code.

        sender_prv_key is the notification private key of the sender.
        """
        return payment_pub_key(sender_prv_key, self._key_tree, index)

    def get_payment_address(
        self, sender_prv_key: PrvKey, index: int, address_type: str = "p2pkh"
    ) -> str:
        "Return the address of the index-th payment to this payment code."
        pub_key = self.derive_payment_pub_key(sender_prv_key, index)
        return address_from_pub_key(pub_key, address_type, self.network)


Counterparty = Union[PaymentCode, "PrivatePaymentCode", PubKey]


def _counterparty_pub_key(counterparty: Counterparty) -> PubKey:
    if isinstance(counterparty, (PaymentCode, PrivatePaymentCode)):
        return counterparty.notification_pub_key
    return counterparty


@dataclass(frozen=True)
class PrivatePaymentCode:
    """Payment code along with the private key of its root.

    It is the only kind of payment code able
    to compute notification and payment private keys.
    """

    _public: PaymentCode = field(init=False)
    _key_tree: KeyTree = field(init=False, repr=False, compare=False)

    def __init__(self, key_tree: KeyTree, segwit: bool = False) -> None:

        if not key_tree.is_private:
            raise MissingPrivateKey("not a private key tree")

        pub_key = key_tree.pub_key
        if len(pub_key) != 33:
            err_msg = f"invalid derived public key length: {len(pub_key)} bytes"
            raise MalformedDerivedKey(err_msg)
        chain_code = key_tree.chain_code
        if len(chain_code) != 32:
            err_msg = f"invalid derived chain code length: {len(chain_code)} bytes"
            raise MalformedDerivedKey(err_msg)

        payload = bytearray(PAYLOAD_SIZE)
        payload[0] = PAYLOAD_VERSION
        payload[2:35] = pub_key
        payload[35:67] = chain_code
        if segwit:
            payload[SEGWIT_FEATURE_BYTE] |= 1 << SEGWIT_BIT

        object.__setattr__(self, "_public", PaymentCode(payload, key_tree.network))
        object.__setattr__(self, "_key_tree", key_tree.clone())

    @classmethod
    def from_seed(
        cls,
        seed: Octets,
        account: int = 0,
        network: str = "mainnet",
        segwit: bool = False,
    ) -> "PrivatePaymentCode":
        "Return the account payment code of a wallet seed."
        return cls(KeyTree.from_seed(seed, account, network), segwit)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PrivatePaymentCode):
            return NotImplemented
        return (
            self._public == other._public
            and self._key_tree.prv_key == other._key_tree.prv_key
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._public.b58encode()!r}, {self.network!r})"

    # the public side

    @property
    def payload(self) -> bytes:
        return self._public.payload

    @property
    def network(self) -> str:
        return self._public.network

    @property
    def version(self) -> int:
        return self._public.version

    @property
    def features(self) -> int:
        return self._public.features

    @property
    def pub_key(self) -> bytes:
        return self._public.pub_key

    @property
    def chain_code(self) -> bytes:
        return self._public.chain_code

    @property
    def segwit(self) -> bool:
        return self._public.segwit

    def serialize(self) -> bytes:
        return self._public.serialize()

    def b58encode(self) -> str:
        return self._public.b58encode()

    def to_public(self) -> PaymentCode:
        "Return the public payment code, without private keys."
        return self._public.clone()

    def clone(self) -> "PrivatePaymentCode":
        return type(self)(self._key_tree, self.segwit)

    @property
    def notification_pub_key(self) -> bytes:
        return self._public.notification_pub_key

    def notification_address(self) -> str:
        return self._public.notification_address()

    # the private side

    def derive(self, index: int) -> DerivedChild:
        "Return the child key pair at the given index."
        return self._key_tree.derive(index)

    @property
    def notification_prv_key(self) -> bytes:
        return self._key_tree.notification_prv_key

    def derive_payment_pub_key(self, counterparty: PaymentCode, index: int) -> bytes:
        "Return the public key of the index-th payment to the counterparty."
        if isinstance(counterparty, PrivatePaymentCode):
            counterparty = counterparty.to_public()
        return counterparty.derive_payment_pub_key(self.notification_prv_key, index)

    def get_payment_address(
        self, counterparty: PaymentCode, index: int, address_type: str = "p2pkh"
    ) -> str:
        "Return the address of the index-th payment to the counterparty."
        if isinstance(counterparty, PrivatePaymentCode):
            counterparty = counterparty.to_public()
        # on the network of the receiving payment code
        prv_key = self.notification_prv_key
        return counterparty.get_payment_address(prv_key, index, address_type)

    def derive_receive_pub_key(self, counterparty: Counterparty, index: int) -> bytes:
        """Return the public key of the index-th payment from the counterparty.

        The counterparty is the sender payment code
        or directly its notification public key.
        """
        sender_pub_key = _counterparty_pub_key(counterparty)
        return receiver_payment_pub_key(self._key_tree, sender_pub_key, index)

    def get_receive_address(
        self, counterparty: Counterparty, index: int, address_type: str = "p2pkh"
    ) -> str:
        "Return the address of the index-th payment from the counterparty."
        pub_key = self.derive_receive_pub_key(counterparty, index)
        return address_from_pub_key(pub_key, address_type, self.network)

    def derive_payment_prv_key(self, counterparty: Counterparty, index: int) -> bytes:
        "Return the private key of the index-th payment from the counterparty."
        sender_pub_key = _counterparty_pub_key(counterparty)
        return payment_prv_key(self._key_tree, sender_pub_key, index)

    def get_blinded_payment_code(
        self, destination: PaymentCode, out_point: OutPointData, prv_key: PrvKey
    ) -> bytes:
        """Return this payment code blinded for the destination.

        out_point and prv_key are the outpoint spent by the designated
        input of the notification transaction and its private key.
        """
        return blind(self.payload, destination.notification_pub_key, out_point, prv_key)

    def get_payment_code_from_notification_data(
        self,
        script_pub_key: Octets,
        out_point: OutPointData,
        designated_pub_key: PubKey,
    ) -> PaymentCode:
        """Return the sender payment code from a notification transaction.

        script_pub_key is the OP_RETURN output script,
        out_point and designated_pub_key are the outpoint spent by
        the designated input and the public key it exposes.
        """

        blinded = payload_from_script_pub_key(script_pub_key)
        payload = unblind(
            blinded, designated_pub_key, out_point, self.notification_prv_key
        )
        payment_code = PaymentCode(payload, self.network)
        logger.debug("notification from payment code %s", payment_code)
        return payment_code
