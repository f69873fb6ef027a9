#!/usr/bin/env python3

# Copyright (C) The bip47 developers
#
# This file is part of bip47. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip47 including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Exception classes.

All of them derive from btclib's BTClibValueError,
hence from the regular ValueError:
users only interested in discriminating bip47 failures
from those raised by other codebase can catch BIP47ValueError.

None of these errors is transient: retrying with the same input
always fails the same way.
"""

from btclib.exceptions import BTClibValueError


class BIP47ValueError(BTClibValueError):
    pass


class InvalidLength(BIP47ValueError):
    pass


class InvalidVersion(BIP47ValueError):
    pass


class ChecksumMismatch(BIP47ValueError):
    pass


class InvalidPrivateKey(BIP47ValueError):
    pass


class InvalidPublicKey(BIP47ValueError):
    pass


# a public key is just a curve point
InvalidPoint = InvalidPublicKey


class InvalidDerivedPublicKey(InvalidPublicKey):
    pass


class InvalidSharedSecret(BIP47ValueError):
    pass


class MissingPrivateKey(BIP47ValueError):
    pass


class UnknownAddressType(BIP47ValueError):
    pass


class InvalidOpReturnPayload(BIP47ValueError):
    pass


class MalformedDerivedKey(BIP47ValueError):
    pass
