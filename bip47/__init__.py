#!/usr/bin/env python3

# Copyright (C) The bip47 developers
#
# This file is part of bip47. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip47 including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"__init__ module for the bip47 package."

name = "bip47"
__version__ = "2024.6.1"
__author__ = "The bip47 developers"
__author_email__ = "devs@bip47.dev"
__copyright__ = "Copyright (C) 2024 The bip47 developers"
__license__ = "MIT License"
