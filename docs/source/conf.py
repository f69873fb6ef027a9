#!/usr/bin/env python3

# Copyright (C) The bip47 developers
#
# This file is part of bip47. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of bip47 including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"Sphinx configuration of the bip47 API documentation."

import bip47

project = bip47.name
project_copyright = bip47.__copyright__
author = bip47.__author__
release = bip47.__version__

extensions = [
    "myst_parser",
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
    "sphinx.ext.viewcode",
]

source_suffix = [".rst", ".md"]

exclude_patterns = ["_build"]

autodoc_member_order = "bysource"

html_theme = "sphinx_rtd_theme"
