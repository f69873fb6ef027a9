""" bip47 build script for setuptools.

"""

from setuptools import find_packages, setup  # type: ignore

import bip47

with open("README.md", "r", encoding="ascii") as file_:
    longdescription = file_.read()

setup(
    name=bip47.name,
    version=bip47.__version__,
    license=bip47.__license__,
    author=bip47.__author__,
    author_email=bip47.__author_email__,
    description="BIP47 reusable payment codes",
    long_description=longdescription,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=["btclib>=2022.5.3,<2023"],
    extras_require={
        "secp256k1": ["btclib_libsecp256k1"],
        "test": ["pytest"],
        "docs": ["sphinx", "myst_parser", "sphinx_rtd_theme"],
    },
    keywords=(
        "bitcoin bip47 payment-code reusable-payment-code ecdh "
        "bip32 base58 bech32 segwit notification-transaction"
    ),
    python_requires=">=3.8",
    classifiers=[
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Natural Language :: English",
        "Operating System :: OS Independent",
        "Topic :: Security :: Cryptography",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
)
