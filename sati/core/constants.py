"""
Protocol constants shared with the on-chain program.

Changing any domain tag, seed string or offset is a breaking protocol change.
"""

# Domain separators (keccak-256 message prefixes)
DOMAIN_INTERACTION = b"SATI:interaction:v1"
DOMAIN_EVM_LINK = b"SATI:evm_link:v1"

# Program addresses
SATI_PROGRAM_ID = "satiR3q7XLdnMLZZjgDTaJLFTwV6VqZ5BZUph697Jvz"
SAS_PROGRAM_ID = "22zoJMtdu4tQc2PzL74ZUT7FrwgB1Udec8DdW4yw4BdG"
SYSTEM_PROGRAM_ID = "11111111111111111111111111111111"

# Light Protocol infrastructure
LIGHT_SYSTEM_PROGRAM = "SySTEM1eSU2p4BGQfQpimFEWWSC1XDFeun3Nqzz3rT7"
ACCOUNT_COMPRESSION_PROGRAM = "compr6CUsB5m2jS4Y3831ztGSTnDpnKJTKS95d64XVq"
NOOP_PROGRAM = "noopb9bkMVfRPU8AsbpTUg8AQkHtKwMYZiFUjNRtMmV"
REGISTERED_PROGRAM_PDA = "35hkDgaAKwMCaxRz2ocSZ6NaUrtKkyNqU6c4RV3tYJRh"

# V1 trees (mainnet compatible)
ADDRESS_TREE = "amt1Ayt45jfbdw5YSo7iz6WZxUmnZsQTYXy82hVwyC2"
ADDRESS_QUEUE = "aq1S9z4reTSQAdgWHGD2zDaS39sjGrAxbR31vxJ2F4F"
MERKLE_TREE_PUBKEY = "smt1NamzXdq4AMqS2fS2F1i5KTYPZRhoHgWx38d8WsT"
NULLIFIER_QUEUE_PUBKEY = "nfq1NvQDJ2GEgnS8zt9prAe8rjjpAW1zFkrvZoBR148"

# PDA seeds
CPI_AUTHORITY_SEED = b"cpi_authority"
ATTESTATION_SEED = b"attestation"
SATI_ATTESTATION_SEED = b"sati_attestation"
CREDENTIAL_SEED = b"credential"
SCHEMA_SEED = b"schema"
SATI_CREDENTIAL_NAME = b"SATI"
REPUTATION_SCHEMA_NAME = b"ReputationScore"
REPUTATION_SCHEMA_VERSION = 1

# BN254 scalar field modulus
BN254_FIELD_SIZE = 21888242871839275222246405745257275088548364400416034343698204186575808495617
