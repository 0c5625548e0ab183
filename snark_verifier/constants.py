# Copyright (C) 2025 Logical Mechanism LLC
# SPDX-License-Identifier: GPL-3.0-only

# domain tags
BATCH_DOMAIN_TAG = "GROTH16|BATCH|BN254|v1|".encode("utf-8").hex()
H2S_DOMAIN_TAG = "HASH|To|Scalar|v1|".encode("utf-8").hex()

# wire layout
WORD_SIZE = 32
FRAME_PREFIX_SIZE = 4
ABI_ARRAY_OFFSET = 0x20
PROOF_WORDS = 8
VK_ENCODING_VERSION = 1

# batches larger than this are refused before any curve arithmetic
MAX_BATCH_SIZE = 64
