"""Python specification of an indexed Merkle tree for sorted set commitments."""
