"""
STUB PROOF VERIFIER

Development stand-in for a zero-knowledge verifier. A proof is accepted iff
  proof == sha3("XZKT:stub-proof|" + statement)

Anyone who can hash can "prove" anything, so this is NOT sound. It exists so
the token's transition logic can be exercised without a proving system.
"""

def expected_proof(statement: str):
    return hashlib.sha3("XZKT:stub-proof|" + statement)

@export
def verify(statement: str, proof: str):
    if not statement or not proof:
        return False
    return proof == expected_proof(statement)
