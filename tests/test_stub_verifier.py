def test_accepts_matching_proof(verifier, helper_module):
    statement = helper_module.transfer_statement("alice", "bob", 1, 1)
    proof = helper_module.stub_prove(statement)

    assert verifier.verify(statement=statement, proof=proof)


def test_rejects_mismatched_proof(verifier, helper_module):
    statement = helper_module.transfer_statement("alice", "bob", 1, 1)
    other = helper_module.transfer_statement("alice", "bob", 2, 1)

    assert not verifier.verify(statement=statement, proof=helper_module.stub_prove(other))


def test_rejects_malformed_input(verifier, helper_module):
    statement = helper_module.approve_statement("alice", "bob", 1, 1)

    assert not verifier.verify(statement=statement, proof="")
    assert not verifier.verify(statement="", proof=helper_module.stub_prove(""))
    assert not verifier.verify(statement=statement, proof="not-a-proof")
