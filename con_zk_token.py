"""
PROOF-GATED SHIELDED TOKEN

Accounts are opaque shielded identifiers. Nothing here interprets them; they
are only compared for equality and used as storage keys.

Every mutating call names the identity it acts for and carries a proof.
The contract derives the statement itself:
  sha3("XZKT:v1|" + "|".join(str(len(part)) + ":" + part))
over <contract>, <action>, <ids...>, <amount>, <nonce>
and hands (statement, proof) to the verifier contract named at genesis. Only
an accepted proof lets the transition run. The verifier cannot be replaced
after genesis, so no key other than a valid proof can move funds.

Balances and allowances live in [0, 2**128 - 1]. Supply is fixed at genesis:
  sum(balances) == total_supply
holds after every commit.
"""

# -----------------------------------------------------------------------------
# Parameters & Helpers
# -----------------------------------------------------------------------------

MAX_UINT128 = 2**128 - 1
MAX_UINT8 = 2**8 - 1

def domain_hash(*parts):
    # Length-prefixed so no part can spill into its neighbour
    s = "|".join(str(len(str(x))) + ":" + str(x) for x in parts)
    return hashlib.sha3("XZKT:v1|" + s)

def assert_amount(amount: int):
    assert isinstance(amount, int) and not isinstance(amount, bool), 'Overflow: amount outside uint128 domain'
    assert 0 <= amount <= MAX_UINT128, 'Overflow: amount outside uint128 domain'

def checked_add(a: int, b: int):
    total = a + b
    assert total <= MAX_UINT128, 'Overflow: uint128 addition'
    return total

def checked_sub(a: int, b: int, error: str):
    assert b <= a, error
    return a - b

# -----------------------------------------------------------------------------
# State
# -----------------------------------------------------------------------------

# identity -> int
balances = Hash(default_value=0)

# (owner, spender) -> int
allowances = Hash(default_value=0)

# identity -> int (monotonic, last consumed)
nonces = Hash(default_value=0)

# name, symbol, decimals, total_supply, verifier
metadata = Hash()

# tx_id -> {'kind': 'Transfer'|'Approval', ...}
event_log = Hash()

next_tx_id = Variable()

# Events
TransferEvent = LogEvent('Transfer', {
    'from': {'type': str, 'idx': True},
    'to': {'type': str, 'idx': True},
    'amount': {'type': int},
    'tx_id': {'type': int, 'idx': True}
})

ApprovalEvent = LogEvent('Approval', {
    'owner': {'type': str, 'idx': True},
    'spender': {'type': str, 'idx': True},
    'amount': {'type': int},
    'tx_id': {'type': int, 'idx': True}
})

# -----------------------------------------------------------------------------
# Construction
# -----------------------------------------------------------------------------

@construct
def seed(name: str, symbol: str, decimals: int, total_supply: int,
         genesis_id: str, verifier: str):
    assert 0 <= decimals <= MAX_UINT8, 'decimals must fit in 8 bits'
    assert_amount(total_supply)
    importlib.import_module(verifier)

    metadata['name'] = name
    metadata['symbol'] = symbol
    metadata['decimals'] = decimals
    metadata['verifier'] = verifier

    # Fixed at genesis; no mint or burn.
    metadata['total_supply'] = total_supply
    balances[genesis_id] = total_supply

    next_tx_id.set(1)

# -----------------------------------------------------------------------------
# Views
# -----------------------------------------------------------------------------

@export
def get_metadata():
    return {
        'name': metadata['name'],
        'symbol': metadata['symbol'],
        'decimals': metadata['decimals'],
        'total_supply': metadata['total_supply'],
        'verifier': metadata['verifier']
    }

@export
def token_name():
    return metadata['name']

@export
def token_symbol():
    return metadata['symbol']

@export
def token_decimals():
    return metadata['decimals']

@export
def total_supply():
    return metadata['total_supply']

@export
def balance_of(account_id: str):
    return balances[account_id]

@export
def allowance(owner_id: str, spender_id: str):
    return allowances[owner_id, spender_id]

@export
def get_nonce(account_id: str):
    return nonces[account_id]

@export
def get_verifier():
    return metadata['verifier']

@export
def event_count():
    return next_tx_id.get() - 1

@export
def get_event(tx_id: int):
    return event_log[tx_id]

# -----------------------------------------------------------------------------
# Authorization gate
# -----------------------------------------------------------------------------

def expect_nonce(account_id: str, provided: int):
    expected = nonces[account_id] + 1
    assert provided == expected, 'Unauthorized: bad nonce'

def authorize(statement: str, proof: str):
    verifier = importlib.import_module(metadata['verifier'])
    assert verifier.verify(statement=statement, proof=proof), 'Unauthorized: proof rejected'

def next_tx():
    tid = next_tx_id.get()
    next_tx_id.set(tid + 1)
    return tid

def emit_transfer(from_id: str, to_id: str, amount: int):
    tx_id = next_tx()
    event_log[tx_id] = {'kind': 'Transfer', 'from': from_id, 'to': to_id, 'amount': amount}
    TransferEvent({'from': from_id, 'to': to_id, 'amount': amount, 'tx_id': tx_id})

def emit_approval(owner_id: str, spender_id: str, amount: int):
    tx_id = next_tx()
    event_log[tx_id] = {'kind': 'Approval', 'owner': owner_id, 'spender': spender_id, 'amount': amount}
    ApprovalEvent({'owner': owner_id, 'spender': spender_id, 'amount': amount, 'tx_id': tx_id})

# -----------------------------------------------------------------------------
# Transitions
# -----------------------------------------------------------------------------

@export
def transfer(caller_id: str, recipient_id: str, amount: int, nonce: int, proof: str):
    assert_amount(amount)
    expect_nonce(caller_id, nonce)
    authorize(domain_hash(ctx.this, 'transfer', caller_id, recipient_id, amount, nonce), proof)

    sender_balance = checked_sub(balances[caller_id], amount, 'InsufficientBalance')
    if recipient_id != caller_id:
        recipient_balance = checked_add(balances[recipient_id], amount)

    # All checks passed; write.
    nonces[caller_id] = nonce
    if recipient_id != caller_id:
        balances[caller_id] = sender_balance
        balances[recipient_id] = recipient_balance

    emit_transfer(caller_id, recipient_id, amount)
    return True

@export
def approve(caller_id: str, spender_id: str, amount: int, nonce: int, proof: str):
    assert_amount(amount)
    expect_nonce(caller_id, nonce)
    authorize(domain_hash(ctx.this, 'approve', caller_id, spender_id, amount, nonce), proof)

    nonces[caller_id] = nonce
    # Overwrite, never accumulate.
    allowances[caller_id, spender_id] = amount

    emit_approval(caller_id, spender_id, amount)
    return True

@export
def transfer_from(spender_id: str, owner_id: str, recipient_id: str, amount: int,
                  nonce: int, proof: str):
    assert_amount(amount)
    expect_nonce(spender_id, nonce)
    authorize(domain_hash(ctx.this, 'transfer_from', spender_id, owner_id, recipient_id, amount, nonce), proof)

    new_allowance = checked_sub(allowances[owner_id, spender_id], amount, 'InsufficientAllowance')
    owner_balance = checked_sub(balances[owner_id], amount, 'InsufficientBalance')
    if recipient_id != owner_id:
        recipient_balance = checked_add(balances[recipient_id], amount)

    nonces[spender_id] = nonce
    allowances[owner_id, spender_id] = new_allowance
    if recipient_id != owner_id:
        balances[owner_id] = owner_balance
        balances[recipient_id] = recipient_balance

    emit_transfer(owner_id, recipient_id, amount)
    return True

# -----------------------------------------------------------------------------
# Invariants / Utilities
# -----------------------------------------------------------------------------

@export
def verify_supply_invariant():
    # Sum of stored balances should equal the genesis supply (if no rogue state)
    total = 0
    count = 0
    items = balances.all()
    for v in items:
        if v:
            total += int(v)
            count += 1
    expected = metadata['total_supply']
    return {
        'ok': total == expected,
        'sum': total,
        'expected': expected,
        'accounts': count
    }
